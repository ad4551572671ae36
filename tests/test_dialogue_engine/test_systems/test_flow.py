import asyncio
import pytest
from dialogue_engine.core.config import FlowConfig
from dialogue_engine.core.errors import DialogueError
from dialogue_engine.core.events import DialogueEvent, TextRole
from dialogue_engine.graph.nodes import MultiWayDialogue, OneWayDialogue
from dialogue_engine.systems.flow import FlowController


async def wait_until(predicate, timeout=2.0):
    """Yield to the loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


def of_type(received, event_type):
    return [e for e in received if e.type == event_type]


def dialogue_texts(received):
    return [
        e["text"] for e in of_type(received, DialogueEvent.REVEAL_PROGRESS)
        if e["role"] == TextRole.DIALOGUE_TEXT
    ]


def test_one_way_chain_advances_in_order(fast_config, event_bus):
    c = OneWayDialogue("C")
    b = OneWayDialogue("B", c)
    a = OneWayDialogue("A", b)
    controller = FlowController(fast_config, event_bus)
    seen = []

    async def scenario():
        task = asyncio.create_task(controller.run(a))
        for _ in range(3):
            await wait_until(lambda: controller.is_awaiting_advance)
            seen.append(controller.current_node)
            controller.trigger_advance()
        await task
        seen.append(controller.current_node)

    asyncio.run(scenario())

    assert seen == [a, b, c, None]
    assert not controller.is_running


def test_dialogue_is_bracketed_by_start_and_end(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(OneWayDialogue("Only line")))
        await wait_until(lambda: controller.is_awaiting_advance)
        controller.trigger_advance()
        await task

    asyncio.run(scenario())

    assert recorder[0].type == DialogueEvent.DIALOGUE_STARTED
    assert recorder[-1].type == DialogueEvent.DIALOGUE_ENDED
    assert recorder[-1]["completed"] is True
    assert len(of_type(recorder, DialogueEvent.NODE_ENTERED)) == 1


@pytest.mark.parametrize("move_right, expected_next", [(False, "X"), (True, None)])
def test_choice_selects_branch(fast_config, event_bus, recorder, move_right, expected_next):
    x = OneWayDialogue("X")
    question = MultiWayDialogue("Choose from", ["1", "2"], [x, None])
    controller = FlowController(fast_config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(question))
        await wait_until(lambda: controller.is_awaiting_choice)
        if move_right:
            controller.navigate_right()
        controller.confirm_choice()

        if expected_next is not None:
            await wait_until(lambda: controller.is_awaiting_advance)
            assert controller.current_node is x
            controller.trigger_advance()
        await task

    asyncio.run(scenario())

    entered = [e["node"].text for e in of_type(recorder, DialogueEvent.NODE_ENTERED)]
    assert entered == ["Choose from"] + ([expected_next] if expected_next else [])
    confirmed = [e["index"] for e in of_type(recorder, DialogueEvent.CHOICE_CONFIRMED)]
    assert confirmed == [1 if move_right else 0]


def test_choices_revealed_before_navigation(fast_config, event_bus, recorder):
    question = MultiWayDialogue("Q", ["Yes", "No"], [None, None])
    controller = FlowController(fast_config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(question))
        await wait_until(lambda: controller.is_awaiting_choice)
        controller.confirm_choice()
        await task

    asyncio.run(scenario())

    choice_events = [
        (e["slot"], e["text"]) for e in of_type(recorder, DialogueEvent.REVEAL_PROGRESS)
        if e["role"] == TextRole.CHOICE_TEXT
    ]
    assert choice_events == [(0, "Y"), (0, "Ye"), (0, "Yes"), (1, "N"), (1, "No")]

    kinds = [e.type for e in recorder]
    last_reveal = max(i for i, t in enumerate(kinds) if t == DialogueEvent.REVEAL_PROGRESS)
    first_highlight = kinds.index(DialogueEvent.CHOICE_HIGHLIGHTED)
    assert last_reveal < first_highlight


def test_navigation_ignored_outside_choice(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(OneWayDialogue("Line")))
        await wait_until(lambda: controller.is_awaiting_advance)
        controller.navigate_up()
        controller.navigate_left()
        controller.confirm_choice()
        controller.trigger_advance()
        await task

    asyncio.run(scenario())

    assert of_type(recorder, DialogueEvent.CHOICE_HIGHLIGHTED) == []
    assert of_type(recorder, DialogueEvent.CHOICE_CONFIRMED) == []


def test_skip_fast_forwards_current_line_only(event_bus, recorder):
    config = FlowConfig(reveal_interval=0.005, cooldown=0.0, choice_cooldown=0.0)
    second = OneWayDialogue("Bye")
    first = OneWayDialogue("Hello", second)
    controller = FlowController(config, event_bus)

    def skip_first_line(event):
        if event["text"] == "H":
            controller.trigger_skip()

    event_bus.subscribe(DialogueEvent.REVEAL_PROGRESS, skip_first_line, weak=False)

    async def scenario():
        task = asyncio.create_task(controller.run(first))
        await wait_until(lambda: controller.is_awaiting_advance)
        # No reveal in flight: nothing to skip, must not leak into the next node
        controller.trigger_skip()
        controller.trigger_advance()
        await wait_until(lambda: controller.is_awaiting_advance and controller.current_node is second)
        controller.trigger_advance()
        await task

    asyncio.run(scenario())

    assert dialogue_texts(recorder) == ["H", "Hello", "B", "By", "Bye"]


def test_advance_during_reveal_only_skips(event_bus, recorder):
    config = FlowConfig(reveal_interval=10.0, cooldown=0.0, choice_cooldown=0.0)
    line = OneWayDialogue("Slow line")
    controller = FlowController(config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(line))
        await wait_until(lambda: len(dialogue_texts(recorder)) == 1)
        controller.trigger_advance()
        await wait_until(lambda: controller.is_awaiting_advance)
        assert controller.current_node is line
        controller.trigger_advance()
        await task

    asyncio.run(scenario())

    assert dialogue_texts(recorder) == ["S", "Slow line"]


def test_cooldown_is_not_skippable(event_bus):
    config = FlowConfig(reveal_interval=0.0, cooldown=0.05, choice_cooldown=0.0)
    controller = FlowController(config, event_bus)

    async def scenario():
        loop = asyncio.get_running_loop()
        start = loop.time()
        task = asyncio.create_task(controller.run(OneWayDialogue("A")))
        await asyncio.sleep(0)
        controller.trigger_skip()
        controller.trigger_advance()
        await wait_until(lambda: controller.is_awaiting_advance)
        waited = loop.time() - start
        controller.trigger_advance()
        await task
        return waited

    assert asyncio.run(scenario()) >= 0.05 * 0.9


def test_multi_way_without_choices_ends_dialogue(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)

    asyncio.run(controller.run(MultiWayDialogue("Broken node")))

    assert of_type(recorder, DialogueEvent.CHOICE_HIGHLIGHTED) == []
    assert recorder[-1].type == DialogueEvent.DIALOGUE_ENDED
    assert recorder[-1]["completed"] is True


def test_none_root_ends_immediately(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)

    asyncio.run(controller.run(None))

    assert [e.type for e in recorder] == [DialogueEvent.DIALOGUE_STARTED, DialogueEvent.DIALOGUE_ENDED]


def test_cancelled_session_reports_incomplete_end(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)

    async def scenario():
        task = asyncio.create_task(controller.run(OneWayDialogue("Waiting forever")))
        await wait_until(lambda: controller.is_awaiting_advance)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert recorder[-1].type == DialogueEvent.DIALOGUE_ENDED
    assert recorder[-1]["completed"] is False
    assert not controller.is_running
    assert controller.current_node is None


def test_run_twice_is_rejected(fast_config, event_bus):
    controller = FlowController(fast_config, event_bus)
    line = OneWayDialogue("A")

    async def scenario():
        task = asyncio.create_task(controller.run(line))
        await wait_until(lambda: controller.is_awaiting_advance)
        with pytest.raises(DialogueError):
            await controller.run(line)
        controller.trigger_advance()
        await task

    asyncio.run(scenario())


def test_controller_can_replay_after_end(fast_config, event_bus, recorder):
    controller = FlowController(fast_config, event_bus)
    question = MultiWayDialogue("Q", ["a", "b", "c"], [None, None, None])

    async def play(select_down):
        task = asyncio.create_task(controller.run(question))
        await wait_until(lambda: controller.is_awaiting_choice)
        if select_down:
            controller.navigate_down()
        controller.confirm_choice()
        await task

    async def scenario():
        await play(False)
        await play(True)

    asyncio.run(scenario())

    confirmed = [e["index"] for e in of_type(recorder, DialogueEvent.CHOICE_CONFIRMED)]
    assert confirmed == [0, 2]
    assert len(of_type(recorder, DialogueEvent.DIALOGUE_ENDED)) == 2
