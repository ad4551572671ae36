"""
Dialogue Demo

Demonstrates:
- Typewriter reveal with skip
- Advance waits on one-way lines
- 2-column choice grid with wrap-around navigation

Controls:
- Space/Z: Advance (also skips the reveal)
- X: Skip reveal
- Arrow keys: Move between choices
- Enter: Confirm choice
- O: Restart the dialogue once it has ended
- Escape: Quit
"""

import sys
import asyncio
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pygame

from dialogue_engine.core.config import load_config
from dialogue_engine.core.events import EventBus
from dialogue_engine.input.handler import DialogueInputRouter, InputHandler
from dialogue_engine.resources.loader import load_dialogue
from dialogue_engine.systems.flow import FlowController
from dialogue_engine.ui.presenter import DialoguePresenter, DialogueView

ROOT = Path(__file__).parent.parent
WIDTH, HEIGHT = 960, 540
FPS = 60

TEXT_COLOR = (255, 255, 255)
HIGHLIGHT_COLOR = (255, 230, 0)
BOX_COLOR = (25, 25, 40)
BORDER_COLOR = (100, 100, 130)

logger = logging.getLogger(__name__)


def draw(screen: pygame.Surface, font: pygame.font.Font, view: DialogueView, columns: int) -> None:
    screen.fill((0, 0, 0))
    if not view.visible:
        hint = font.render("Press O to start the dialogue", True, TEXT_COLOR)
        screen.blit(hint, (20, 20))
        return

    box = pygame.Rect(20, HEIGHT - 220, WIDTH - 40, 200)
    pygame.draw.rect(screen, BOX_COLOR, box, border_radius=8)
    pygame.draw.rect(screen, BORDER_COLOR, box, width=2, border_radius=8)

    y = box.y + 12
    if view.speaker:
        screen.blit(font.render(view.speaker, True, HIGHLIGHT_COLOR), (box.x + 14, y))
        y += 30
    screen.blit(font.render(view.text, True, TEXT_COLOR), (box.x + 14, y))

    for slot, label in sorted(view.choices.items()):
        row, col = divmod(slot, columns)
        color = HIGHLIGHT_COLOR if slot == view.highlighted else TEXT_COLOR
        prefix = "> " if slot == view.highlighted else "  "
        pos = (box.x + 40 + col * 300, y + 50 + row * 30)
        screen.blit(font.render(prefix + label, True, color), pos)


def report_session(task: asyncio.Task) -> None:
    """Retrieve a finished session's outcome so failures are not lost."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Dialogue session failed", exc_info=error)


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption("Dialogue Demo")
    font = pygame.font.Font(None, 28)

    config = load_config(ROOT / "data" / "config" / "flow.json")
    root = load_dialogue(ROOT / "data" / "dialogue" / "first_dialogue.json")

    events = EventBus()
    presenter = DialoguePresenter(events)
    controller = FlowController(config, events)
    input_handler = InputHandler()
    router = DialogueInputRouter(input_handler, controller)

    task = None
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_o:
                if task is None or task.done():
                    task = asyncio.create_task(controller.run(root))
                    task.add_done_callback(report_session)
            input_handler.process_event(event)

        input_handler.update()
        router.dispatch()

        draw(screen, font, presenter.view, config.columns)
        pygame.display.flip()
        await asyncio.sleep(1 / FPS)

    if task is not None and not task.done():
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    pygame.quit()


if __name__ == "__main__":
    asyncio.run(main())
