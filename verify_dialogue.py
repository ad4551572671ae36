import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from dialogue_engine.core.errors import GraphConstructionError
from dialogue_engine.graph.nodes import DialogueNode, NodeKind
from dialogue_engine.resources.loader import load_dialogue


def count_reachable(root: DialogueNode) -> int:
    seen: set[int] = set()
    stack = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.kind == NodeKind.MULTI_WAY:
            successors = [choice.next_node for choice in node.choices]
        else:
            successors = [node.get_next()]
        stack.extend(n for n in successors if n is not None)
    return len(seen)


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DialogueVerification")

    paths = [Path(p) for p in sys.argv[1:]] or sorted(Path("data/dialogue").glob("*.json"))
    if not paths:
        logger.error("VERIFICATION FAILED: no dialogue files found")
        sys.exit(1)

    failed = False
    for path in paths:
        try:
            root = load_dialogue(path)
            logger.info(f"{path}: OK ({count_reachable(root)} reachable nodes)")
        except (GraphConstructionError, OSError) as e:
            logger.error(f"{path}: {e}")
            failed = True

    if failed:
        logger.error("VERIFICATION FAILED")
        sys.exit(1)
    logger.info("VERIFICATION SUCCESSFUL: All dialogues loaded and validated.")


if __name__ == "__main__":
    main()
