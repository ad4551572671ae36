"""
Dialogue error taxonomy.

Only content construction fails loudly. Steady-state operations
(reveal, navigation, traversal) degrade instead of raising.
"""


class DialogueError(Exception):
    """Base class for dialogue engine errors."""


class GraphConstructionError(DialogueError, ValueError):
    """A dialogue graph could not be built from the given content."""


class NavigatorMisuseError(DialogueError):
    """A choice navigator operation was called while no choice was pending."""
