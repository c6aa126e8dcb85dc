"""Exceptions raised at the dialogue-tree and configuration boundaries.

The layout, viewport, active-path and drag engines never raise for gesture
input; everything here belongs to loading data or configuration.
"""

from __future__ import annotations


class TreeConfigError(Exception):
    """Raised when dialogue tree data violates the rooted-tree invariant."""

    pass


class UnknownNodeError(KeyError):
    """Navigation or lookup referenced a node id the tree does not hold.

    Attributes:
        node_id: The id that failed to resolve
        known: Number of nodes currently in the tree
        message: Human-readable error message
    """

    def __init__(
        self,
        node_id: str,
        known: int = 0,
        message: str | None = None,
    ) -> None:
        self.node_id = node_id
        self.known = known
        self.message = message or self._default_message()
        super().__init__(self.message)

    def _default_message(self) -> str:
        return f"Unknown node '{self.node_id}' (tree holds {self.known} nodes)"

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message


class ConfigError(Exception):
    """Invalid value in a [tool.forking-paths] section.

    Attributes:
        key: Dotted name of the offending setting
        value: The rejected value
        message: Human-readable error message
    """

    def __init__(
        self,
        key: str,
        value: object,
        reason: str,
    ) -> None:
        self.key = key
        self.value = value
        self.message = (
            f"Invalid setting '{key}' = {value!r}\n\n"
            f"  -> {reason}\n\n"
            f"How to fix:\n"
            f"  Edit [tool.forking-paths] in pyproject.toml"
        )
        super().__init__(self.message)
