"""Clipboard and subtree cloning."""

from core.id import IdGenerator
from .models import ComponentNode


def clone_subtree(node: ComponentNode, ids: IdGenerator) -> ComponentNode:
    """
    Deep-copy a subtree, giving every node in the copy a fresh id.

    Parent ids inside the copy are rewired to the new ids; the copy's root
    keeps the original's ``parent_id`` until it is inserted somewhere.

    Args:
        node: Subtree root to copy (left untouched)
        ids: Source of fresh ids

    Returns:
        Detached copy with all-new ids
    """
    clone = node.model_copy(deep=True)
    stack: list[tuple[ComponentNode, str | None]] = [(clone, node.parent_id)]
    while stack:
        current, parent_id = stack.pop()
        current.id = ids.generate()
        current.parent_id = parent_id
        for child in current.children:
            stack.append((child, current.id))
    return clone


class Clipboard:
    """One-slot clipboard holding a deep copy of a subtree."""

    def __init__(self) -> None:
        self._content: ComponentNode | None = None

    @property
    def empty(self) -> bool:
        return self._content is None

    def copy(self, node: ComponentNode) -> None:
        """Overwrite the slot with a deep copy of ``node``."""
        self._content = node.model_copy(deep=True)

    def peek(self) -> ComponentNode | None:
        """A fresh deep copy of the slot (ids unchanged), or None."""
        return self._content.model_copy(deep=True) if self._content is not None else None

    def clear(self) -> None:
        self._content = None
