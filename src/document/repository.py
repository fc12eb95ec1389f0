"""Node Repository - the canonical forest of component nodes.

Nodes stay nested (each node owns its ``children`` list) and an id index
sits beside them, so lookups anywhere in the forest are O(1) while the
tree shape is still what gets serialized and snapshotted.
"""

from typing import Iterator

from core import get_logger, ValidationError
from .models import ComponentNode

logger = get_logger(__name__)


class NodeRepository:
    """Owns root ordering, the id index and the structural primitives.

    Every primitive leaves sibling ``order`` equal to array position and
    ``parent_id`` equal to the containing node's id.
    """

    def __init__(self, roots: list[ComponentNode] | None = None) -> None:
        self._roots: list[ComponentNode] = []
        self._index: dict[str, ComponentNode] = {}
        self.replace(roots or [])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def roots(self) -> list[ComponentNode]:
        """Root nodes in display order (the list is a copy, the nodes are live)."""
        return list(self._roots)

    def find(self, node_id: str | None) -> ComponentNode | None:
        if node_id is None:
            return None
        return self._index.get(node_id)

    def path_to(self, node_id: str) -> list[ComponentNode]:
        """Ancestor chain root -> node, inclusive. Empty if the id is unknown."""
        path: list[ComponentNode] = []
        node = self._index.get(node_id)
        while node is not None:
            path.append(node)
            node = self._index.get(node.parent_id) if node.parent_id else None
        path.reverse()
        return path

    def children_of(self, parent_id: str | None) -> list[ComponentNode] | None:
        """The live sibling list under ``parent_id`` (roots for None), or None if unknown."""
        if parent_id is None:
            return self._roots
        parent = self._index.get(parent_id)
        return parent.children if parent is not None else None

    def position_of(self, node_id: str) -> int | None:
        node = self._index.get(node_id)
        if node is None:
            return None
        siblings = self.children_of(node.parent_id)
        for position, sibling in enumerate(siblings or []):
            if sibling is node:
                return position
        return None

    def is_ancestor(self, ancestor_id: str, node_id: str) -> bool:
        """True if ``ancestor_id`` is ``node_id`` itself or lies on its path to the root."""
        node = self._index.get(node_id)
        while node is not None:
            if node.id == ancestor_id:
                return True
            node = self._index.get(node.parent_id) if node.parent_id else None
        return False

    def ids(self) -> set[str]:
        return set(self._index)

    def walk(self) -> Iterator[ComponentNode]:
        """Every node, depth-first in display order."""
        for root in self._roots:
            yield from root.walk()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def snapshot(self) -> list[ComponentNode]:
        """Deep copy of the forest."""
        return [root.model_copy(deep=True) for root in self._roots]

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def replace(self, roots: list[ComponentNode]) -> None:
        """Adopt ``roots`` as the whole forest.

        Rewrites parent ids and sibling orders from the actual containment.

        Raises:
            ValidationError: If an id appears more than once
        """
        index: dict[str, ComponentNode] = {}
        stack: list[tuple[list[ComponentNode], str | None]] = [(roots, None)]
        while stack:
            siblings, parent_id = stack.pop()
            for position, node in enumerate(siblings):
                if node.id in index:
                    raise ValidationError(f"Duplicate component id: {node.id}")
                index[node.id] = node
                node.parent_id = parent_id
                node.order = position
                if node.children:
                    stack.append((node.children, node.id))

        self._roots = roots
        self._index = index

    def insert(self, node: ComponentNode, parent_id: str | None, position: int) -> bool:
        """Insert a detached subtree under ``parent_id`` at ``position``.

        Positions past the end append. Returns False (nothing changes) if the
        parent is unknown.

        Raises:
            ValidationError: If any id in the subtree is already present
        """
        siblings = self.children_of(parent_id)
        if siblings is None:
            return False

        incoming = node.subtree_ids()
        clashes = [node_id for node_id in incoming if node_id in self._index]
        if clashes or len(set(incoming)) != len(incoming):
            raise ValidationError(f"Component ids already in use: {clashes or incoming}")

        position = max(0, min(position, len(siblings)))
        node.parent_id = parent_id
        siblings.insert(position, node)
        self._renumber(siblings)
        self._index_subtree(node)
        return True

    def detach(self, node_id: str) -> ComponentNode | None:
        """Remove a node (with its subtree) from the forest and return it."""
        node = self._index.get(node_id)
        if node is None:
            return None

        siblings = self.children_of(node.parent_id)
        position = self.position_of(node_id)
        if siblings is None or position is None:
            # Index and tree disagree; refuse rather than corrupt further
            logger.error("repository_inconsistent", node_id=node_id, parent_id=node.parent_id)
            return None

        del siblings[position]
        self._renumber(siblings)
        for descendant in node.walk():
            self._index.pop(descendant.id, None)
        node.parent_id = None
        return node

    def _index_subtree(self, node: ComponentNode) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            self._index[current.id] = current
            for position, child in enumerate(current.children):
                child.parent_id = current.id
                child.order = position
                stack.append(child)

    @staticmethod
    def _renumber(siblings: list[ComponentNode]) -> None:
        for position, sibling in enumerate(siblings):
            sibling.order = position
