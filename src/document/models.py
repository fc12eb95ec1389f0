"""Builder Document Models."""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ComponentNode(BaseModel):
    """A component instance on the builder canvas.

    ``children`` is owned by this node: removing a node removes its whole
    subtree. ``parent_id`` is a lookup key only, kept in sync by the
    repository.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Unique identifier")
    type: str = Field(..., min_length=1, description="Component slug from the registry")
    props: dict[str, Any] = Field(default_factory=dict)
    children: list["ComponentNode"] = Field(default_factory=list)
    parent_id: str | None = Field(default=None, alias="parentId")
    order: int = Field(default=0, description="Position among siblings")
    locked: bool = Field(default=False, description="Prevent editing/moving in the canvas")
    hidden: bool = Field(default=False, description="Hide in canvas")

    def walk(self):
        """Yield this node and every descendant, depth-first pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def subtree_ids(self) -> list[str]:
        return [node.id for node in self.walk()]


class NodeSpec(BaseModel):
    """What a caller supplies to add a component: everything but identity and position."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[ComponentNode] = Field(default_factory=list)
    locked: bool = Field(default=False)
    hidden: bool = Field(default=False)


class HistoryEntry(BaseModel):
    """Immutable snapshot of the forest and selection."""

    model_config = ConfigDict(frozen=True)

    timestamp: float = Field(default_factory=lambda: time.time() * 1000)
    components: tuple[ComponentNode, ...] = Field(default_factory=tuple)
    selected_id: str | None = Field(default=None)


ComponentNode.model_rebuild()
