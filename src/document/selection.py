"""Selection and hover cursors."""

from dataclasses import dataclass
from typing import Iterable


@dataclass
class SelectionState:
    """Two independent nullable id slots.

    Nothing is validated when a slot is set; the store prunes slots
    when the nodes they name leave the forest.
    """

    selected_id: str | None = None
    hovered_id: str | None = None

    def select(self, node_id: str | None) -> None:
        self.selected_id = node_id

    def hover(self, node_id: str | None) -> None:
        self.hovered_id = node_id

    def prune(self, removed_ids: Iterable[str]) -> bool:
        """Clear any slot naming a removed id. Returns True if a slot changed."""
        removed = set(removed_ids)
        changed = False
        if self.selected_id is not None and self.selected_id in removed:
            self.selected_id = None
            changed = True
        if self.hovered_id is not None and self.hovered_id in removed:
            self.hovered_id = None
            changed = True
        return changed

    def clear(self) -> None:
        self.selected_id = None
        self.hovered_id = None
