"""Canvas Handler."""

from core import get_logger
from document.dropzone import DropTargetResolver
from document.store import BuilderStore


logger = get_logger(__name__)


class CanvasHandler:
    """Translates canvas drag, hover and keyboard events into store operations.

    Locked nodes are protected here, not in the store: the store will
    happily move or remove a locked node when asked directly.
    """

    def __init__(self, store: BuilderStore) -> None:
        self.store = store
        self.resolver = DropTargetResolver(store)

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    def drag_start(self, active_id: str) -> None:
        self.store.set_dragging(True, active_id)

    def drag_end(self, active_id: str, over_id: str | None) -> bool:
        """Finish a drag; returns True if the drop moved a component."""
        self.store.set_dragging(False)

        node = self.store.find(active_id)
        if node is not None and node.locked:
            logger.debug("drop_rejected", reason="locked", node_id=active_id)
            return False

        return self.resolver.resolve(active_id, over_id)

    def hover(self, node_id: str | None) -> None:
        # Highlights would flicker under the dragged element
        if self.store.is_dragging:
            return
        self.store.hover(node_id)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def key_down(self, key: str, ctrl: bool = False, shift: bool = False, meta: bool = False) -> bool:
        """
        Handle a key press.

        Args:
            key: Key name as reported by the browser ("Delete", "z", ...)
            ctrl: Control held
            shift: Shift held
            meta: Command/Windows key held

        Returns:
            True if the key was a builder shortcut (caller should prevent default)
        """
        mod = ctrl or meta
        key_lower = key.lower()

        if key in ("Delete", "Backspace"):
            return self._remove_selected()

        if key == "Escape":
            self.store.select(None)
            return True

        if not mod:
            return False

        if key_lower == "z" and shift:
            self.store.redo()
            return True
        if key_lower == "z":
            self.store.undo()
            return True
        if key_lower == "y":
            self.store.redo()
            return True
        if key_lower == "s":
            self.store.save()
            return True
        if key_lower == "c":
            selected = self.store.selected_id
            if selected is not None:
                self.store.copy(selected)
            return selected is not None
        if key_lower == "v":
            selected = self.store.selected_node
            self.store.paste(selected.parent_id if selected is not None else None)
            return True
        if key_lower == "d":
            selected = self.store.selected_id
            if selected is not None:
                self.store.duplicate(selected)
            return selected is not None

        return False

    def _remove_selected(self) -> bool:
        node = self.store.selected_node
        if node is None:
            return False
        if node.locked:
            logger.debug("remove_rejected", reason="locked", node_id=node.id)
            return True
        self.store.remove(node.id)
        return True
