"""
Builder Store - the visual builder's document model.

One instance per open page, injected into whatever needs it (canvas,
inspector, autosave). Every public operation runs to completion before
listeners hear about it, so observers never see a half-applied edit.

Missing ids are silent no-ops: the operation returns False/None and
nothing changes. Every successful change to the forest marks the page
dirty and pushes exactly one history entry.
"""

import asyncio
import copy
import time
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError

from core import get_logger, LogContext, ValidationError
from core.id import Generator, IdGenerator
from core.validate import NodeUpdate
from .clipboard import Clipboard, clone_subtree
from .history import HistoryManager
from .models import ComponentNode, HistoryEntry, NodeSpec
from .repository import NodeRepository
from .selection import SelectionState
from .serialize import deserialize_forest
from .types import CodeGenerator, PersistenceGateway
from .view import RightPanelTab, ViewportMode, ViewState

logger = get_logger(__name__)

Listener = Callable[["BuilderStore"], None]


class BuilderStore:
    """Component forest, selection, clipboard and undo history for one page."""

    def __init__(
        self,
        gateway: PersistenceGateway | None = None,
        ids: IdGenerator | None = None,
        max_history: int = 50,
        min_zoom: int = 25,
        max_zoom: int = 200,
    ) -> None:
        """
        Initialize an empty store (no page open).

        Args:
            gateway: Where save()/load_page() send and fetch pages
            ids: Source of fresh component ids
            max_history: Undo history bound
            min_zoom: Lower zoom clamp (percent)
            max_zoom: Upper zoom clamp (percent)
        """
        self.gateway = gateway
        self.ids: IdGenerator = ids or Generator()
        self.max_history = max_history
        self._zoom_bounds = (min_zoom, max_zoom)
        self._listeners: list[Listener] = []
        # Bumped by every change that makes the page differ from what was saved
        self.revision = 0
        self._init_state()

    def _init_state(self) -> None:
        # Page
        self.page_id: str | None = None
        self.page_path: str | None = None
        self.is_dirty = False
        self.last_saved: int | None = None

        # Document
        self.repository = NodeRepository()
        self.selection = SelectionState()
        self.clipboard = Clipboard()
        self.history = HistoryManager(self.max_history)

        # UI
        self.view = ViewState(min_zoom=self._zoom_bounds[0], max_zoom=self._zoom_bounds[1])
        self.is_dragging = False
        self.dragged_id: str | None = None

    # ========================================================================
    # Subscriptions
    # ========================================================================

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every completed state change.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("listener_failed", error=str(e), exc_info=True)

    def _touch(self) -> None:
        self.is_dirty = True
        self.revision += 1

    def _commit(self, event: str, **context: Any) -> None:
        """Finish a successful forest change: dirty, snapshot, log, notify."""
        self._touch()
        self.push_history()
        logger.info(event, page_id=self.page_id, **context)
        self._notify()

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def components(self) -> list[ComponentNode]:
        """Root-level components in display order."""
        return self.repository.roots()

    @property
    def selected_id(self) -> str | None:
        return self.selection.selected_id

    @property
    def hovered_id(self) -> str | None:
        return self.selection.hovered_id

    @property
    def selected_node(self) -> ComponentNode | None:
        return self.repository.find(self.selection.selected_id)

    @property
    def node_count(self) -> int:
        return len(self.repository)

    def find(self, node_id: str) -> ComponentNode | None:
        """Locate a node anywhere in the forest."""
        return self.repository.find(node_id)

    def path_to(self, node_id: str) -> list[ComponentNode]:
        """Ancestors of a node, root first, ending with the node itself."""
        return self.repository.path_to(node_id)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    # ========================================================================
    # Page
    # ========================================================================

    def open_page(
        self,
        page_id: str,
        page_path: str | None,
        components: list[ComponentNode] | list[dict[str, Any]],
    ) -> None:
        """
        Replace the document with a page's forest.

        History restarts with the loaded forest as its first entry, which
        undo never goes past.

        Raises:
            ValidationError: If the components are malformed or share ids
        """
        if components and not isinstance(components[0], ComponentNode):
            roots = deserialize_forest(components)
        else:
            roots = [node.model_copy(deep=True) for node in components]

        self.repository.replace(roots)
        self.revision += 1
        self.page_id = page_id
        self.page_path = page_path
        self.selection.clear()
        self.is_dirty = False
        self.is_dragging = False
        self.dragged_id = None
        self.history.clear()
        self.push_history()

        logger.info("page_opened", page_id=page_id, path=page_path, nodes=len(self.repository))
        self._notify()

    def load_page(self, page_id: str, page_path: str | None = None) -> None:
        """
        Fetch a page through the gateway and open it.

        Raises:
            RuntimeError: If the store has no gateway
            PersistenceError: If the gateway cannot produce the page
        """
        if self.gateway is None:
            raise RuntimeError("No persistence gateway configured")

        with LogContext(page_id=page_id):
            components = self.gateway.load(page_id)
            self.open_page(page_id, page_path, components)

    def _can_save(self) -> bool:
        if self.page_id is None or self.gateway is None:
            logger.debug("save_skipped", page_id=self.page_id, has_gateway=self.gateway is not None)
            return False
        return True

    def save(self) -> bool:
        """
        Send the current forest to the gateway.

        Returns:
            True if saved; the dirty flag is cleared only then
        """
        if not self._can_save():
            return False

        page_id, revision = self.page_id, self.revision
        ok = self.gateway.save(page_id, self.repository.snapshot())
        return self._finish_save(page_id, revision, ok)

    async def save_async(self) -> bool:
        """
        Like save(), with the gateway call run in the default executor.

        The snapshot is taken before the request goes out. Edits made while
        it is in flight keep the page dirty for the next save.
        """
        if not self._can_save():
            return False

        page_id, revision = self.page_id, self.revision
        snapshot = self.repository.snapshot()
        loop = asyncio.get_running_loop()
        ok = await loop.run_in_executor(None, self.gateway.save, page_id, snapshot)
        return self._finish_save(page_id, revision, ok)

    def _finish_save(self, page_id: str, revision: int, ok: bool) -> bool:
        with LogContext(page_id=page_id):
            if not ok:
                logger.warning("save_failed")
                return False

            if page_id != self.page_id:
                # Another page was opened while the request was in flight
                logger.info("save_superseded", current_page=self.page_id)
                return True

            if revision == self.revision:
                self.is_dirty = False
            else:
                logger.info("save_outdated", saved_revision=revision, revision=self.revision)
            self.last_saved = int(time.time() * 1000)
            logger.info("page_saved", revision=revision, dirty=self.is_dirty)

        self._notify()
        return True

    def autosave(self) -> bool:
        """Save only when there are unsaved changes."""
        if not self.is_dirty:
            return False
        return self.save()

    async def autosave_async(self) -> bool:
        """autosave() without blocking the event loop on the gateway."""
        if not self.is_dirty:
            return False
        return await self.save_async()

    def mark_dirty(self) -> None:
        self._touch()
        self._notify()

    def reset(self) -> None:
        """Close the page: drop forest, history, clipboard and view state."""
        self._init_state()
        self.revision += 1
        logger.info("store_reset")
        self._notify()

    def export_source(self, generator: CodeGenerator) -> str:
        """Render the forest to source text with ``generator`` (given a copy)."""
        return generator.generate(self.repository.snapshot())

    # ========================================================================
    # Components
    # ========================================================================

    def add(self, spec: NodeSpec | dict[str, Any], parent_id: str | None = None) -> str | None:
        """
        Append a new component as the last child of ``parent_id`` (or last root).

        The new node and every child in ``spec`` get fresh ids. The new node
        becomes the selection.

        Returns:
            New node id, or None if ``parent_id`` is unknown

        Raises:
            ValidationError: If ``spec`` is malformed
        """
        if not isinstance(spec, NodeSpec):
            try:
                spec = NodeSpec.model_validate(spec)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid component definition: {e}") from e

        siblings = self.repository.children_of(parent_id)
        if siblings is None:
            logger.debug("add_skipped", reason="parent_not_found", parent_id=parent_id)
            return None

        template = ComponentNode(
            id="pending",
            type=spec.type,
            props=spec.props,
            children=spec.children,
            locked=spec.locked,
            hidden=spec.hidden,
        )
        node = clone_subtree(template, self.ids)
        self.repository.insert(node, parent_id, len(siblings))
        self.selection.select(node.id)

        self._commit("node_added", node_id=node.id, type=node.type, parent_id=parent_id)
        return node.id

    def remove(self, node_id: str) -> bool:
        """
        Remove a node and its subtree.

        Selection/hover naming any removed node are cleared.
        """
        node = self.repository.detach(node_id)
        if node is None:
            logger.debug("remove_skipped", reason="not_found", node_id=node_id)
            return False

        removed = node.subtree_ids()
        self.selection.prune(removed)
        if self.dragged_id in removed:
            self.dragged_id = None

        self._commit("node_removed", node_id=node_id, removed=len(removed))
        return True

    def update(self, node_id: str, changes: NodeUpdate | dict[str, Any] | None = None, **fields: Any) -> bool:
        """
        Merge inspector edits (type, props, locked, hidden) into a node.

        ``props`` replaces the node's props as a whole.

        Returns:
            True if the node existed and something actually changed

        Raises:
            ValidationError: If a field is unknown, structural, or ill-typed
        """
        if not isinstance(changes, NodeUpdate):
            try:
                changes = NodeUpdate.model_validate({**(changes or {}), **fields})
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid component update: {e}") from e

        node = self.repository.find(node_id)
        if node is None:
            logger.debug("update_skipped", reason="not_found", node_id=node_id)
            return False

        applied = {
            field: value for field, value in changes.changes().items() if getattr(node, field) != value
        }
        if not applied:
            return False

        for field, value in applied.items():
            setattr(node, field, copy.deepcopy(value))

        self._commit("node_updated", node_id=node_id, fields=sorted(applied))
        return True

    def move(self, node_id: str, new_parent_id: str | None, new_order: int) -> bool:
        """
        Move a node (subtree intact) under ``new_parent_id`` at ``new_order``.

        ``new_order`` indexes the destination's children after the node has
        been taken out; values past the end append. Unknown ids, moves into
        the node's own subtree, and moves that leave the node where it was
        are no-ops.
        """
        node = self.repository.find(node_id)
        if node is None:
            logger.debug("move_skipped", reason="not_found", node_id=node_id)
            return False

        if new_parent_id is not None:
            if new_parent_id not in self.repository:
                logger.debug("move_skipped", reason="parent_not_found", parent_id=new_parent_id)
                return False
            if self.repository.is_ancestor(node_id, new_parent_id):
                logger.debug("move_skipped", reason="cycle", node_id=node_id, parent_id=new_parent_id)
                return False

        new_order = max(0, new_order)
        old_parent_id = node.parent_id
        old_order = self.repository.position_of(node_id)

        if old_parent_id == new_parent_id:
            siblings = self.repository.children_of(new_parent_id) or []
            if min(new_order, len(siblings) - 1) == old_order:
                return False

        # All checks done; detach and insert cannot fail from here
        self.repository.detach(node_id)
        self.repository.insert(node, new_parent_id, new_order)

        self._commit(
            "node_moved",
            node_id=node_id,
            from_parent=old_parent_id,
            to_parent=new_parent_id,
            order=node.order,
        )
        return True

    def duplicate(self, node_id: str) -> str | None:
        """
        Copy a subtree (all-new ids) to sit right after the original, and select it.

        Returns:
            Id of the copy, or None if ``node_id`` is unknown
        """
        node = self.repository.find(node_id)
        if node is None:
            logger.debug("duplicate_skipped", reason="not_found", node_id=node_id)
            return None

        clone = clone_subtree(node, self.ids)
        position = self.repository.position_of(node_id)
        self.repository.insert(clone, node.parent_id, (position or 0) + 1)
        self.selection.select(clone.id)

        self._commit("node_duplicated", node_id=node_id, copy_id=clone.id)
        return clone.id

    # ========================================================================
    # Clipboard
    # ========================================================================

    def copy(self, node_id: str) -> bool:
        """Put a deep copy of a subtree on the clipboard, replacing what was there."""
        node = self.repository.find(node_id)
        if node is None:
            logger.debug("copy_skipped", reason="not_found", node_id=node_id)
            return False

        self.clipboard.copy(node)
        logger.debug("node_copied", node_id=node_id)
        self._notify()
        return True

    def paste(self, parent_id: str | None = None) -> str | None:
        """
        Add a fresh copy of the clipboard under ``parent_id`` (or at root).

        Pasting repeatedly yields independent subtrees.

        Returns:
            Id of the pasted root, or None if the clipboard is empty or the
            parent is unknown
        """
        content = self.clipboard.peek()
        if content is None:
            logger.debug("paste_skipped", reason="clipboard_empty")
            return None

        spec = NodeSpec(
            type=content.type,
            props=content.props,
            children=content.children,
            locked=content.locked,
            hidden=content.hidden,
        )
        return self.add(spec, parent_id)

    # ========================================================================
    # Selection
    # ========================================================================

    def select(self, node_id: str | None) -> None:
        self.selection.select(node_id)
        self._notify()

    def hover(self, node_id: str | None) -> None:
        self.selection.hover(node_id)
        self._notify()

    def set_dragging(self, is_dragging: bool, dragged_id: str | None = None) -> None:
        self.is_dragging = is_dragging
        self.dragged_id = dragged_id if is_dragging else None
        self._notify()

    # ========================================================================
    # History
    # ========================================================================

    def push_history(self) -> HistoryEntry:
        """Snapshot the current forest and selection."""
        return self.history.push(self.repository.roots(), self.selection.selected_id)

    def undo(self) -> bool:
        """Restore the previous snapshot. False at the earliest entry."""
        entry = self.history.undo()
        if entry is None:
            return False
        self._restore(entry)
        logger.info("undo", page_id=self.page_id, cursor=self.history.cursor)
        self._notify()
        return True

    def redo(self) -> bool:
        """Restore the next snapshot. False at the latest entry."""
        entry = self.history.redo()
        if entry is None:
            return False
        self._restore(entry)
        logger.info("redo", page_id=self.page_id, cursor=self.history.cursor)
        self._notify()
        return True

    def _restore(self, entry: HistoryEntry) -> None:
        self.repository.replace([node.model_copy(deep=True) for node in entry.components])
        self.selection.select(entry.selected_id)
        if self.selection.hovered_id not in self.repository:
            self.selection.hover(None)
        if self.dragged_id is not None and self.dragged_id not in self.repository:
            self.dragged_id = None
        # Differs from what was last saved
        self._touch()

    # ========================================================================
    # View
    # ========================================================================

    def set_viewport_mode(self, mode: ViewportMode | str) -> None:
        self.view.viewport_mode = ViewportMode(mode)
        self._notify()

    def set_zoom(self, zoom: int) -> int:
        applied = self.view.set_zoom(zoom)
        self._notify()
        return applied

    def toggle_panel(self, panel: str) -> bool:
        visible = self.view.toggle_panel(panel)
        self._notify()
        return visible

    def set_active_right_panel(self, tab: RightPanelTab | str) -> None:
        self.view.active_right_panel = RightPanelTab(tab)
        self._notify()
