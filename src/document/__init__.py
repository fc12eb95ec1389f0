"""
Builder document model.
Component forest, mutations, selection, clipboard and undo history.
"""

from .models import ComponentNode, NodeSpec, HistoryEntry
from .repository import NodeRepository
from .history import HistoryManager
from .selection import SelectionState
from .clipboard import Clipboard, clone_subtree
from .dropzone import DropTarget, DropTargetResolver, format_drop_target, parse_drop_target
from .serialize import serialize_forest, deserialize_forest, dumps_page, loads_page
from .store import BuilderStore
from .types import CodeGenerator, PersistenceGateway, PersistenceError
from .view import ViewState, ViewportMode, RightPanelTab, PanelState

__all__ = [
    # Models
    "ComponentNode",
    "NodeSpec",
    "HistoryEntry",
    # Building blocks
    "NodeRepository",
    "HistoryManager",
    "SelectionState",
    "Clipboard",
    "clone_subtree",
    # Drag and drop
    "DropTarget",
    "DropTargetResolver",
    "format_drop_target",
    "parse_drop_target",
    # Serialization
    "serialize_forest",
    "deserialize_forest",
    "dumps_page",
    "loads_page",
    # Store
    "BuilderStore",
    # Collaborators
    "CodeGenerator",
    "PersistenceGateway",
    "PersistenceError",
    # View
    "ViewState",
    "ViewportMode",
    "RightPanelTab",
    "PanelState",
]
