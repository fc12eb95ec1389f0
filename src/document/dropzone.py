"""Drop-target descriptors.

Drop zones on the canvas are identified by ``dropzone-{parentId|root}-{order}``.
Resolving one turns a drag end into a single Move; the resolver itself never
touches the tree.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from core import get_logger

if TYPE_CHECKING:
    from .store import BuilderStore

logger = get_logger(__name__)

DROPZONE_PREFIX = "dropzone-"
ROOT_SENTINEL = "root"


@dataclass(frozen=True)
class DropTarget:
    """Destination of a drop: parent (None for the forest root) and position."""

    parent_id: str | None
    order: int


def format_drop_target(parent_id: str | None, order: int) -> str:
    """Encode a destination as a drop-zone descriptor."""
    return f"{DROPZONE_PREFIX}{parent_id or ROOT_SENTINEL}-{order}"


def parse_drop_target(descriptor: str) -> DropTarget | None:
    """
    Decode a drop-zone descriptor.

    The order is taken after the last hyphen, so parent ids that contain
    hyphens (UUIDs) decode correctly.

    Args:
        descriptor: e.g. ``dropzone-root-0`` or ``dropzone-cmp_01H...-2``

    Returns:
        DropTarget, or None if the descriptor is not a drop zone
    """
    if not descriptor.startswith(DROPZONE_PREFIX):
        return None

    body = descriptor[len(DROPZONE_PREFIX) :]
    parent, sep, order_str = body.rpartition("-")
    if not sep or not parent or not order_str.isdecimal():
        return None

    return DropTarget(
        parent_id=None if parent == ROOT_SENTINEL else parent,
        order=int(order_str),
    )


class DropTargetResolver:
    """Translates drag-end events into moves on the store."""

    def __init__(self, store: "BuilderStore") -> None:
        self.store = store

    def resolve(self, dragged_id: str, over_id: str | None) -> bool:
        """
        Move ``dragged_id`` to the drop zone ``over_id``.

        Args:
            dragged_id: Id of the dragged component
            over_id: Descriptor of the drop zone under the pointer, if any

        Returns:
            True if the forest changed
        """
        if over_id is None or over_id == dragged_id:
            return False

        target = parse_drop_target(over_id)
        if target is None:
            logger.debug("drop_ignored", dragged_id=dragged_id, over_id=over_id)
            return False

        return self.store.move(dragged_id, target.parent_id, target.order)
