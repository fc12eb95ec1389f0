"""Tests for canvas event handling."""

import pytest

from handlers import CanvasHandler


@pytest.fixture
def handler(page_store):
    return CanvasHandler(page_store)


# ============================================================================
# Drag and drop
# ============================================================================

@pytest.mark.unit
def test_drag_round_trip(handler, page_store):
    handler.drag_start("footer")
    assert page_store.is_dragging is True
    assert page_store.dragged_id == "footer"

    assert handler.drag_end("footer", "dropzone-root-0") is True

    assert page_store.is_dragging is False
    assert [node.id for node in page_store.components] == ["footer", "hero"]


@pytest.mark.unit
def test_drag_end_outside_dropzone(handler, page_store):
    handler.drag_start("footer")
    assert handler.drag_end("footer", None) is False
    assert page_store.is_dragging is False


@pytest.mark.unit
def test_locked_node_is_not_dropped(handler, page_store):
    handler.drag_start("cta")

    assert handler.drag_end("cta", "dropzone-root-0") is False
    assert page_store.find("cta").parent_id == "hero"


@pytest.mark.unit
def test_hover_suppressed_while_dragging(handler, page_store):
    handler.hover("title")
    assert page_store.hovered_id == "title"

    handler.drag_start("footer")
    handler.hover("hero")
    assert page_store.hovered_id == "title"


# ============================================================================
# Keyboard
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("key", ["Delete", "Backspace"])
def test_delete_removes_selected(handler, page_store, key):
    page_store.select("title")

    assert handler.key_down(key) is True
    assert page_store.find("title") is None
    assert page_store.selected_id is None


@pytest.mark.unit
def test_delete_keeps_locked(handler, page_store):
    page_store.select("cta")

    assert handler.key_down("Delete") is True
    assert page_store.find("cta") is not None


@pytest.mark.unit
def test_delete_without_selection(handler):
    assert handler.key_down("Delete") is False


@pytest.mark.unit
def test_escape_deselects(handler, page_store):
    page_store.select("hero")
    assert handler.key_down("Escape") is True
    assert page_store.selected_id is None


@pytest.mark.unit
def test_undo_redo_shortcuts(handler, page_store):
    page_store.remove("footer")

    assert handler.key_down("z", ctrl=True) is True
    assert page_store.find("footer") is not None

    assert handler.key_down("Z", meta=True, shift=True) is True
    assert page_store.find("footer") is None

    handler.key_down("z", ctrl=True)
    assert handler.key_down("y", ctrl=True) is True
    assert page_store.find("footer") is None


@pytest.mark.unit
def test_save_shortcut(handler, page_store, gateway):
    page_store.remove("footer")

    assert handler.key_down("s", ctrl=True) is True
    assert gateway.save_calls == 1
    assert page_store.is_dirty is False


@pytest.mark.unit
def test_copy_paste_next_to_selection(handler, page_store):
    page_store.select("title")
    assert handler.key_down("c", ctrl=True) is True
    assert handler.key_down("v", ctrl=True) is True

    hero = page_store.find("hero")
    assert len(hero.children) == 3
    assert hero.children[2].type == "heading"
    assert page_store.selected_id == hero.children[2].id


@pytest.mark.unit
def test_paste_without_selection_goes_to_root(handler, page_store):
    page_store.copy("title")
    page_store.select(None)

    handler.key_down("v", ctrl=True)

    assert page_store.components[-1].type == "heading"


@pytest.mark.unit
def test_duplicate_shortcut(handler, page_store):
    page_store.select("footer")
    assert handler.key_down("d", ctrl=True) is True
    assert len(page_store.components) == 3


@pytest.mark.unit
def test_copy_and_duplicate_need_selection(handler):
    assert handler.key_down("c", ctrl=True) is False
    assert handler.key_down("d", ctrl=True) is False


@pytest.mark.unit
def test_unhandled_keys(handler):
    assert handler.key_down("a") is False
    assert handler.key_down("q", ctrl=True) is False
    assert handler.key_down("z") is False
