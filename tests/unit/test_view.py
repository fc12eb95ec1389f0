"""Tests for editor view state."""

import pytest

from document import RightPanelTab, ViewportMode, ViewState


@pytest.mark.unit
class TestViewState:
    """Zoom and panel layout."""

    def test_defaults(self):
        view = ViewState()

        assert view.viewport_mode == ViewportMode.DESKTOP
        assert view.zoom == 100
        assert view.active_right_panel == RightPanelTab.INSPECTOR

    @pytest.mark.parametrize("requested,applied", [(10, 25), (150, 150), (500, 200)])
    def test_zoom_clamped(self, requested, applied):
        view = ViewState()
        assert view.set_zoom(requested) == applied
        assert view.zoom == applied

    def test_toggle_panel(self):
        view = ViewState()

        assert view.toggle_panel("layers") is False
        assert view.toggle_panel("layers") is True

    def test_toggle_unknown_panel(self):
        with pytest.raises(ValueError):
            ViewState().toggle_panel("timeline")

    def test_viewport_mode_validated(self):
        view = ViewState()
        view.viewport_mode = "mobile"
        assert view.viewport_mode == ViewportMode.MOBILE

        with pytest.raises(Exception):
            view.viewport_mode = "watch"


@pytest.mark.unit
def test_store_view_changes_skip_history(store):
    """View changes never touch undo history or the dirty flag."""
    store.set_viewport_mode("tablet")
    store.set_zoom(75)
    store.toggle_panel("palette")
    store.set_active_right_panel("preview")

    assert store.view.viewport_mode == ViewportMode.TABLET
    assert store.view.zoom == 75
    assert store.view.panels.palette is False
    assert store.view.active_right_panel == RightPanelTab.PREVIEW
    assert store.can_undo() is False
    assert store.is_dirty is False
