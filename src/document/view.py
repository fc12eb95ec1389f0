"""Editor view state: viewport, zoom and panel layout."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ViewportMode(str, Enum):
    """Canvas device width."""

    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class RightPanelTab(str, Enum):
    """Active tab in the right-hand panel."""

    INSPECTOR = "inspector"
    PREVIEW = "preview"


class PanelState(BaseModel):
    """Panel visibility."""

    palette: bool = True
    inspector: bool = True
    layers: bool = True


class ViewState(BaseModel):
    """Everything about how the page is shown, nothing about what it contains.

    Not part of undo history.
    """

    model_config = ConfigDict(validate_assignment=True)

    viewport_mode: ViewportMode = Field(default=ViewportMode.DESKTOP)
    zoom: int = Field(default=100)
    min_zoom: int = Field(default=25, gt=0)
    max_zoom: int = Field(default=200, gt=0)
    panels: PanelState = Field(default_factory=PanelState)
    active_right_panel: RightPanelTab = Field(default=RightPanelTab.INSPECTOR)

    def set_zoom(self, zoom: int) -> int:
        """Clamp and apply zoom (percent). Returns the applied value."""
        self.zoom = max(self.min_zoom, min(self.max_zoom, zoom))
        return self.zoom

    def toggle_panel(self, panel: str) -> bool:
        """Flip a panel's visibility. Returns the new visibility."""
        if panel not in PanelState.model_fields:
            raise ValueError(f"Unknown panel '{panel}'. Must be one of: {list(PanelState.model_fields)}")
        visible = not getattr(self.panels, panel)
        setattr(self.panels, panel, visible)
        return visible
