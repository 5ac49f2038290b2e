"""UI package."""

from .timer_widget import TimerWidget
from .preset_panel import PresetPanel, sort_for_display
from .rest_overlay import RestOverlay
from .tray import TrayController

__all__ = [
    "TimerWidget",
    "PresetPanel",
    "sort_for_display",
    "RestOverlay",
    "TrayController",
]
