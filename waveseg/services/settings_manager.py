"""Settings manager for segment editing preferences."""

from __future__ import annotations

import logging

from PySide6.QtCore import QSettings

from waveseg.models.segment import SegmentDragMode
from waveseg.utils.config import (
    DEFAULT_HANDLE_WIDTH,
    DEFAULT_OVERLAY_OFFSET,
    DEFAULT_SEGMENT_DRAG_MODE,
    DEFAULT_SEGMENT_STYLE,
    SEGMENT_STYLES,
)

logger = logging.getLogger(__name__)


def _to_bool(value) -> bool:
    # INI 백엔드는 bool을 "true"/"false" 문자열로 돌려준다
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    return bool(value)


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self):
        self._settings = QSettings()

    # ---------------------------------------------------- Segment dragging

    def get_segment_drag_mode(self) -> SegmentDragMode:
        """Get the collision policy for segment drags (default: overlap)."""
        value = self._settings.value("segments/drag_mode", DEFAULT_SEGMENT_DRAG_MODE, str)
        try:
            return SegmentDragMode.from_value(value)
        except ValueError:
            logger.warning(f"Unknown segment drag mode in settings: {value!r}, using default")
            return SegmentDragMode(DEFAULT_SEGMENT_DRAG_MODE)

    def set_segment_drag_mode(self, mode: SegmentDragMode | str) -> None:
        """Set the collision policy ('overlap', 'no-overlap', 'compress')."""
        self._settings.setValue("segments/drag_mode", SegmentDragMode.from_value(mode).value)

    def get_segment_dragging_enabled(self) -> bool:
        """Whether whole segments can be dragged (default: True)."""
        return _to_bool(self._settings.value("segments/dragging_enabled", True, bool))

    def set_segment_dragging_enabled(self, enabled: bool) -> None:
        self._settings.setValue("segments/dragging_enabled", bool(enabled))

    def get_editing_enabled(self) -> bool:
        """Whether start/end handles are shown (default: True)."""
        return _to_bool(self._settings.value("segments/editing_enabled", True, bool))

    def set_editing_enabled(self, enabled: bool) -> None:
        self._settings.setValue("segments/editing_enabled", bool(enabled))

    # ---------------------------------------------------- Appearance

    def get_handle_width(self) -> int:
        """Get the handle width in pixels (default: 10)."""
        return int(self._settings.value("appearance/handle_width", DEFAULT_HANDLE_WIDTH, int))

    def set_handle_width(self, pixels: int) -> None:
        self._settings.setValue("appearance/handle_width", max(0, int(pixels)))

    def get_overlay_offset(self) -> int:
        """Get the overlay inset from the top/bottom edge in pixels (default: 25)."""
        return int(self._settings.value("appearance/overlay_offset", DEFAULT_OVERLAY_OFFSET, int))

    def set_overlay_offset(self, pixels: int) -> None:
        self._settings.setValue("appearance/overlay_offset", max(0, int(pixels)))

    def get_segment_style(self) -> str:
        """Get the segment style ('overlay' or 'markers')."""
        value = self._settings.value("appearance/segment_style", DEFAULT_SEGMENT_STYLE, str)
        return value if value in SEGMENT_STYLES else DEFAULT_SEGMENT_STYLE

    def set_segment_style(self, style: str) -> None:
        if style not in SEGMENT_STYLES:
            raise ValueError(f"Unknown segment style: {style!r}")
        self._settings.setValue("appearance/segment_style", style)

    # ---------------------------------------------------- Utility

    def reset_to_defaults(self) -> None:
        """Clear all settings (revert to defaults)."""
        self._settings.clear()
        self._settings.sync()
