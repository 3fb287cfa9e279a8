"""Segment rendering options."""

from __future__ import annotations

from dataclasses import dataclass

from waveseg.utils.config import (
    DEFAULT_HANDLE_WIDTH,
    DEFAULT_OVERLAY_OFFSET,
    DEFAULT_SEGMENT_STYLE,
)


@dataclass
class SegmentOptions:
    """Geometry and colors used when laying out segment shapes."""

    style: str = DEFAULT_SEGMENT_STYLE  # overlay, markers
    overlay_offset: int = DEFAULT_OVERLAY_OFFSET
    handle_width: int = DEFAULT_HANDLE_WIDTH
    overlay_label_x: int = 10
    overlay_label_y: int = 10
    overlay_font_size: int = 12
    overlay_color: str = "#ff0000"
    overlay_border_color: str = "#ff0000"
    overlay_opacity: float = 0.3
    start_marker_color: str = "#aaaaaa"
    end_marker_color: str = "#aaaaaa"

    @property
    def has_overlay(self) -> bool:
        return self.style == "overlay"
