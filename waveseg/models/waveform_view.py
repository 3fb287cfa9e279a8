"""Pixel ↔ time coordinate transform for a scrolled/zoomed waveform view."""

from __future__ import annotations

from dataclasses import dataclass

from waveseg.utils.config import (
    DEFAULT_SAMPLE_RATE,
    DEFAULT_SCALE,
    MAX_SCALE,
    MIN_SCALE,
    WAVEFORM_HEIGHT,
)


@dataclass
class WaveformViewport:
    """Current zoom (samples per pixel) and scroll (frame offset) of a view.

    ``time_to_pixels`` returns absolute pixels from the waveform origin;
    view-relative positions subtract ``frame_offset``. Pixels are kept as
    floats (no flooring) so that a time → pixel → time round trip is stable
    for a fixed view state.
    """

    sample_rate: int = DEFAULT_SAMPLE_RATE
    scale: int = DEFAULT_SCALE
    frame_offset: float = 0.0
    width: int = 800
    height: int = WAVEFORM_HEIGHT
    duration: float | None = None  # seconds, None = unbounded scroll

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive (got {self.sample_rate})")
        if self.scale <= 0:
            raise ValueError(f"scale must be positive (got {self.scale})")
        self.frame_offset = self._clamp_offset(self.frame_offset)

    # ------------------------------------------------------------ 변환

    def pixels_to_time(self, pixels: float) -> float:
        """Convert a pixel distance to a time distance (seconds)."""
        return pixels * self.scale / self.sample_rate

    def time_to_pixels(self, time: float) -> float:
        """Convert a time (seconds) to an absolute pixel position."""
        return time * self.sample_rate / self.scale

    def pixel_offset_to_time(self, offset: float) -> float:
        """Convert a view-relative pixel offset to an absolute time."""
        return self.pixels_to_time(offset + self.frame_offset)

    def time_to_offset(self, time: float) -> float:
        """Convert an absolute time to a view-relative pixel offset."""
        return self.time_to_pixels(time) - self.frame_offset

    # ------------------------------------------------------------ 접근자

    def get_width(self) -> int:
        return self.width

    def get_height(self) -> int:
        return self.height

    def get_frame_offset(self) -> float:
        return self.frame_offset

    def visible_time_range(self) -> tuple[float, float]:
        start = self.pixel_offset_to_time(0)
        return start, start + self.pixels_to_time(self.width)

    # ------------------------------------------------------------ 줌/스크롤

    def set_zoom(self, scale: int, anchor_offset: float = 0.0) -> None:
        """Change samples-per-pixel, keeping the time under *anchor_offset* fixed."""
        scale = max(MIN_SCALE, min(MAX_SCALE, int(scale)))
        anchor_time = self.pixel_offset_to_time(anchor_offset)
        self.scale = scale
        self.frame_offset = self._clamp_offset(self.time_to_pixels(anchor_time) - anchor_offset)

    def set_frame_offset(self, offset: float) -> None:
        self.frame_offset = self._clamp_offset(offset)

    def scroll_by(self, pixels: float) -> None:
        self.set_frame_offset(self.frame_offset + pixels)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.frame_offset = self._clamp_offset(self.frame_offset)

    def _clamp_offset(self, offset: float) -> float:
        offset = max(0.0, float(offset))
        if self.duration is not None:
            max_offset = max(0.0, self.time_to_pixels(self.duration) - self.width)
            offset = min(offset, max_offset)
        return offset
