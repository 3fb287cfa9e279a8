"""Application configuration constants."""

from __future__ import annotations

APP_NAME = "WaveSegments"
APP_VERSION = "0.1.0"
ORG_NAME = "WaveSegments"

# Segment dragging
MIN_SEGMENT_DURATION = 0.25  # seconds, compress 모드에서 이웃 세그먼트의 최소 길이
DEFAULT_SEGMENT_DRAG_MODE = "overlap"  # overlap, no-overlap, compress

# Segment rendering
SEGMENT_STYLES = ["overlay", "markers"]
DEFAULT_SEGMENT_STYLE = "overlay"
DEFAULT_HANDLE_WIDTH = 10  # px
DEFAULT_OVERLAY_OFFSET = 25  # px, overlay rect inset from top/bottom
MIN_HANDLE_GAP_PX = 1.0  # 핸들 드래그 시 start/end 경계 사이 최소 간격

# Waveform view
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_SCALE = 441  # samples per pixel → 100 px/s at 44.1kHz
MIN_SCALE = 32
MAX_SCALE = 16384
WAVEFORM_HEIGHT = 200
DEFAULT_SAMPLES_PER_PEAK = 32
