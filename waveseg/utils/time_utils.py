"""Time conversion utilities."""

from functools import lru_cache


@lru_cache(maxsize=4096)
def seconds_to_display(seconds: float) -> str:
    """Convert seconds to display string 'MM:SS.mmm'."""
    if seconds < 0:
        seconds = 0.0
    total_ms = int(round(seconds * 1000))
    minutes = total_ms // 60_000
    remainder = total_ms % 60_000
    return f"{minutes:02d}:{remainder / 1000.0:06.3f}"


def nice_tick_interval(visible_seconds: float) -> float:
    """Pick a ruler tick interval giving roughly eight ticks across the view."""
    target_ticks = 8
    raw = visible_seconds / target_ticks
    candidates = [
        0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 15.0, 30.0,
        60.0, 120.0, 300.0, 600.0,
    ]
    for c in candidates:
        if c >= raw:
            return c
    return candidates[-1]
