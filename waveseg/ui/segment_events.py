"""Semantic segment notifications emitted as Qt signals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from PySide6.QtCore import QObject, Signal

from waveseg.models.segment import Segment


@dataclass(frozen=True)
class SegmentDragEvent:
    """Payload of drag_started / dragged / drag_ended."""

    segment: Segment
    start_marker: bool
    evt: Any = None  # raw pointer event (QMouseEvent or None)


@dataclass(frozen=True)
class SegmentMouseEvent:
    """Payload of the hover / click notifications."""

    segment: Segment
    evt: Any = None


class SegmentEvents(QObject):
    """Signals shared by all shapes of a layer. Observational only."""

    drag_started = Signal(object)  # SegmentDragEvent
    dragged = Signal(object)  # SegmentDragEvent
    drag_ended = Signal(object)  # SegmentDragEvent

    mouse_entered = Signal(object)  # SegmentMouseEvent
    mouse_left = Signal(object)
    clicked = Signal(object)
    double_clicked = Signal(object)
    context_menu = Signal(object)
