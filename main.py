"""WaveSegments application entry point."""

import logging
import sys

import numpy as np
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication, QComboBox, QLabel, QMainWindow, QToolBar

from waveseg.models.segment import Segment, SegmentDragMode, SegmentTrack
from waveseg.models.segment_options import SegmentOptions
from waveseg.models.waveform_view import WaveformViewport
from waveseg.services.settings_manager import SettingsManager
from waveseg.services.waveform_service import compute_peaks
from waveseg.ui.segments_layer import SegmentsLayer
from waveseg.ui.waveform_widget import WaveformWidget
from waveseg.utils.config import APP_NAME, APP_VERSION, DEFAULT_SAMPLE_RATE, ORG_NAME

logger = logging.getLogger(__name__)


def _apply_dark_theme(app: QApplication) -> None:
    """Apply a dark color palette using the Fusion style."""
    app.setStyle("Fusion")
    palette = QPalette()

    palette.setColor(QPalette.ColorRole.Window, QColor(45, 45, 45))
    palette.setColor(QPalette.ColorRole.WindowText, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Base, QColor(30, 30, 30))
    palette.setColor(QPalette.ColorRole.Text, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Button, QColor(55, 55, 55))
    palette.setColor(QPalette.ColorRole.ButtonText, QColor(212, 212, 212))
    palette.setColor(QPalette.ColorRole.Highlight, QColor(60, 140, 220))
    palette.setColor(QPalette.ColorRole.HighlightedText, QColor(255, 255, 255))

    app.setPalette(palette)


def _demo_audio(duration: float = 20.0) -> np.ndarray:
    """Synthetic mono signal: a tone with a slow amplitude envelope."""
    t = np.arange(int(duration * DEFAULT_SAMPLE_RATE)) / DEFAULT_SAMPLE_RATE
    envelope = 0.3 + 0.6 * np.abs(np.sin(2 * np.pi * 0.15 * t))
    return (envelope * np.sin(2 * np.pi * 220.0 * t)).astype(np.float32)


def _demo_track() -> SegmentTrack:
    return SegmentTrack([
        Segment(1.0, 3.0, "Intro", color="#3c8cdc"),
        Segment(3.5, 6.0, "Verse"),
        Segment(6.0, 6.2, "Hit", color="#e0a030"),
        Segment(7.0, 11.5, "Chorus", color="#50b050"),
        Segment(13.0, 15.0, "Locked", editable=False),
    ])


class SegmentEditorWindow(QMainWindow):
    """Waveform view plus a drag-mode selector."""

    def __init__(self, settings: SettingsManager):
        super().__init__()
        self.setWindowTitle(f"{APP_NAME} {APP_VERSION}")
        self.resize(1100, 320)
        self._settings = settings

        options = SegmentOptions(
            style=settings.get_segment_style(),
            handle_width=settings.get_handle_width(),
            overlay_offset=settings.get_overlay_offset(),
        )
        self._layer = SegmentsLayer(
            _demo_track(),
            WaveformViewport(),
            options=options,
            drag_mode=settings.get_segment_drag_mode(),
            editing_enabled=settings.get_editing_enabled(),
            segment_dragging_enabled=settings.get_segment_dragging_enabled(),
        )
        self._layer.events.drag_ended.connect(self._on_drag_ended)
        self._layer.events.double_clicked.connect(self._on_double_clicked)

        self._widget = WaveformWidget(self._layer)
        self._widget.set_waveform(compute_peaks(_demo_audio(), DEFAULT_SAMPLE_RATE))
        self.setCentralWidget(self._widget)

        toolbar = QToolBar()
        toolbar.addWidget(QLabel("Drag mode: "))
        self._mode_combo = QComboBox()
        for mode in SegmentDragMode:
            self._mode_combo.addItem(mode.value, mode)
        self._mode_combo.setCurrentIndex(list(SegmentDragMode).index(self._layer.get_segment_drag_mode()))
        self._mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        toolbar.addWidget(self._mode_combo)
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, toolbar)

        self.statusBar().showMessage("Drag a segment or its handles. Ctrl+wheel to zoom.")

    def _on_mode_changed(self, index: int) -> None:
        mode = self._mode_combo.itemData(index)
        self._layer.set_segment_drag_mode(mode)
        self._settings.set_segment_drag_mode(mode)

    def _on_drag_ended(self, event) -> None:
        seg = event.segment
        self.statusBar().showMessage(
            f"{seg.label_text or seg.segment_id}: {seg.start_time:.3f}s - {seg.end_time:.3f}s"
        )

    def _on_double_clicked(self, event) -> None:
        logger.info(f"Segment double-clicked: {event.segment.segment_id}")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    QApplication.setOrganizationName(ORG_NAME)
    QApplication.setApplicationName(APP_NAME)

    app = QApplication(sys.argv)
    _apply_dark_theme(app)

    window = SegmentEditorWindow(SettingsManager())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
