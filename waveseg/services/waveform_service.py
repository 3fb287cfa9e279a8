"""Waveform peak computation service (pure Python, no Qt dependency).

Audio decoding is not done here: callers pass already-decoded samples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from waveseg.utils.config import DEFAULT_SAMPLES_PER_PEAK

logger = logging.getLogger(__name__)


@dataclass
class WaveformData:
    """Pre-computed min/max peaks, one pair per ``samples_per_peak`` samples."""

    peaks_pos: np.ndarray  # max amplitude per bucket, float32, [0, 1]
    peaks_neg: np.ndarray  # min amplitude per bucket, float32, [-1, 0]
    sample_rate: int
    samples_per_peak: int

    @property
    def duration(self) -> float:
        """Covered duration in seconds."""
        return len(self.peaks_pos) * self.samples_per_peak / self.sample_rate

    def peak_range(self, start_time: float, end_time: float) -> tuple[float, float]:
        """Return (max, min) amplitude over [start_time, end_time), (0, 0) if empty."""
        n = len(self.peaks_pos)
        buckets_per_second = self.sample_rate / self.samples_per_peak
        i0 = max(0, int(start_time * buckets_per_second))
        i1 = min(n, max(i0 + 1, int(np.ceil(end_time * buckets_per_second))))
        if i0 >= n or i1 <= i0:
            return 0.0, 0.0
        return float(np.max(self.peaks_pos[i0:i1])), float(np.min(self.peaks_neg[i0:i1]))


def compute_peaks(
    samples: np.ndarray,
    sample_rate: int,
    samples_per_peak: int = DEFAULT_SAMPLES_PER_PEAK,
) -> WaveformData:
    """Reduce decoded samples to min/max peaks.

    Args:
        samples: shape (n,) mono or (n, channels). Integer PCM is normalized by
            its dtype range; float input is expected in [-1, 1].
        sample_rate: Samples per second.
        samples_per_peak: Bucket size of one peak pair.

    Returns:
        WaveformData with peaks clipped to [-1, 1].
    """
    if sample_rate <= 0 or samples_per_peak <= 0:
        raise ValueError(
            f"sample_rate and samples_per_peak must be positive "
            f"(got {sample_rate}, {samples_per_peak})"
        )

    arr = np.asarray(samples)
    if arr.ndim not in (1, 2):
        raise ValueError(f"Expected 1-D or 2-D samples, got shape {arr.shape}")

    if np.issubdtype(arr.dtype, np.integer):
        max_val = float(np.iinfo(arr.dtype).max) + 1.0
        arr = arr.astype(np.float32) / max_val
    else:
        arr = arr.astype(np.float32)

    # 다채널: 채널 간 최대/최소를 취해 한 쌍의 신호로
    if arr.ndim == 2:
        hi = arr.max(axis=1) if arr.shape[1] else np.zeros(len(arr), dtype=np.float32)
        lo = arr.min(axis=1) if arr.shape[1] else np.zeros(len(arr), dtype=np.float32)
    else:
        hi = lo = arr

    n = len(hi)
    if n == 0:
        empty = np.zeros(0, dtype=np.float32)
        return WaveformData(empty, empty.copy(), sample_rate, samples_per_peak)

    # 마지막 버킷은 0으로 채움: 0은 [0,1]/[-1,0] 범위 어디에도 영향을 주지 않는다
    pad = (-n) % samples_per_peak
    hi = np.pad(hi, (0, pad)).reshape(-1, samples_per_peak)
    lo = np.pad(lo, (0, pad)).reshape(-1, samples_per_peak)

    peaks_pos = np.clip(hi.max(axis=1), 0.0, 1.0).astype(np.float32)
    peaks_neg = np.clip(lo.min(axis=1), -1.0, 0.0).astype(np.float32)
    logger.debug(f"Computed {len(peaks_pos)} peaks from {n} samples @ {sample_rate}Hz")
    return WaveformData(peaks_pos, peaks_neg, sample_rate, samples_per_peak)
