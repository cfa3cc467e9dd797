"""
Equalizer filter design for shaped frequency bands.

Turns the FrequencyBand sequence of a parameter snapshot into a cascade
of peaking biquads (second-order sections) that an external audio
renderer can load directly. Nothing here processes samples.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import signal
from loguru import logger

from canine_sense.core.contracts import FrequencyBand


# Bands centered above this fraction of the sample rate are skipped
NYQUIST_MARGIN = 0.45


@dataclass(frozen=True)
class BandFilterBank:
    """Peaking-EQ cascade for one snapshot."""
    sos: NDArray[np.float64]  # n_sections x 6
    centers_hz: Tuple[float, ...]
    gains_db: Tuple[float, ...]
    sample_rate: int

    def response_db(self, frequencies_hz: Sequence[float]) -> NDArray[np.float64]:
        """Magnitude response of the full cascade, in dB."""
        freqs = np.asarray(frequencies_hz, dtype=np.float64)
        response = np.ones(freqs.shape, dtype=np.complex128)
        for section in self.sos:
            _, h = signal.freqz(section[:3], section[3:], worN=freqs, fs=self.sample_rate)
            response = response * h
        return 20.0 * np.log10(np.maximum(np.abs(response), 1e-12))


def peaking_section(center_hz: float, q: float, gain_db: float, sample_rate: int) -> NDArray[np.float64]:
    """
    Second-order peaking EQ section (RBJ audio EQ cookbook).

    Returns:
        [b0, b1, b2, a0, a1, a2] normalized so a0 == 1
    """
    a = 10.0 ** (gain_db / 40.0)
    w0 = 2.0 * math.pi * center_hz / sample_rate
    alpha = math.sin(w0) / (2.0 * q)
    cos_w0 = math.cos(w0)

    b = np.array([1.0 + alpha * a, -2.0 * cos_w0, 1.0 - alpha * a])
    den = np.array([1.0 + alpha / a, -2.0 * cos_w0, 1.0 - alpha / a])

    return np.concatenate([b / den[0], den / den[0]])


def design_band_filters(
    bands: Sequence[FrequencyBand],
    sample_rate: int = 48000,
) -> BandFilterBank:
    """
    Design a peaking filter per band.

    Args:
        bands: Shaped frequency bands
        sample_rate: Renderer sample rate

    Returns:
        BandFilterBank (bands above the usable Nyquist range are omitted)
    """
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")

    limit = NYQUIST_MARGIN * sample_rate
    sections = []
    centers = []
    gains = []

    for band in bands:
        if band.center_hz >= limit:
            logger.debug(
                f"Skipping band at {band.center_hz:.0f} Hz (above {limit:.0f} Hz at {sample_rate} Hz)"
            )
            continue

        q = band.center_hz / band.bandwidth_hz if band.bandwidth_hz > 0 else 1.0
        sections.append(peaking_section(band.center_hz, q, band.gain_db, sample_rate))
        centers.append(band.center_hz)
        gains.append(band.gain_db)

    sos = np.array(sections, dtype=np.float64).reshape(-1, 6)
    return BandFilterBank(
        sos=sos,
        centers_hz=tuple(centers),
        gains_db=tuple(gains),
        sample_rate=sample_rate,
    )
