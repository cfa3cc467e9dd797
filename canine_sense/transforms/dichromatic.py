"""
Dichromatic Color Transform.

Approximates two-cone (blue/yellow) canine color vision:

    blue'   = (blue * blue_weight) ** contrast_exponent
    yellow' = ((red * red_weight + green * green_weight) * yellow_weight) ** contrast_exponent
    output  = (yellow', yellow', blue')

Red/green weights are low, reflecting reduced long-wavelength
sensitivity. The contrast exponent (> 1) compensates for reduced acuity.

The transform is a pure per-pixel function: identical inputs give
identical outputs, independent of any renderer.
"""

from __future__ import annotations

from typing import Dict, Sequence, Union

import cv2
import numpy as np
from numpy.typing import ArrayLike, NDArray

from canine_sense.core.contracts import ColorPreference, DichromaticCoefficients


# (blue_weight, yellow_weight, red_weight, green_weight)
DICHROMATIC_WEIGHTS: Dict[ColorPreference, tuple] = {
    ColorPreference.BALANCED: (0.75, 0.85, 0.25, 0.55),
    ColorPreference.BLUE_DOMINANT: (0.8, 0.8, 0.25, 0.55),
    ColorPreference.YELLOW_DOMINANT: (0.7, 0.9, 0.3, 0.6),
    ColorPreference.HIGH_CONTRAST: (0.8, 0.9, 0.2, 0.5),
}

MIN_CONTRAST_EXPONENT = 1.05
CONTRAST_EXPONENT_SPAN = 0.45


def coefficients_for(preference: ColorPreference, color_contrast: float) -> DichromaticCoefficients:
    """
    Build transform coefficients for a color preference.

    Args:
        preference: Breed color preference
        color_contrast: Shaped contrast in [0, 1]

    Returns:
        DichromaticCoefficients with exponent in [1.05, 1.5]
    """
    blue, yellow, red, green = DICHROMATIC_WEIGHTS[preference]
    contrast = min(max(float(color_contrast), 0.0), 1.0)
    return DichromaticCoefficients(
        blue_weight=blue,
        yellow_weight=yellow,
        red_weight=red,
        green_weight=green,
        contrast_exponent=MIN_CONTRAST_EXPONENT + CONTRAST_EXPONENT_SPAN * contrast,
    )


def color_matrix(coeffs: DichromaticCoefficients) -> NDArray[np.float32]:
    """Linear stage of the transform as a 3x3 RGB matrix (for shader upload)."""
    ry = coeffs.red_weight * coeffs.yellow_weight
    gy = coeffs.green_weight * coeffs.yellow_weight
    return np.array(
        [
            [ry, gy, 0.0],
            [ry, gy, 0.0],
            [0.0, 0.0, coeffs.blue_weight],
        ],
        dtype=np.float32,
    )


def dichromatic_transform(
    rgb: Union[ArrayLike, Sequence[float]],
    coeffs: DichromaticCoefficients,
) -> NDArray[np.float64]:
    """
    Apply the dichromatic transform.

    Args:
        rgb: One pixel (3,) or an array (..., 3) of RGB values in [0, 1]
        coeffs: Transform coefficients

    Returns:
        Transformed RGB in [0, 1], same shape as the input
    """
    pixels = np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0)
    if pixels.shape[-1] != 3:
        raise ValueError(f"Expected trailing RGB axis of size 3, got shape {pixels.shape}")

    red = pixels[..., 0]
    green = pixels[..., 1]
    blue = pixels[..., 2]

    yellow_out = np.power(
        (red * coeffs.red_weight + green * coeffs.green_weight) * coeffs.yellow_weight,
        coeffs.contrast_exponent,
    )
    blue_out = np.power(blue * coeffs.blue_weight, coeffs.contrast_exponent)

    return np.clip(np.stack([yellow_out, yellow_out, blue_out], axis=-1), 0.0, 1.0)


def contrast_lut(exponent: float) -> NDArray[np.uint8]:
    """256-entry lookup table for the contrast exponent on 8-bit values."""
    levels = np.arange(256, dtype=np.float64) / 255.0
    return np.clip(np.round(np.power(levels, exponent) * 255.0), 0, 255).astype(np.uint8)


def apply_to_frame(frame: NDArray[np.uint8], coeffs: DichromaticCoefficients) -> NDArray[np.uint8]:
    """
    Apply the transform to an 8-bit RGB frame with OpenCV.

    Reference implementation of what a renderer's shader computes;
    matches dichromatic_transform() up to 8-bit quantization.

    Args:
        frame: RGB frame (H x W x 3, uint8)
        coeffs: Transform coefficients

    Returns:
        Transformed RGB frame (uint8)
    """
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"Expected H x W x 3 frame, got shape {frame.shape}")

    linear = cv2.transform(frame, color_matrix(coeffs))
    return cv2.LUT(linear, contrast_lut(coeffs.contrast_exponent))
