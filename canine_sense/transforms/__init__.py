"""
Visual Transformation Module.

Responsibilities:
- Dichromatic (blue/yellow) color transform
- Phase/breed/age/stress driven visual parameters
"""

from .color_shaper import ColorTransformShaper
from .dichromatic import (
    DICHROMATIC_WEIGHTS,
    coefficients_for,
    color_matrix,
    dichromatic_transform,
    apply_to_frame,
)
