"""
Audio Module.

Responsibilities:
- Phase/breed/age/stress driven audio parameters
- Frequency band table across the canine hearing range
- Equalizer filter design for external renderers
"""

from .parameter_shaper import AudioParameterShaper, CANINE_BAND_EDGES_HZ, band_centers_hz
from .band_design import BandFilterBank, design_band_filters
