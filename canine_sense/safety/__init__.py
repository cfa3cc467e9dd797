"""
Safety Module - Output Guardrails.

Responsibilities:
- Global closed-range enforcement on every parameter snapshot
- 65 dB volume ceiling
- Violation logging (strict mode raises)
"""

from .safety_layer import SafetyLayer
