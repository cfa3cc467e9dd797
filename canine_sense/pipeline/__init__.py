"""
Pipeline Module.

Responsibilities:
- Strict-order evaluation (profile -> phase -> shapers -> safety -> history)
- Behavior feedback channel
- Session fan-out to audio/visual renderers
"""

from .orchestrator import AdaptationOrchestrator, coerce_age, merge_parameters
from .feedback import StressFeed
from .session import AdaptationSession, AudioSink, VisualSink
