"""
Runtime coordination between the sampling thread and the presentation thread.
"""

from .alert_state import SharedAlertState
from .sampler import SamplingConfig, SamplingLoop, SamplingStats

__all__ = ["SharedAlertState", "SamplingConfig", "SamplingLoop", "SamplingStats"]
