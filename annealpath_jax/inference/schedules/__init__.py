"""
Annealing schedules.

  - schedule.py: Schedule container and its two constructions
  - update.py: equal-barrier inversion used by adapted_schedule
"""
from .schedule import Schedule, equally_spaced_schedule, adapted_schedule
from .update import BarrierInversionCFG, update_schedule

__all__ = [
    "Schedule",
    "equally_spaced_schedule",
    "adapted_schedule",
    "BarrierInversionCFG",
    "update_schedule",
]
