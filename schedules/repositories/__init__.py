"""
Repositories do app schedules.

Localização: schedules/repositories/
"""
from .schedule_repository import ScheduleRepository

__all__ = ['ScheduleRepository']
