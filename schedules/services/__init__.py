"""
Services do app schedules.

Localização: schedules/services/

Escalas de voluntários dos ministérios e checagem de conflito de horário.
"""
from .schedule_service import ScheduleService, ScheduleConflictError, has_conflict, group_by_date

__all__ = ['ScheduleService', 'ScheduleConflictError', 'has_conflict', 'group_by_date']
