"""
Repository para escalas de voluntários.

Localização: schedules/repositories/schedule_repository.py

Gerencia operações CRUD da collection volunteer_schedules. Ver schema em
schedules/models/schedule_model.py.
"""
from typing import List, Dict, Any, Optional
from datetime import date, datetime
import logging

from core.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

ORDEM_CALENDARIO = [('schedule_date', 1), ('shift_start', 1)]


class ScheduleRepository(BaseRepository):
    """
    Repository para gerenciar escalas no MongoDB.

    Não há restrição de sobreposição no banco: o índice por voluntário e
    data apenas acelera a checagem de conflito feita no service.
    """

    def __init__(self, db=None):
        super().__init__('volunteer_schedules', db=db)

    def _ensure_indexes(self):
        self.collection.create_index([('ministry_id', 1), ('schedule_date', 1)])
        self.collection.create_index([('volunteer_id', 1), ('schedule_date', 1)])

    def find_by_ministry_and_period(self, ministry_id: str, start_date: date,
                                    end_date: date) -> List[Dict[str, Any]]:
        """
        Escalas de um ministério entre start_date e end_date (inclusive).
        """
        query = {
            'ministry_id': ministry_id,
            'schedule_date': {
                '$gte': start_date.isoformat(),
                '$lte': end_date.isoformat()
            }
        }
        try:
            return self.find_many(query=query, sort=ORDEM_CALENDARIO)
        except Exception as e:
            logger.error(f"[SCHEDULE_REPO] Erro ao buscar escalas: {e}", exc_info=True)
            raise

    def find_by_volunteers_and_period(self, volunteer_ids: List[str], start_date: date,
                                      end_date: date) -> List[Dict[str, Any]]:
        if not volunteer_ids:
            return []
        query = {
            'volunteer_id': {'$in': list(volunteer_ids)},
            'schedule_date': {
                '$gte': start_date.isoformat(),
                '$lte': end_date.isoformat()
            }
        }
        return self.find_many(query=query, sort=ORDEM_CALENDARIO)

    def find_by_volunteer_and_date(self, volunteer_id: str,
                                   schedule_date: date) -> List[Dict[str, Any]]:
        return self.find_many(query={
            'volunteer_id': volunteer_id,
            'schedule_date': schedule_date.isoformat()
        })

    def confirm(self, schedule_id) -> Optional[Dict[str, Any]]:
        return self.update(schedule_id, {
            'confirmed': True,
            'confirmed_at': datetime.utcnow()
        })
