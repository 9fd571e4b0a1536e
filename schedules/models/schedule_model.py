"""
Modelo de Escala de Voluntário.

Localização: schedules/models/schedule_model.py

Schema no MongoDB (collection volunteer_schedules):
{
  _id: ObjectId,
  church_id: String,
  ministry_id: String,
  volunteer_id: String,
  schedule_date: String,     # YYYY-MM-DD
  shift_start: String,       # HH:MM ou HH:MM:SS
  shift_end: String,         # HH:MM ou HH:MM:SS
  schedule_type: String,     # 'primary' ou 'backup'
  confirmed: Boolean,
  confirmed_at: ISODate,
  notes: String,
  created_by: String,
  created_at: ISODate
}
"""
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, ClassVar, Dict, Optional

from core.utils_datas import formatar_hora, para_data, para_hora


@dataclass(frozen=True)
class ScheduleModel:
    """
    Escala validada na fronteira com o repository.
    """

    TYPE_PRIMARY: ClassVar[str] = 'primary'
    TYPE_BACKUP: ClassVar[str] = 'backup'

    VALID_TYPES: ClassVar[tuple] = (TYPE_PRIMARY, TYPE_BACKUP)

    id: str
    volunteer_id: str
    schedule_date: date
    shift_start: time
    shift_end: time
    schedule_type: str = TYPE_PRIMARY
    confirmed: bool = False
    confirmed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    ministry_id: Optional[str] = None
    church_id: Optional[str] = None

    def overlaps(self, start: time, end: time) -> bool:
        """Sobreposição de intervalos semiabertos [início, fim)."""
        return start < self.shift_end and end > self.shift_start

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'ScheduleModel':
        """
        Cria o modelo a partir de um documento do MongoDB.

        Raises:
            ValueError: Se voluntário, data ou horários forem inválidos
        """
        volunteer_id = doc.get('volunteer_id')
        if not volunteer_id:
            raise ValueError(f"Escala {doc.get('_id')} sem voluntário")
        schedule_date = para_data(doc.get('schedule_date'))
        if schedule_date is None:
            raise ValueError(f"Escala {doc.get('_id')} sem data")

        return cls(
            id=str(doc.get('_id', doc.get('id', ''))),
            volunteer_id=str(volunteer_id),
            schedule_date=schedule_date,
            shift_start=para_hora(doc.get('shift_start')),
            shift_end=para_hora(doc.get('shift_end')),
            schedule_type=doc.get('schedule_type') or cls.TYPE_PRIMARY,
            confirmed=bool(doc.get('confirmed', False)),
            confirmed_at=doc.get('confirmed_at'),
            notes=doc.get('notes'),
            created_by=doc.get('created_by'),
            ministry_id=doc.get('ministry_id'),
            church_id=doc.get('church_id'),
        )

    @staticmethod
    def create_schedule_data(church_id: str, ministry_id: str, volunteer_id: str,
                             schedule_date: date, shift_start: time, shift_end: time,
                             schedule_type: str = TYPE_PRIMARY, notes: Optional[str] = None,
                             created_by: Optional[str] = None) -> Dict[str, Any]:
        return {
            'church_id': church_id,
            'ministry_id': ministry_id,
            'volunteer_id': volunteer_id,
            'schedule_date': schedule_date.isoformat(),
            'shift_start': formatar_hora(shift_start),
            'shift_end': formatar_hora(shift_end),
            'schedule_type': schedule_type,
            'confirmed': False,
            'confirmed_at': None,
            'notes': notes.strip() if notes else None,
            'created_by': created_by,
            'created_at': datetime.utcnow(),
        }
