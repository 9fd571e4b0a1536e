"""
Service para escalas de voluntários.

Localização: schedules/services/schedule_service.py

Lógica de negócio das escalas: listagem por mês, criação e edição com
checagem de conflito de horário, confirmação de presença.
"""
from typing import List, Dict, Any, Iterable, Optional, Union
from datetime import date, time
import logging

from core.decorators.audit_log import audit_log
from core.services.audit_log_service import AuditLogService
from core.utils_datas import formatar_hora, hoje_local, intervalo_do_mes, para_data, para_hora
from schedules.models.schedule_model import ScheduleModel
from schedules.repositories.schedule_repository import ScheduleRepository

logger = logging.getLogger(__name__)

MENSAGEM_CONFLITO = "Este voluntário já está escalado neste horário"

ScheduleLike = Union[ScheduleModel, Dict[str, Any]]


class ScheduleConflictError(ValueError):
    """O voluntário já tem um turno sobreposto no mesmo dia."""


def has_conflict(volunteer_id: str, schedule_date: Union[date, str],
                 shift_start: Union[time, str], shift_end: Union[time, str],
                 existing_schedules: Iterable[ScheduleLike],
                 exclude_id: Optional[str] = None) -> bool:
    """
    Verifica se o turno proposto sobrepõe outro turno do mesmo voluntário no mesmo dia.

    Os intervalos são semiabertos: 09:00-12:00 e 12:00-15:00 não conflitam.
    A checagem é apenas consultiva; o banco não impede sobreposições.

    Args:
        volunteer_id: ID do voluntário
        schedule_date: Data do turno (date ou YYYY-MM-DD)
        shift_start: Início (time, HH:MM ou HH:MM:SS)
        shift_end: Término (time, HH:MM ou HH:MM:SS)
        existing_schedules: Escalas já carregadas (ScheduleModel ou documentos)
        exclude_id: ID da escala em edição, ignorada na comparação

    Returns:
        True se houver conflito

    Raises:
        ValueError: Se data ou horários não puderem ser interpretados
    """
    target_date = para_data(schedule_date)
    if target_date is None:
        raise ValueError("Data da escala é obrigatória")
    start = para_hora(shift_start)
    end = para_hora(shift_end)

    for s in existing_schedules:
        schedule = s if isinstance(s, ScheduleModel) else ScheduleModel.from_document(s)
        if exclude_id is not None and schedule.id == str(exclude_id):
            continue
        if schedule.volunteer_id != str(volunteer_id) or schedule.schedule_date != target_date:
            continue
        if schedule.overlaps(start, end):
            return True
    return False


def group_by_date(schedules: Iterable[ScheduleLike]) -> Dict[str, List[ScheduleLike]]:
    """Agrupa escalas por data (YYYY-MM-DD) para a visão de calendário."""
    grouped: Dict[str, List[ScheduleLike]] = {}
    for s in schedules:
        if isinstance(s, ScheduleModel):
            key = s.schedule_date.isoformat()
        else:
            schedule_date = para_data(s.get('schedule_date'))
            if schedule_date is None:
                raise ValueError(f"Escala {s.get('_id')} sem data")
            key = schedule_date.isoformat()
        grouped.setdefault(key, []).append(s)
    return grouped


def _validate_shift(shift_start, shift_end):
    start = para_hora(shift_start)
    end = para_hora(shift_end)
    if end <= start:
        raise ValueError("O horário de término deve ser posterior ao horário de início")
    return start, end


def _validate_type(schedule_type: str) -> str:
    if schedule_type not in ScheduleModel.VALID_TYPES:
        raise ValueError(f"Tipo de escala inválido: {schedule_type!r}")
    return schedule_type


class ScheduleService:
    """
    Service para gerenciar escalas de voluntários.

    Exemplo de uso:
        service = ScheduleService()
        service.create_schedule(
            church_id='...', ministry_id='...', volunteer_id='...',
            schedule_date='2025-06-01', shift_start='09:00', shift_end='12:00'
        )
    """

    def __init__(self, schedule_repo: Optional[ScheduleRepository] = None,
                 audit_service: Optional[AuditLogService] = None):
        self.schedule_repo = schedule_repo or ScheduleRepository()
        self.audit_service = audit_service or AuditLogService()

    def list_schedules(self, ministry_id: str, month: Optional[date] = None) -> List[Dict[str, Any]]:
        """
        Escalas de um ministério no mês de `month` (default: mês atual).
        """
        if not ministry_id:
            raise ValueError("ministry_id é obrigatório")

        start, end = intervalo_do_mes(month or hoje_local())
        return self.schedule_repo.find_by_ministry_and_period(ministry_id, start, end)

    def list_volunteer_schedules(self, volunteer_ids: List[str],
                                 month: Optional[date] = None) -> List[Dict[str, Any]]:
        """Escalas dos voluntários informados no mês (minhas escalas)."""
        start, end = intervalo_do_mes(month or hoje_local())
        return self.schedule_repo.find_by_volunteers_and_period(volunteer_ids, start, end)

    def check_conflict(self, volunteer_id: str, schedule_date: date, shift_start: time,
                       shift_end: time, exclude_id: Optional[str] = None):
        """
        Relê as escalas do voluntário no dia e levanta ScheduleConflictError se houver sobreposição.
        """
        existing = self.schedule_repo.find_by_volunteer_and_date(volunteer_id, schedule_date)
        if has_conflict(volunteer_id, schedule_date, shift_start, shift_end, existing, exclude_id):
            logger.info(
                f"[SCHEDULES] Conflito para voluntário {volunteer_id} em {schedule_date} "
                f"{shift_start}-{shift_end}"
            )
            raise ScheduleConflictError(MENSAGEM_CONFLITO)

    @audit_log(action='create_schedule', entity='schedule')
    def create_schedule(self, church_id: str, ministry_id: str, volunteer_id: str,
                        schedule_date: Union[date, str], shift_start: Union[time, str],
                        shift_end: Union[time, str], schedule_type: str = ScheduleModel.TYPE_PRIMARY,
                        notes: Optional[str] = None,
                        created_by: Optional[str] = None) -> Dict[str, Any]:
        """
        Cria uma escala.

        Raises:
            ValueError: Se dados inválidos
            ScheduleConflictError: Se o voluntário já estiver escalado no horário
        """
        if not church_id:
            raise ValueError("Igreja não encontrada")
        if not ministry_id:
            raise ValueError("ministry_id é obrigatório")
        if not volunteer_id:
            raise ValueError("Selecione um voluntário")

        target_date = para_data(schedule_date)
        if target_date is None:
            raise ValueError("Data não selecionada")
        start, end = _validate_shift(shift_start, shift_end)
        _validate_type(schedule_type)

        self.check_conflict(volunteer_id, target_date, start, end)

        data = ScheduleModel.create_schedule_data(
            church_id=church_id,
            ministry_id=ministry_id,
            volunteer_id=volunteer_id,
            schedule_date=target_date,
            shift_start=start,
            shift_end=end,
            schedule_type=schedule_type,
            notes=notes,
            created_by=created_by
        )
        return self.schedule_repo.create(data)

    def _get_owned(self, church_id: str, schedule_id: str) -> Optional[Dict[str, Any]]:
        """
        Busca a escala e valida que pertence à igreja.

        Raises:
            ValueError: Se church_id não fornecido
            PermissionError: Se a escala for de outra igreja
        """
        if not church_id:
            raise ValueError("church_id é obrigatório")

        current = self.schedule_repo.find_by_id(schedule_id)
        if not current:
            return None
        if str(current.get('church_id')) != str(church_id):
            raise PermissionError("Você não tem permissão para alterar esta escala")
        return current

    @audit_log(action='update_schedule', entity='schedule')
    def update_schedule(self, church_id: str, schedule_id: str,
                        volunteer_id: Optional[str] = None,
                        schedule_date: Union[date, str, None] = None,
                        shift_start: Union[time, str, None] = None,
                        shift_end: Union[time, str, None] = None,
                        schedule_type: Optional[str] = None,
                        notes: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Atualiza uma escala, checando conflito sem considerar a própria escala.

        Returns:
            Escala atualizada ou None se não encontrada

        Raises:
            PermissionError: Se a escala for de outra igreja
            ScheduleConflictError: Se o novo horário sobrepuser outra escala
        """
        current = self._get_owned(church_id, schedule_id)
        if not current:
            return None

        volunteer_id = volunteer_id or current.get('volunteer_id')
        target_date = para_data(schedule_date) or para_data(current.get('schedule_date'))
        start, end = _validate_shift(
            shift_start if shift_start is not None else current.get('shift_start'),
            shift_end if shift_end is not None else current.get('shift_end')
        )

        self.check_conflict(volunteer_id, target_date, start, end, exclude_id=str(current['_id']))

        update_data = {
            'volunteer_id': volunteer_id,
            'schedule_date': target_date.isoformat(),
            'shift_start': formatar_hora(start),
            'shift_end': formatar_hora(end),
        }
        if schedule_type is not None:
            update_data['schedule_type'] = _validate_type(schedule_type)
        if notes is not None:
            update_data['notes'] = notes.strip()

        return self.schedule_repo.update(schedule_id, update_data)

    @audit_log(action='delete_schedule', entity='schedule')
    def delete_schedule(self, church_id: str, schedule_id: str) -> bool:
        if not self._get_owned(church_id, schedule_id):
            return False
        return self.schedule_repo.delete(schedule_id)

    @audit_log(action='confirm_schedule', entity='schedule')
    def confirm_schedule(self, church_id: str, schedule_id: str) -> Optional[Dict[str, Any]]:
        """Confirma a presença do voluntário na escala."""
        if not self._get_owned(church_id, schedule_id):
            return None
        return self.schedule_repo.confirm(schedule_id)
