"""
Service para logs de auditoria.

Localização: core/services/audit_log_service.py

Registra as ações dos services de parcelas e escalas na collection
audit_logs. Falhas ao gravar o log são registradas no logger e nunca
interrompem a ação auditada.
"""
from typing import Optional, Dict, Any, List
import logging
import traceback
from core.repositories.audit_log_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogService:
    """
    Service para gerenciar logs de auditoria.

    Exemplo de uso:
        service = AuditLogService()
        service.log_action(
            church_id='...',
            action='pay_installment',
            entity='transaction',
            entity_id='...'
        )
    """

    def __init__(self, audit_repo: Optional[AuditLogRepository] = None):
        self.audit_repo = audit_repo or AuditLogRepository()

    def log_action(self, church_id: Optional[str], action: str, entity: str,
                   status: str = 'success', entity_id: Optional[str] = None,
                   user_id: Optional[str] = None,
                   payload: Optional[Dict[str, Any]] = None,
                   error: Any = None) -> Optional[Dict[str, Any]]:
        """
        Registra uma ação no log de auditoria.

        Args:
            church_id: Igreja (tenant) da ação
            action: Tipo de ação ('pay_installment', 'create_schedule', ...)
            entity: Entidade relacionada ('transaction', 'schedule', ...)
            status: 'success' ou 'error'
            entity_id: ID da entidade (opcional)
            user_id: Usuário que executou a ação (opcional)
            payload: Dados adicionais (opcional)
            error: Exception ou mensagem de erro (opcional)

        Returns:
            Dict com o log criado, ou None se a gravação falhar
        """
        log_data = {
            'church_id': church_id,
            'action': action,
            'entity': entity,
            'status': status,
        }
        if entity_id:
            log_data['entity_id'] = str(entity_id)
        if user_id:
            log_data['user_id'] = str(user_id)
        if payload:
            log_data['payload'] = payload
        if error:
            log_data['error'] = self._format_error(error)

        try:
            return self.audit_repo.create(log_data)
        except Exception:
            logger.warning("[AUDIT] Falha ao gravar log de %s/%s", entity, action, exc_info=True)
            return None

    def log_error(self, church_id: Optional[str], action: str, entity: str,
                  error: Any, entity_id: Optional[str] = None,
                  payload: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        return self.log_action(
            church_id=church_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            status='error',
            payload=payload,
            error=error
        )

    def get_church_logs(self, church_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        return self.audit_repo.find_by_church(church_id, limit)

    def get_errors(self, church_id: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        return self.audit_repo.find_errors(church_id, limit)

    def _format_error(self, error: Any) -> str:
        """
        Formata erro para armazenamento (stacktrace resumido, até 500 caracteres).
        """
        if isinstance(error, Exception):
            tb_lines = traceback.format_exception(type(error), error, error.__traceback__)
            error_str = ''.join(tb_lines[-3:])
        else:
            error_str = str(error)
        if len(error_str) > 500:
            error_str = error_str[:497] + '...'
        return error_str
