"""
Repository para logs de auditoria no MongoDB.

Localização: core/repositories/audit_log_repository.py

Schema da collection audit_logs:
{
  _id: ObjectId,
  church_id: String,           // Igreja (tenant) da ação
  user_id: String,             // Usuário que executou a ação (opcional)
  action: String,              // 'create_installment_plan', 'pay_installment', 'create_schedule', ...
  entity: String,              // 'transaction', 'installment_group', 'schedule'
  entity_id: String,           // ID da entidade (opcional)
  payload: Object,             // Dados adicionais
  status: String,              // 'success', 'error'
  error: String,               // Stacktrace resumido (se status = 'error')
  created_at: ISODate
}
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from core.repositories.base_repository import BaseRepository


class AuditLogRepository(BaseRepository):
    """
    Repository para gerenciar logs de auditoria.

    Exemplo de uso:
        repo = AuditLogRepository()
        repo.create({
            'church_id': '...',
            'action': 'pay_installment',
            'entity': 'transaction',
            'status': 'success'
        })
    """

    def __init__(self, db=None):
        super().__init__('audit_logs', db=db)

    def _ensure_indexes(self):
        """
        Índices:
        - [church_id, created_at] (desc): Histórico por igreja
        - [church_id, action]: Filtros por tipo de ação
        - status: Busca de erros
        """
        self.collection.create_index([('church_id', 1), ('created_at', -1)])
        self.collection.create_index([('church_id', 1), ('action', 1)])
        self.collection.create_index('status')

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data.setdefault('created_at', datetime.utcnow())
        return super().create(data)

    def find_by_church(self, church_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        """Logs de uma igreja, mais recentes primeiro."""
        return self.find_many(
            query={'church_id': church_id},
            sort=[('created_at', -1)],
            limit=limit
        )

    def find_errors(self, church_id: Optional[str] = None,
                    limit: int = 100) -> List[Dict[str, Any]]:
        query = {'status': 'error'}
        if church_id:
            query['church_id'] = church_id
        return self.find_many(query=query, sort=[('created_at', -1)], limit=limit)
