"""
Repository para transações financeiras.

Localização: finance/repositories/transaction_repository.py

Encapsula as operações com a collection 'transactions' usadas pelo
controle de parcelas. Ver schema em finance/models/transaction_model.py.

SEGURANÇA: todas as buscas filtram por church_id (isolamento por igreja).
"""
from typing import List, Dict, Any, Optional
from datetime import date, datetime
import logging

from core.repositories.base_repository import BaseRepository
from finance.models.transaction_model import TransactionModel

logger = logging.getLogger(__name__)


class TransactionRepository(BaseRepository):
    """
    Repository para gerenciar transações no MongoDB.

    Exemplo de uso:
        repo = TransactionRepository()
        parcelas = repo.find_installments_by_church('church-1')
    """

    def __init__(self, db=None):
        super().__init__('transactions', db=db)

    def _ensure_indexes(self):
        """
        Índices:
        - [church_id, due_date]: Listagem de parcelas por vencimento
        - [church_id, installment_group_id, installment_number]: Detalhe do parcelamento
        - [church_id, status, due_date]: Atualização de vencidas
        """
        self.collection.create_index([('church_id', 1), ('due_date', 1)])
        self.collection.create_index(
            [('church_id', 1), ('installment_group_id', 1), ('installment_number', 1)]
        )
        self.collection.create_index([('church_id', 1), ('status', 1), ('due_date', 1)])

    def find_installments_by_church(self, church_id: str) -> List[Dict[str, Any]]:
        """
        Busca todas as transações parceladas de uma igreja.

        Args:
            church_id: ID da igreja (obrigatório)

        Returns:
            Transações com installment_group_id, ordenadas por vencimento
        """
        if not church_id:
            raise ValueError("church_id é obrigatório para buscar parcelas")

        query = {
            'church_id': church_id,
            'installment_group_id': {'$ne': None}
        }
        try:
            return self.find_many(query=query, sort=[('due_date', 1)])
        except Exception as e:
            logger.error(f"[TRANSACTION_REPO] Erro ao buscar parcelas: {e}", exc_info=True)
            raise

    def find_by_group(self, church_id: str, group_id: str) -> List[Dict[str, Any]]:
        """Parcelas de um parcelamento, na ordem do número da parcela."""
        return self.find_many(
            query={'church_id': church_id, 'installment_group_id': group_id},
            sort=[('installment_number', 1)]
        )

    def create_many(self, documents: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insere várias transações de uma vez (parcelas de um plano).

        Returns:
            Documentos inseridos com os _id gerados
        """
        if not documents:
            return []
        now = datetime.utcnow()
        for doc in documents:
            doc.setdefault('created_at', now)
        result = self.collection.insert_many(documents)
        for doc, inserted_id in zip(documents, result.inserted_ids):
            doc['_id'] = inserted_id
        return documents

    def mark_paid(self, transaction_id, payment_date: date) -> Optional[Dict[str, Any]]:
        return self.update(transaction_id, {
            'status': TransactionModel.STATUS_PAGO,
            'payment_date': payment_date.isoformat(),
            'updated_at': datetime.utcnow()
        })

    def mark_overdue(self, church_id: str, today: date) -> int:
        """
        Marca como vencidas as transações pendentes com vencimento anterior a hoje.

        due_date é gravado como YYYY-MM-DD, então a comparação de strings
        respeita a ordem cronológica e ignora documentos sem vencimento.

        Returns:
            Quantidade de transações atualizadas
        """
        result = self.collection.update_many(
            {
                'church_id': church_id,
                'status': TransactionModel.STATUS_PENDENTE,
                'due_date': {'$lt': today.isoformat()}
            },
            {'$set': {
                'status': TransactionModel.STATUS_VENCIDO,
                'updated_at': datetime.utcnow()
            }}
        )
        return result.modified_count
