"""
Modelo de Transação (campos usados pelo controle de parcelas).

Localização: finance/models/transaction_model.py

Schema no MongoDB:
{
  _id: ObjectId,
  church_id: String,              # Igreja (tenant)
  description: String,            # ex: "Equipamento de som (3/12)"
  amount: Decimal128 | String,    # Valor da parcela
  due_date: String (YYYY-MM-DD),  # Vencimento (opcional)
  payment_date: String,           # Data do pagamento (opcional)
  status: String,                 # 'Pendente', 'Pago', 'Vencido'
  installment_group_id: String,   # Agrupa as parcelas de uma compra (opcional)
  installment_number: Int,        # Número da parcela (1..n)
  total_installments: Int,        # Total de parcelas do plano
  created_at: ISODate
}
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Dict, Optional

from bson.decimal128 import Decimal128

from core.utils_datas import para_data


def para_decimal(valor: Any) -> Decimal:
    """Converte o valor armazenado em Decimal, sem passar por float."""
    if isinstance(valor, Decimal128):
        numero = valor.to_decimal()
    elif isinstance(valor, Decimal):
        numero = valor
    elif valor is None or isinstance(valor, bool):
        raise ValueError(f"Valor inválido: {valor!r}")
    else:
        try:
            numero = Decimal(str(valor))
        except InvalidOperation:
            raise ValueError(f"Valor inválido: {valor!r}")
    # NaN e Infinity não são valores monetários
    if not numero.is_finite():
        raise ValueError(f"Valor inválido: {valor!r}")
    return numero


@dataclass(frozen=True)
class TransactionModel:
    """
    Transação validada na fronteira com o repository.

    Status aceitos: TransactionModel.STATUS_PENDENTE, STATUS_PAGO e
    STATUS_VENCIDO. Qualquer outro valor levanta ValueError.
    """

    STATUS_PENDENTE: ClassVar[str] = 'Pendente'
    STATUS_PAGO: ClassVar[str] = 'Pago'
    STATUS_VENCIDO: ClassVar[str] = 'Vencido'

    VALID_STATUS: ClassVar[tuple] = (STATUS_PENDENTE, STATUS_PAGO, STATUS_VENCIDO)

    id: str
    description: str
    amount: Decimal
    status: str
    due_date: Optional[date] = None
    payment_date: Optional[date] = None
    installment_group_id: Optional[str] = None
    installment_number: int = 1
    total_installments: int = 1
    church_id: Optional[str] = None

    def __post_init__(self):
        if self.status not in self.VALID_STATUS:
            raise ValueError(f"Status de transação inválido: {self.status!r}")

    @property
    def is_paid(self) -> bool:
        return self.status == self.STATUS_PAGO

    @property
    def is_overdue(self) -> bool:
        return self.status == self.STATUS_VENCIDO

    @property
    def is_pending(self) -> bool:
        return self.status == self.STATUS_PENDENTE

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'TransactionModel':
        """
        Cria o modelo a partir de um documento do MongoDB.

        Raises:
            ValueError: Se status, valor ou datas forem inválidos
        """
        group_id = doc.get('installment_group_id')
        return cls(
            id=str(doc.get('_id', doc.get('id', ''))),
            description=doc.get('description') or '',
            amount=para_decimal(doc.get('amount')),
            status=doc.get('status'),
            due_date=para_data(doc.get('due_date')),
            payment_date=para_data(doc.get('payment_date')),
            installment_group_id=str(group_id) if group_id is not None else None,
            installment_number=int(doc.get('installment_number') or 1),
            total_installments=int(doc.get('total_installments') or 1),
            church_id=doc.get('church_id'),
        )

    @staticmethod
    def create_transaction_data(church_id: str, description: str, amount: Decimal,
                                due_date: date, installment_group_id: Optional[str] = None,
                                installment_number: int = 1, total_installments: int = 1,
                                **kwargs) -> Dict[str, Any]:
        """
        Monta o documento de uma nova transação pendente.

        O valor é gravado como Decimal128 e as datas como YYYY-MM-DD.
        """
        return {
            'church_id': church_id,
            'description': description.strip(),
            'amount': Decimal128(amount),
            'due_date': due_date.isoformat() if due_date else None,
            'payment_date': None,
            'status': TransactionModel.STATUS_PENDENTE,
            'installment_group_id': installment_group_id,
            'installment_number': installment_number,
            'total_installments': total_installments,
            **kwargs
        }
