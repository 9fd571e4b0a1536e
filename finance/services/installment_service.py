"""
Service para parcelamentos.

Localização: finance/services/installment_service.py

Lógica de negócio do controle de parcelas: estatísticas do painel,
criação de planos de parcelamento, baixa de parcelas e atualização de
parcelas vencidas.
"""
from typing import List, Dict, Any, Optional, Union
from datetime import date, datetime
from decimal import Decimal, ROUND_DOWN
import logging
import uuid

from dateutil.relativedelta import relativedelta

from core.decorators.audit_log import audit_log
from core.services.audit_log_service import AuditLogService
from core.utils_datas import hoje_local, para_data
from finance.models.installment_model import InstallmentStats
from finance.models.transaction_model import TransactionModel, para_decimal
from finance.repositories.transaction_repository import TransactionRepository
from finance.services.installment_stats import compute_installment_stats, strip_installment_suffix

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

# Campos definidos pelo plano; não podem vir em **extra
CAMPOS_DO_PLANO = frozenset({
    'church_id', 'description', 'amount', 'due_date', 'payment_date', 'status',
    'installment_group_id', 'installment_number', 'total_installments',
})


def _split_amount(total_amount, installment_count: int):
    """Retorna (valor_parcela, valor_ultima_parcela) com centavos exatos."""
    total = para_decimal(total_amount).quantize(CENT)
    base = (total / installment_count).quantize(CENT, rounding=ROUND_DOWN)
    last = total - base * (installment_count - 1)
    return total, base, last


def _validate_plan(total_amount, installment_count: int):
    if not isinstance(installment_count, int) or installment_count < 1:
        raise ValueError("Quantidade de parcelas deve ser maior que zero")
    total = para_decimal(total_amount).quantize(CENT)
    if total <= 0:
        raise ValueError("Valor deve ser maior que zero")
    # Cada parcela precisa de pelo menos um centavo
    if total < CENT * installment_count:
        raise ValueError(
            f"Valor insuficiente para {installment_count} parcelas de pelo menos R$ 0,01"
        )


def build_installment_plan(description: str, total_amount: Union[Decimal, str, int],
                           installment_count: int, first_due_date: Union[date, str],
                           group_id: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Gera as parcelas de uma compra parcelada.

    A parcela k vence k-1 meses após a primeira (31/01 -> 28/02 -> 31/03) e
    recebe o sufixo "(k/n)" na descrição. A diferença de centavos da divisão
    fica na última parcela, então a soma é exatamente o valor total.

    Args:
        description: Descrição da compra (sem sufixo)
        total_amount: Valor total
        installment_count: Quantidade de parcelas
        first_due_date: Vencimento da primeira parcela
        group_id: ID do parcelamento (default: novo UUID)

    Returns:
        Lista de dicts com description, amount, due_date, installment_number,
        total_installments e installment_group_id

    Raises:
        ValueError: Se descrição, valor, quantidade ou data forem inválidos
    """
    if not description or not description.strip():
        raise ValueError("Descrição é obrigatória")
    _validate_plan(total_amount, installment_count)
    first_due = para_data(first_due_date)
    if first_due is None:
        raise ValueError("Vencimento da primeira parcela é obrigatório")

    group_id = group_id or str(uuid.uuid4())
    base_description = strip_installment_suffix(description.strip())
    _, base, last = _split_amount(total_amount, installment_count)

    plan = []
    for number in range(1, installment_count + 1):
        plan.append({
            'description': f"{base_description} ({number}/{installment_count})",
            'amount': last if number == installment_count else base,
            'due_date': first_due + relativedelta(months=number - 1),
            'installment_number': number,
            'total_installments': installment_count,
            'installment_group_id': group_id,
        })
    return plan


def preview_installment_plan(total_amount: Union[Decimal, str, int], installment_count: int,
                             first_due_date: Union[date, str]) -> Dict[str, Any]:
    """
    Resumo do parcelamento exibido antes de salvar.

    Returns:
        Dict com installment_value, last_installment_value, first_due_date,
        last_due_date, installment_count e total_amount
    """
    _validate_plan(total_amount, installment_count)
    first_due = para_data(first_due_date)
    if first_due is None:
        raise ValueError("Vencimento da primeira parcela é obrigatório")

    total, base, last = _split_amount(total_amount, installment_count)
    return {
        'installment_value': base,
        'last_installment_value': last,
        'first_due_date': first_due,
        'last_due_date': first_due + relativedelta(months=installment_count - 1),
        'installment_count': installment_count,
        'total_amount': total,
    }


class InstallmentService:
    """
    Service para gerenciar parcelamentos de uma igreja.

    Exemplo de uso:
        service = InstallmentService()
        stats = service.get_installment_stats(church_id='...')
        stats.total_pending_amount
    """

    def __init__(self, transaction_repo: Optional[TransactionRepository] = None,
                 audit_service: Optional[AuditLogService] = None):
        self.transaction_repo = transaction_repo or TransactionRepository()
        self.audit_service = audit_service or AuditLogService()

    def get_installment_stats(self, church_id: str,
                              now: Union[date, datetime, None] = None) -> InstallmentStats:
        """
        Gera as estatísticas do painel de parcelamentos.

        SEGURANÇA: Os dados são sempre filtrados por church_id.

        Args:
            church_id: ID da igreja (obrigatório)
            now: Data de referência (opcional)

        Raises:
            ValueError: Se church_id não fornecido
        """
        if not church_id:
            raise ValueError("church_id é obrigatório")

        transactions = self.transaction_repo.find_installments_by_church(church_id)
        logger.info(f"[INSTALLMENTS] {len(transactions)} parcelas carregadas para {church_id}")
        return compute_installment_stats(transactions, now=now)

    def get_group_detail(self, church_id: str, group_id: str) -> Optional[Dict[str, Any]]:
        """
        Detalhe de um parcelamento: parcelas ordenadas e valores pagos/restantes.

        Returns:
            Dict com o detalhe ou None se o parcelamento não existir
        """
        if not church_id:
            raise ValueError("church_id é obrigatório")

        docs = self.transaction_repo.find_by_group(church_id, group_id)
        if not docs:
            return None

        installments = [TransactionModel.from_document(d) for d in docs]
        paid = [t for t in installments if t.is_paid]
        paid_amount = sum((t.amount for t in paid), Decimal('0'))
        total_amount = sum((t.amount for t in installments), Decimal('0'))

        return {
            'installment_group_id': group_id,
            'description': strip_installment_suffix(installments[0].description),
            'installments': installments,
            'paid_count': len(paid),
            'paid_amount': paid_amount,
            'remaining_amount': total_amount - paid_amount,
            'total_amount': total_amount,
        }

    @audit_log(action='create_installment_plan', entity='installment_group')
    def create_installment_plan(self, church_id: str, description: str,
                                total_amount: Union[Decimal, str, int], installment_count: int,
                                first_due_date: Union[date, str], **extra) -> Dict[str, Any]:
        """
        Cria as transações de um novo parcelamento.

        Args:
            church_id: ID da igreja
            description: Descrição da compra
            total_amount: Valor total
            installment_count: Quantidade de parcelas
            first_due_date: Vencimento da primeira parcela
            **extra: Campos adicionais gravados em todas as parcelas
                (category_id, ministry_id, created_by, ...)

        Returns:
            Dict com installment_group_id e as parcelas criadas
        """
        if not church_id:
            raise ValueError("church_id é obrigatório")
        reservados = CAMPOS_DO_PLANO.intersection(extra)
        if reservados:
            raise ValueError(f"Campos não podem ser sobrescritos: {', '.join(sorted(reservados))}")

        plan = build_installment_plan(description, total_amount, installment_count, first_due_date)
        documents = [
            TransactionModel.create_transaction_data(church_id=church_id, **row, **extra)
            for row in plan
        ]
        created = self.transaction_repo.create_many(documents)
        logger.info(
            f"[INSTALLMENTS] Parcelamento {plan[0]['installment_group_id']} criado "
            f"com {len(created)} parcelas"
        )
        return {
            'installment_group_id': plan[0]['installment_group_id'],
            'installments': created,
        }

    @audit_log(action='pay_installment', entity='transaction')
    def pay_installment(self, church_id: str, transaction_id: str,
                        payment_date: Optional[date] = None) -> Optional[Dict[str, Any]]:
        """
        Dá baixa em uma parcela pendente ou vencida.

        Args:
            church_id: ID da igreja (para validação de segurança)
            transaction_id: ID da transação
            payment_date: Data do pagamento (default: hoje)

        Returns:
            Transação atualizada ou None se não encontrada

        Raises:
            PermissionError: Se a transação for de outra igreja
            ValueError: Se a parcela já estiver paga
        """
        transaction = self.transaction_repo.find_by_id(transaction_id)
        if not transaction:
            return None

        if str(transaction.get('church_id')) != str(church_id):
            raise PermissionError("Você não tem permissão para alterar esta transação")

        if transaction.get('status') == TransactionModel.STATUS_PAGO:
            raise ValueError("Parcela já está paga")

        return self.transaction_repo.mark_paid(transaction_id, payment_date or hoje_local())

    def update_overdue(self, church_id: str, today: Optional[date] = None) -> int:
        """
        Marca como vencidas as parcelas pendentes com vencimento passado.

        Returns:
            Quantidade de transações atualizadas
        """
        if not church_id:
            raise ValueError("church_id é obrigatório")

        updated = self.transaction_repo.mark_overdue(church_id, today or hoje_local())
        if updated:
            logger.info(f'[INSTALLMENTS] {updated} transações atualizadas para "Vencido"')
            self.audit_service.log_action(
                church_id=church_id,
                action='update_overdue',
                entity='transaction',
                payload={'updated_count': updated}
            )
        return updated
