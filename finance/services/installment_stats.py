"""
Estatísticas de parcelamentos.

Localização: finance/services/installment_stats.py

Funções puras sobre transações já carregadas: não acessam o banco e não
guardam estado. "Hoje" pode ser injetado para resultados determinísticos.
"""
from collections import OrderedDict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Union
import re

from dateutil.relativedelta import relativedelta

from core.utils_datas import hoje_local, para_data, rotulo_mes
from finance.models.installment_model import (
    InstallmentGroup,
    InstallmentStats,
    MonthlyProjection,
    UpcomingInstallment,
)
from finance.models.transaction_model import TransactionModel

SUFIXO_PARCELA_RE = re.compile(r"\s*\(\d+/\d+\)$")

MAX_UPCOMING = 10
PROJECTION_MONTHS = 6

TransactionLike = Union[TransactionModel, Dict[str, Any]]


def strip_installment_suffix(description: str) -> str:
    """'Equipamento (3/12)' -> 'Equipamento'. Sem sufixo, retorna inalterado."""
    return SUFIXO_PARCELA_RE.sub("", description)


def _to_model(t: TransactionLike) -> TransactionModel:
    if isinstance(t, TransactionModel):
        return t
    return TransactionModel.from_document(t)


def _resolve_today(now: Union[date, datetime, None]) -> date:
    if now is None:
        return hoje_local()
    return para_data(now)


def _build_group(group_id: str, rows: List[TransactionModel]) -> InstallmentGroup:
    group = InstallmentGroup(
        installment_group_id=group_id,
        description=strip_installment_suffix(rows[0].description),
        total_installments=len(rows),
    )

    for t in rows:
        if t.is_paid:
            group.paid_installments += 1
            group.paid_amount += t.amount
        elif t.is_overdue:
            group.overdue_installments += 1
            group.overdue_amount += t.amount
        else:
            group.pending_installments += 1
            group.pending_amount += t.amount
            if t.due_date and (group.next_due_date is None or t.due_date < group.next_due_date):
                group.next_due_date = t.due_date

    group.total_amount = group.paid_amount + group.pending_amount + group.overdue_amount

    due_dates = [t.due_date for t in rows if t.due_date]
    if due_dates:
        group.first_due_date = min(due_dates)
        group.last_due_date = max(due_dates)

    return group


def _group_sort_key(group: InstallmentGroup):
    # Vencidos primeiro; depois pelo próximo vencimento, sem vencimento por último
    return (
        0 if group.has_overdue else 1,
        group.next_due_date is None,
        group.next_due_date or date.max,
    )


def _upcoming(transactions: List[TransactionModel], today: date) -> List[UpcomingInstallment]:
    # "Agora" tem hora do dia: o vencimento de hoje fica de fora e o do
    # mesmo dia no mês seguinte entra
    limit = today + relativedelta(months=1)
    candidates = [
        t for t in transactions
        if t.is_pending and t.due_date and today < t.due_date <= limit
    ]
    candidates.sort(key=lambda t: (t.due_date, t.installment_number))

    return [
        UpcomingInstallment(
            id=t.id,
            description=t.description,
            amount=t.amount,
            due_date=t.due_date,
            installment_number=t.installment_number,
            total_installments=t.total_installments,
            status=t.status,
        )
        for t in candidates[:MAX_UPCOMING]
    ]


def _monthly_projection(transactions: List[TransactionModel], today: date) -> List[MonthlyProjection]:
    first_month = today.replace(day=1)
    unpaid = [t for t in transactions if not t.is_paid and t.due_date]

    projection = []
    for i in range(PROJECTION_MONTHS):
        month_start = first_month + relativedelta(months=i)
        month_end = first_month + relativedelta(months=i + 1)

        entry = MonthlyProjection(
            month=month_start.strftime('%Y-%m'),
            month_label=rotulo_mes(month_start),
        )
        for t in unpaid:
            if month_start <= t.due_date < month_end:
                entry.total_due += t.amount
                entry.installment_count += 1
        projection.append(entry)

    return projection


def compute_installment_stats(transactions: Iterable[TransactionLike],
                              now: Union[date, datetime, None] = None) -> InstallmentStats:
    """
    Calcula as estatísticas de parcelamentos de uma igreja.

    Args:
        transactions: Transações com installment_group_id (TransactionModel ou
            documentos do MongoDB), em qualquer ordem
        now: Data de referência (default: hoje no fuso da igreja)

    Returns:
        InstallmentStats com totais globais, grupos ordenados, próximas
        parcelas (até 10) e projeção de 6 meses

    Raises:
        ValueError: Se alguma transação não tiver installment_group_id ou
            tiver status, valor ou data inválidos
    """
    today = _resolve_today(now)
    rows = [_to_model(t) for t in transactions]

    groups_map: 'OrderedDict[str, List[TransactionModel]]' = OrderedDict()
    for t in rows:
        if t.installment_group_id is None:
            raise ValueError(f"Transação {t.id} não pertence a um parcelamento")
        groups_map.setdefault(t.installment_group_id, []).append(t)

    stats = InstallmentStats(total_groups=len(groups_map))

    groups = []
    for group_id, group_rows in groups_map.items():
        group = _build_group(group_id, group_rows)
        groups.append(group)

        stats.total_paid_amount += group.paid_amount
        stats.total_pending_amount += group.pending_amount
        stats.total_overdue_amount += group.overdue_amount
        stats.paid_count += group.paid_installments
        stats.pending_count += group.pending_installments
        stats.overdue_count += group.overdue_installments

    stats.installment_groups = sorted(groups, key=_group_sort_key)
    stats.upcoming_installments = _upcoming(rows, today)
    stats.monthly_projection = _monthly_projection(rows, today)

    return stats


def filter_installment_groups(groups: List[InstallmentGroup], status: str = 'all',
                              period: str = 'all',
                              today: Optional[date] = None) -> List[InstallmentGroup]:
    """
    Aplica os filtros do painel de parcelamentos.

    Args:
        groups: Grupos já calculados
        status: 'all', 'paid' (quitados), 'pending' (com parcela pendente)
            ou 'overdue' (com parcela vencida)
        period: 'all', '30', '60' ou '90' (próximo vencimento nos próximos N dias)
        today: Data de referência (default: hoje no fuso da igreja)

    Raises:
        ValueError: Se status ou period não forem reconhecidos
    """
    status_filters = {
        'all': lambda g: True,
        'paid': lambda g: g.is_fully_paid,
        'pending': lambda g: g.pending_installments > 0,
        'overdue': lambda g: g.overdue_installments > 0,
    }
    if status not in status_filters:
        raise ValueError(f"Filtro de status inválido: {status!r}")
    if period not in ('all', '30', '60', '90'):
        raise ValueError(f"Filtro de período inválido: {period!r}")

    result = [g for g in groups if status_filters[status](g)]

    if period != 'all':
        today = today or hoje_local()
        limit = today + timedelta(days=int(period))
        result = [
            g for g in result
            if g.next_due_date and today <= g.next_due_date <= limit
        ]

    return result
