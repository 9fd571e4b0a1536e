"""
Estruturas derivadas do controle de parcelas (não persistidas).

Localização: finance/models/installment_model.py

Produzidas por compute_installment_stats e consumidas pelo dashboard.
to_dict() mantém os valores como Decimal e converte datas para ISO.
"""
from dataclasses import dataclass, field, asdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


@dataclass
class InstallmentGroup:
    installment_group_id: str
    description: str
    total_amount: Decimal = Decimal('0')
    total_installments: int = 0
    paid_installments: int = 0
    pending_installments: int = 0
    overdue_installments: int = 0
    paid_amount: Decimal = Decimal('0')
    pending_amount: Decimal = Decimal('0')
    overdue_amount: Decimal = Decimal('0')
    next_due_date: Optional[date] = None
    first_due_date: Optional[date] = None
    last_due_date: Optional[date] = None

    @property
    def has_overdue(self) -> bool:
        return self.overdue_installments > 0

    @property
    def is_fully_paid(self) -> bool:
        return self.total_installments > 0 and self.paid_installments == self.total_installments

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ('next_due_date', 'first_due_date', 'last_due_date'):
            data[key] = _iso(data[key])
        return data


@dataclass
class UpcomingInstallment:
    id: str
    description: str
    amount: Decimal
    due_date: date
    installment_number: int
    total_installments: int
    status: str

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['due_date'] = _iso(self.due_date)
        return data


@dataclass
class MonthlyProjection:
    month: str
    month_label: str
    total_due: Decimal = Decimal('0')
    installment_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InstallmentStats:
    total_groups: int = 0
    total_pending_amount: Decimal = Decimal('0')
    total_paid_amount: Decimal = Decimal('0')
    total_overdue_amount: Decimal = Decimal('0')
    upcoming_installments: List[UpcomingInstallment] = field(default_factory=list)
    installment_groups: List[InstallmentGroup] = field(default_factory=list)
    monthly_projection: List[MonthlyProjection] = field(default_factory=list)
    paid_count: int = 0
    pending_count: int = 0
    overdue_count: int = 0

    @property
    def paid_vs_pending(self) -> Dict[str, int]:
        """Contagens para o gráfico de distribuição."""
        return {
            'paid': self.paid_count,
            'pending': self.pending_count,
            'overdue': self.overdue_count,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_groups': self.total_groups,
            'total_pending_amount': self.total_pending_amount,
            'total_paid_amount': self.total_paid_amount,
            'total_overdue_amount': self.total_overdue_amount,
            'upcoming_installments': [i.to_dict() for i in self.upcoming_installments],
            'installment_groups': [g.to_dict() for g in self.installment_groups],
            'monthly_projection': [m.to_dict() for m in self.monthly_projection],
            'paid_vs_pending': self.paid_vs_pending,
        }
