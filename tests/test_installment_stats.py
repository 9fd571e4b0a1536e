from datetime import date
from decimal import Decimal

import pytest

from finance.models.transaction_model import TransactionModel
from finance.services.installment_stats import (
    compute_installment_stats,
    filter_installment_groups,
    strip_installment_suffix,
)
from tests.factories import TODAY, transaction_doc

PAGO = TransactionModel.STATUS_PAGO
PENDENTE = TransactionModel.STATUS_PENDENTE
VENCIDO = TransactionModel.STATUS_VENCIDO


def test_empty_input_returns_zeroed_stats():
    stats = compute_installment_stats([], now=TODAY)

    assert stats.total_groups == 0
    assert stats.total_paid_amount == 0
    assert stats.total_pending_amount == 0
    assert stats.total_overdue_amount == 0
    assert stats.upcoming_installments == []
    assert stats.installment_groups == []
    assert stats.paid_vs_pending == {'paid': 0, 'pending': 0, 'overdue': 0}
    assert len(stats.monthly_projection) == 6
    assert all(m.total_due == 0 and m.installment_count == 0 for m in stats.monthly_projection)


def test_each_amount_lands_in_exactly_one_bucket():
    docs = [
        transaction_doc(amount='100.10', status=PAGO),
        transaction_doc(amount='200.20', status=PENDENTE),
        transaction_doc(amount='300.30', status=VENCIDO),
        transaction_doc(amount='0.10', status=PENDENTE, installment_group_id='grp-2'),
        transaction_doc(amount='0.20', status=PAGO, installment_group_id='grp-2', due_date=None),
    ]

    stats = compute_installment_stats(docs, now=TODAY)

    total = stats.total_paid_amount + stats.total_pending_amount + stats.total_overdue_amount
    assert total == Decimal('600.90')
    assert stats.total_paid_amount == Decimal('100.30')
    assert stats.total_pending_amount == Decimal('200.30')
    assert stats.total_overdue_amount == Decimal('300.30')
    assert stats.paid_vs_pending == {'paid': 2, 'pending': 2, 'overdue': 1}
    assert stats.total_groups == 2


def test_amounts_are_summed_without_float_drift():
    docs = [transaction_doc(amount=0.1) for _ in range(3)]

    stats = compute_installment_stats(docs, now=TODAY)

    assert stats.total_pending_amount == Decimal('0.3')


def test_same_input_gives_same_output():
    docs = [
        transaction_doc(installment_group_id='a', due_date='2025-07-01'),
        transaction_doc(installment_group_id='b', due_date='2025-06-20', status=VENCIDO),
        transaction_doc(installment_group_id='c', due_date='2025-06-12'),
    ]

    assert compute_installment_stats(docs, now=TODAY) == compute_installment_stats(docs, now=TODAY)


def test_group_with_overdue_sorts_first_regardless_of_dates():
    docs = [
        transaction_doc(installment_group_id='pending-only', due_date='2025-06-11'),
        transaction_doc(installment_group_id='late', due_date='2025-05-01', status=VENCIDO),
        transaction_doc(installment_group_id='late', due_date='2025-12-01', status=PENDENTE),
    ]

    stats = compute_installment_stats(docs, now=TODAY)

    assert [g.installment_group_id for g in stats.installment_groups] == ['late', 'pending-only']


def test_groups_without_next_due_date_sort_last():
    docs = [
        transaction_doc(installment_group_id='paid', due_date='2025-01-01', status=PAGO),
        transaction_doc(installment_group_id='later', due_date='2025-09-01'),
        transaction_doc(installment_group_id='sooner', due_date='2025-07-01'),
    ]

    stats = compute_installment_stats(docs, now=TODAY)

    assert [g.installment_group_id for g in stats.installment_groups] == ['sooner', 'later', 'paid']


@pytest.mark.parametrize('description, expected', [
    ('Equipamento (3/12)', 'Equipamento'),
    ('Aluguel', 'Aluguel'),
    ('Reforma (1/10) do telhado', 'Reforma (1/10) do telhado'),
    ('Cadeiras(2/4)', 'Cadeiras'),
])
def test_strip_installment_suffix(description, expected):
    assert strip_installment_suffix(description) == expected


def test_group_fields():
    docs = [
        transaction_doc(description='Cadeiras (3/4)', amount='50', due_date='2025-08-05'),
        transaction_doc(description='Cadeiras (1/4)', amount='50', due_date='2025-06-05', status=PAGO),
        transaction_doc(description='Cadeiras (2/4)', amount='50', due_date='2025-07-05'),
        transaction_doc(description='Cadeiras (4/4)', amount='50', due_date=None),
    ]

    group = compute_installment_stats(docs, now=TODAY).installment_groups[0]

    assert group.description == 'Cadeiras'
    assert group.total_amount == Decimal('200')
    assert group.total_installments == 4
    assert group.paid_installments == 1
    assert group.pending_installments == 3
    assert group.next_due_date == date(2025, 7, 5)
    assert group.first_due_date == date(2025, 6, 5)
    assert group.last_due_date == date(2025, 8, 5)


def test_group_without_pending_rows_has_no_next_due_date():
    docs = [
        transaction_doc(due_date='2025-05-01', status=VENCIDO),
        transaction_doc(due_date='2025-04-01', status=PAGO),
    ]

    group = compute_installment_stats(docs, now=TODAY).installment_groups[0]

    assert group.next_due_date is None
    assert group.first_due_date == date(2025, 4, 1)


def test_group_without_any_due_date():
    group = compute_installment_stats([transaction_doc(due_date=None)], now=TODAY).installment_groups[0]

    assert group.first_due_date is None
    assert group.last_due_date is None
    assert group.pending_installments == 1


def test_upcoming_window_starts_after_today_and_ends_one_month_later():
    docs = [
        transaction_doc(_id='today', due_date='2025-06-10'),
        transaction_doc(_id='tomorrow', due_date='2025-06-11'),
        transaction_doc(_id='last-day', due_date='2025-07-09'),
        transaction_doc(_id='one-month', due_date='2025-07-10'),
        transaction_doc(_id='after-month', due_date='2025-07-11'),
        transaction_doc(_id='overdue', due_date='2025-06-20', status=VENCIDO),
        transaction_doc(_id='paid', due_date='2025-06-20', status=PAGO),
    ]

    stats = compute_installment_stats(docs, now=TODAY)

    assert [u.id for u in stats.upcoming_installments] == ['tomorrow', 'last-day', 'one-month']


def test_upcoming_is_sorted_and_capped_at_ten():
    docs = [transaction_doc(due_date=f"2025-06-{day}") for day in range(30, 11, -1)]

    upcoming = compute_installment_stats(docs, now=TODAY).upcoming_installments

    assert len(upcoming) == 10
    assert upcoming[0].due_date == date(2025, 6, 12)
    assert upcoming[-1].due_date == date(2025, 6, 21)


def test_projection_for_single_pending_installment_this_month():
    docs = [transaction_doc(amount='100', due_date='2025-06-15')]

    projection = compute_installment_stats(docs, now=TODAY).monthly_projection

    assert projection[0].month == '2025-06'
    assert projection[0].month_label == 'jun/25'
    assert projection[0].total_due == 100
    assert projection[0].installment_count == 1
    assert all(m.total_due == 0 and m.installment_count == 0 for m in projection[1:])


def test_projection_counts_unpaid_rows_by_calendar_month():
    docs = [
        transaction_doc(amount='10', due_date='2025-06-01', status=VENCIDO),
        transaction_doc(amount='20', due_date='2025-06-30'),
        transaction_doc(amount='40', due_date='2025-07-01'),
        transaction_doc(amount='80', due_date='2025-07-15', status=PAGO),
        transaction_doc(amount='160', due_date='2025-11-30'),
        transaction_doc(amount='320', due_date='2025-12-01'),
    ]

    projection = compute_installment_stats(docs, now=TODAY).monthly_projection

    assert [m.month for m in projection] == [
        '2025-06', '2025-07', '2025-08', '2025-09', '2025-10', '2025-11'
    ]
    assert [m.total_due for m in projection] == [30, 40, 0, 0, 0, 160]
    assert [m.installment_count for m in projection] == [2, 1, 0, 0, 0, 1]


def test_projection_crosses_year_boundary():
    projection = compute_installment_stats([], now=date(2025, 11, 30)).monthly_projection

    assert [m.month_label for m in projection] == [
        'nov/25', 'dez/25', 'jan/26', 'fev/26', 'mar/26', 'abr/26'
    ]


def test_accepts_transaction_models():
    model = TransactionModel.from_document(transaction_doc(amount='12.50'))

    stats = compute_installment_stats([model], now=TODAY)

    assert stats.total_pending_amount == Decimal('12.50')


def test_transaction_without_group_is_rejected():
    with pytest.raises(ValueError):
        compute_installment_stats([transaction_doc(installment_group_id=None)], now=TODAY)


@pytest.mark.parametrize('overrides', [
    {'status': 'Cancelado'},
    {'amount': 'abc'},
    {'amount': 'NaN'},
    {'amount': 'Infinity'},
    {'amount': float('nan')},
    {'due_date': '15/06/2025'},
])
def test_invalid_rows_fail_fast(overrides):
    with pytest.raises(ValueError):
        compute_installment_stats([transaction_doc(**overrides)], now=TODAY)


def test_to_dict_serializes_dates():
    stats = compute_installment_stats([transaction_doc(due_date='2025-06-15')], now=TODAY)

    data = stats.to_dict()

    assert data['installment_groups'][0]['next_due_date'] == '2025-06-15'
    assert data['upcoming_installments'][0]['due_date'] == '2025-06-15'
    assert data['monthly_projection'][0]['total_due'] == Decimal('100.00')
    assert data['paid_vs_pending'] == {'paid': 0, 'pending': 1, 'overdue': 0}


class TestFilterInstallmentGroups:

    @pytest.fixture
    def groups(self):
        docs = [
            transaction_doc(installment_group_id='quitado', status=PAGO, due_date='2025-05-01'),
            transaction_doc(installment_group_id='atrasado', status=VENCIDO, due_date='2025-05-01'),
            transaction_doc(installment_group_id='proximo', due_date='2025-06-20'),
            transaction_doc(installment_group_id='distante', due_date='2025-09-01'),
        ]
        return compute_installment_stats(docs, now=TODAY).installment_groups

    def _ids(self, groups):
        return sorted(g.installment_group_id for g in groups)

    def test_all(self, groups):
        assert len(filter_installment_groups(groups, today=TODAY)) == 4

    def test_by_status(self, groups):
        assert self._ids(filter_installment_groups(groups, status='paid')) == ['quitado']
        assert self._ids(filter_installment_groups(groups, status='overdue')) == ['atrasado']
        assert self._ids(filter_installment_groups(groups, status='pending')) == ['distante', 'proximo']

    def test_by_period(self, groups):
        assert self._ids(filter_installment_groups(groups, period='30', today=TODAY)) == ['proximo']
        assert self._ids(filter_installment_groups(groups, period='90', today=TODAY)) == ['distante', 'proximo']

    @pytest.mark.parametrize('kwargs', [{'status': 'todos'}, {'period': '45'}])
    def test_unknown_filter(self, groups, kwargs):
        with pytest.raises(ValueError):
            filter_installment_groups(groups, **kwargs)
