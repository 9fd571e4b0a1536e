"""
Fábricas de documentos e repositories em memória para os testes.
"""
from datetime import date
from itertools import count

from finance.models.transaction_model import TransactionModel

_ids = count(1)


def transaction_doc(**overrides):
    doc = {
        '_id': f"tx-{next(_ids)}",
        'church_id': 'church-1',
        'description': 'Equipamento de som (1/3)',
        'amount': '100.00',
        'due_date': '2025-06-15',
        'payment_date': None,
        'status': TransactionModel.STATUS_PENDENTE,
        'installment_group_id': 'grp-1',
        'installment_number': 1,
        'total_installments': 3,
    }
    doc.update(overrides)
    return doc


def schedule_doc(**overrides):
    doc = {
        '_id': f"sch-{next(_ids)}",
        'church_id': 'church-1',
        'ministry_id': 'min-1',
        'volunteer_id': 'vol-1',
        'schedule_date': '2025-06-01',
        'shift_start': '09:00',
        'shift_end': '12:00',
        'schedule_type': 'primary',
        'confirmed': False,
    }
    doc.update(overrides)
    return doc


class FakeAuditService:
    def __init__(self):
        self.logs = []

    def log_action(self, **kwargs):
        kwargs.setdefault('status', 'success')
        self.logs.append(kwargs)
        return kwargs

    def log_error(self, **kwargs):
        kwargs['status'] = 'error'
        self.logs.append(kwargs)
        return kwargs

    def actions(self, status='success'):
        return [log['action'] for log in self.logs if log['status'] == status]


class FakeTransactionRepository:
    def __init__(self, documents=()):
        self.documents = {}
        for doc in documents:
            self._store(doc)

    def _store(self, doc):
        doc.setdefault('_id', f"tx-{next(_ids)}")
        self.documents[doc['_id']] = doc
        return doc

    def find_installments_by_church(self, church_id):
        docs = [
            d for d in self.documents.values()
            if d.get('church_id') == church_id and d.get('installment_group_id') is not None
        ]
        return sorted(docs, key=lambda d: d.get('due_date') or '')

    def find_by_group(self, church_id, group_id):
        docs = [
            d for d in self.documents.values()
            if d.get('church_id') == church_id and d.get('installment_group_id') == group_id
        ]
        return sorted(docs, key=lambda d: d['installment_number'])

    def find_by_id(self, transaction_id):
        return self.documents.get(transaction_id)

    def create_many(self, documents):
        return [self._store(doc) for doc in documents]

    def mark_paid(self, transaction_id, payment_date):
        doc = self.documents.get(transaction_id)
        if doc is None:
            return None
        doc['status'] = TransactionModel.STATUS_PAGO
        doc['payment_date'] = payment_date.isoformat()
        return doc

    def mark_overdue(self, church_id, today):
        updated = 0
        for doc in self.documents.values():
            if (doc.get('church_id') == church_id
                    and doc.get('status') == TransactionModel.STATUS_PENDENTE
                    and doc.get('due_date') and doc['due_date'] < today.isoformat()):
                doc['status'] = TransactionModel.STATUS_VENCIDO
                updated += 1
        return updated


class FakeScheduleRepository:
    def __init__(self, documents=()):
        self.documents = {}
        for doc in documents:
            self.create(doc)

    def create(self, doc):
        doc.setdefault('_id', f"sch-{next(_ids)}")
        self.documents[doc['_id']] = doc
        return doc

    def _in_period(self, doc, start_date, end_date):
        return start_date.isoformat() <= doc['schedule_date'] <= end_date.isoformat()

    def find_by_ministry_and_period(self, ministry_id, start_date, end_date):
        self.last_period = (start_date, end_date)
        return [
            d for d in self.documents.values()
            if d['ministry_id'] == ministry_id and self._in_period(d, start_date, end_date)
        ]

    def find_by_volunteers_and_period(self, volunteer_ids, start_date, end_date):
        return [
            d for d in self.documents.values()
            if d['volunteer_id'] in volunteer_ids and self._in_period(d, start_date, end_date)
        ]

    def find_by_volunteer_and_date(self, volunteer_id, schedule_date):
        return [
            d for d in self.documents.values()
            if d['volunteer_id'] == volunteer_id and d['schedule_date'] == schedule_date.isoformat()
        ]

    def find_by_id(self, schedule_id):
        return self.documents.get(schedule_id)

    def update(self, schedule_id, data):
        doc = self.documents.get(schedule_id)
        if doc is None:
            return None
        doc.update(data)
        return doc

    def delete(self, schedule_id):
        return self.documents.pop(schedule_id, None) is not None

    def confirm(self, schedule_id):
        return self.update(schedule_id, {'confirmed': True})


TODAY = date(2025, 6, 10)
