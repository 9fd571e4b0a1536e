import pytest

from finance.services.installment_service import InstallmentService
from schedules.services.schedule_service import ScheduleService
from tests.factories import FakeAuditService, FakeScheduleRepository, FakeTransactionRepository


@pytest.fixture
def audit_service():
    return FakeAuditService()


@pytest.fixture
def transaction_repo():
    return FakeTransactionRepository()


@pytest.fixture
def schedule_repo():
    return FakeScheduleRepository()


@pytest.fixture
def installment_service(transaction_repo, audit_service):
    return InstallmentService(transaction_repo=transaction_repo, audit_service=audit_service)


@pytest.fixture
def schedule_service(schedule_repo, audit_service):
    return ScheduleService(schedule_repo=schedule_repo, audit_service=audit_service)
