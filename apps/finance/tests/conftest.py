import pytest
from decimal import Decimal
from apps.finance.models import BankAccount, SubBalance, RevenueCategory


@pytest.fixture
def checking(db):
    return BankAccount.objects.create(name='Banco Principal', account_type='checking', balance=Decimal('1000.00'))


@pytest.fixture
def savings(db):
    account = BankAccount.objects.create(name='Poupanca', account_type='savings', balance=Decimal('200.00'))
    SubBalance.objects.create(account=account, name='Reserva', amount=Decimal('300.00'))
    return account


@pytest.fixture
def revenue_category(db):
    return RevenueCategory.objects.create(name='Aluguel de espaco')
