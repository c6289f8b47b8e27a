import pytest
from datetime import date, timedelta
from decimal import Decimal
from django.utils import timezone
from apps.finance.exceptions import InsufficientFundsError
from apps.finance.models import AccountTransaction, TransactionType
from apps.inventory.models import InventoryLine
from apps.purchases.exceptions import (
    InvalidPurchaseError,
    InvalidExpenseError,
    InvalidSplitError,
    PayableAlreadyPaidError,
    InvalidPayableUpdateError,
)
from apps.purchases.models import Purchase, AccountPayable, PayableStatus, PayableType
from apps.purchases.services import PurchaseService, PayableService, split_amount, add_months


class TestSplitAmount:

    def test_remainder_goes_to_first_installments(self):
        assert split_amount(Decimal('100.00'), 3) == [
            Decimal('33.34'), Decimal('33.33'), Decimal('33.33'),
        ]

    def test_sum_matches_total(self):
        amounts = split_amount(Decimal('1000.01'), 7)
        assert sum(amounts) == Decimal('1000.01')
        assert max(amounts) - min(amounts) == Decimal('0.01')

    def test_single_part(self):
        assert split_amount(Decimal('59.90'), 1) == [Decimal('59.90')]

    def test_zero_parts(self):
        with pytest.raises(InvalidSplitError):
            split_amount(Decimal('10.00'), 0)

    def test_fewer_cents_than_parts(self):
        with pytest.raises(InvalidSplitError):
            split_amount(Decimal('0.02'), 3)

    def test_one_cent_each(self):
        amounts = split_amount(Decimal('0.03'), 3)
        assert amounts == [Decimal('0.01')] * 3
        assert all(a.as_tuple().exponent == -2 for a in amounts)


class TestAddMonths:

    def test_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)

    def test_crosses_year(self):
        assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)


@pytest.mark.django_db
class TestMerchandisePurchase:

    def test_receives_stock_and_creates_installments(self, purchase, store, jeans):
        line = InventoryLine.objects.get(store=store, product=jeans, color='Azul', size='40')
        assert line.quantity == 10
        assert purchase.total_amount == Decimal('1000.00')
        assert purchase.items.count() == 1

        payables = list(purchase.payables.order_by('installment_number'))
        assert [p.amount for p in payables] == [Decimal('333.34'), Decimal('333.33'), Decimal('333.33')]
        assert [p.description for p in payables] == [
            'Reposicao jeans (1/3)',
            'Reposicao jeans (2/3)',
            'Reposicao jeans (3/3)',
        ]
        assert all(p.payable_type == PayableType.MERCHANDISE for p in payables)
        assert all(p.status == PayableStatus.PENDING for p in payables)

    def test_existing_line_is_incremented(self, supplier, jeans, store):
        InventoryLine.objects.create(product=jeans, store=store, color='Azul', size='40', quantity=3)
        PurchaseService.create_merchandise_purchase(
            description='Reposicao',
            supplier=supplier,
            store=store,
            issue_date=date(2025, 5, 2),
            items=[{'product': jeans, 'color': 'Azul', 'size': '40', 'quantity': 2, 'unit_cost': Decimal('90')}],
            due_dates=[date(2025, 6, 2)],
        )
        assert InventoryLine.objects.get(store=store, product=jeans).quantity == 5

    def test_zero_total_rejected(self, supplier, jeans, store):
        with pytest.raises(InvalidPurchaseError):
            PurchaseService.create_merchandise_purchase(
                description='Brinde',
                supplier=supplier,
                store=store,
                issue_date=date(2025, 5, 2),
                items=[{'product': jeans, 'color': 'Azul', 'size': '40', 'quantity': 2, 'unit_cost': Decimal('0')}],
                due_dates=[date(2025, 6, 2)],
            )
        assert not Purchase.objects.exists()
        assert not InventoryLine.objects.exists()

    def test_total_below_one_cent_per_installment(self, supplier, jeans, store):
        with pytest.raises(InvalidPurchaseError):
            PurchaseService.create_merchandise_purchase(
                description='Amostra',
                supplier=supplier,
                store=store,
                issue_date=date(2025, 5, 2),
                items=[{'product': jeans, 'color': 'Azul', 'size': '40', 'quantity': 1, 'unit_cost': Decimal('0.01')}],
                due_dates=[date(2025, 6, 2), date(2025, 7, 2)],
            )
        assert not Purchase.objects.exists()
        assert not AccountPayable.objects.exists()
        assert not InventoryLine.objects.exists()

    def test_items_required(self, supplier, store):
        with pytest.raises(InvalidPurchaseError):
            PurchaseService.create_merchandise_purchase(
                description='Vazia', supplier=supplier, store=store,
                issue_date=date(2025, 5, 2), items=[], due_dates=[date(2025, 6, 2)],
            )

    def test_delete_keeps_stock(self, purchase, store, jeans):
        PurchaseService.delete_purchase(purchase_id=purchase.id)

        assert not Purchase.objects.exists()
        assert not AccountPayable.objects.exists()
        assert InventoryLine.objects.get(store=store, product=jeans).quantity == 10


@pytest.mark.django_db
class TestExpenses:

    def test_split_expense(self, rent_category, store):
        payables = PayableService.create_expense(
            description='Reforma vitrine',
            amount=Decimal('1000.00'),
            expense_category=rent_category,
            store=store,
            issue_date=date(2025, 3, 1),
            due_dates=[date(2025, 3, 10), date(2025, 4, 10)],
        )
        assert [p.amount for p in payables] == [Decimal('500.00'), Decimal('500.00')]
        assert payables[1].description == 'Reforma vitrine (2/2)'

    def test_single_expense_has_no_suffix(self, rent_category, store):
        payables = PayableService.create_expense(
            description='Conta de luz',
            amount=Decimal('320.50'),
            expense_category=rent_category,
            store=store,
            issue_date=date(2025, 3, 1),
            due_dates=[date(2025, 3, 15)],
        )
        assert payables[0].description == 'Conta de luz'

    def test_recurring_expense(self, rent_category, store, employee_user):
        payables = PayableService.create_expense(
            description='Aluguel loja',
            amount=Decimal('4500.00'),
            expense_category=rent_category,
            store=store,
            issue_date=date(2025, 1, 2),
            due_dates=[date(2025, 1, 31)],
            employee=employee_user,
            is_recurring=True,
            recurrence_months=3,
        )
        assert [p.amount for p in payables] == [Decimal('4500.00')] * 3
        assert [p.due_date for p in payables] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]
        assert all(p.is_recurring for p in payables)
        assert payables[0].description == 'Aluguel loja (1/3)'

    def test_amount_too_small_to_split(self, rent_category, store):
        with pytest.raises(InvalidExpenseError):
            PayableService.create_expense(
                description='Tarifa',
                amount=Decimal('0.02'),
                expense_category=rent_category,
                store=store,
                issue_date=date(2025, 3, 1),
                due_dates=[date(2025, 3, 10), date(2025, 4, 10), date(2025, 5, 10)],
            )
        assert not AccountPayable.objects.exists()

    def test_split_amounts_have_two_decimals(self, rent_category, store):
        payables = PayableService.create_expense(
            description='Tarifa',
            amount=Decimal('10'),
            expense_category=rent_category,
            store=store,
            issue_date=date(2025, 3, 1),
            due_dates=[date(2025, 3, 10), date(2025, 4, 10), date(2025, 5, 10)],
        )
        assert [str(p.amount) for p in payables] == ['3.34', '3.33', '3.33']

    def test_category_required(self, store):
        with pytest.raises(InvalidExpenseError):
            PayableService.create_expense(
                description='Sem categoria', amount=Decimal('10'), expense_category=None,
                store=store, issue_date=date(2025, 1, 1), due_dates=[date(2025, 1, 5)],
            )


@pytest.mark.django_db
class TestPayables:

    def test_pay_debits_main_balance(self, first_installment, bank_account, finance_user):
        payable = PayableService.pay_payable(
            payable_id=first_installment.id,
            account_id=bank_account.id,
            user=finance_user,
        )

        bank_account.refresh_from_db()
        assert payable.status == PayableStatus.PAID
        assert payable.paid_from_account_id == bank_account.id
        assert payable.paid_at is not None
        assert bank_account.balance == Decimal('166.66')

        entry = AccountTransaction.objects.get(account=bank_account)
        assert entry.transaction_type == TransactionType.WITHDRAWAL
        assert entry.description == 'Payment: Reposicao jeans (1/3)'
        assert entry.metadata == {'payable_id': str(payable.id)}

    def test_sub_balances_cover_payment(self, first_installment, bank_account):
        bank_account.balance = Decimal('200.00')
        bank_account.save()

        PayableService.pay_payable(payable_id=first_installment.id, account_id=bank_account.id)

        bank_account.refresh_from_db()
        assert bank_account.balance == Decimal('-133.34')

    def test_insufficient_total_balance(self, first_installment, bank_account):
        bank_account.balance = Decimal('100.00')
        bank_account.save()

        with pytest.raises(InsufficientFundsError):
            PayableService.pay_payable(payable_id=first_installment.id, account_id=bank_account.id)

        first_installment.refresh_from_db()
        assert first_installment.status == PayableStatus.PENDING

    def test_cannot_pay_twice(self, first_installment, bank_account):
        PayableService.pay_payable(payable_id=first_installment.id, account_id=bank_account.id)
        with pytest.raises(PayableAlreadyPaidError):
            PayableService.pay_payable(payable_id=first_installment.id, account_id=bank_account.id)

    def test_update_pending(self, first_installment):
        payable = PayableService.update_payable(
            payable_id=first_installment.id,
            amount=Decimal('300.00'),
            due_date=date(2025, 6, 20),
        )
        assert payable.amount == Decimal('300.00')
        assert payable.due_date == date(2025, 6, 20)

    def test_update_paid_rejected(self, first_installment, bank_account):
        PayableService.pay_payable(payable_id=first_installment.id, account_id=bank_account.id)
        with pytest.raises(PayableAlreadyPaidError):
            PayableService.update_payable(payable_id=first_installment.id, description='Outro')

    def test_update_non_positive_amount(self, first_installment):
        with pytest.raises(InvalidPayableUpdateError):
            PayableService.update_payable(payable_id=first_installment.id, amount=Decimal('0'))

    def test_display_status(self, first_installment):
        first_installment.due_date = timezone.localdate() - timedelta(days=1)
        assert first_installment.display_status == 'overdue'

        first_installment.due_date = timezone.localdate()
        assert first_installment.display_status == 'pending'
