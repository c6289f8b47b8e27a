"""
Finance Services Module
=======================

Business logic for bank accounts, ledger transactions and revenues.

Classes:
    AccountService: Account maintenance, deposits, withdrawals and transfers.
    RevenueService: Non-sales income credited to bank accounts.

Every balance change locks the account row with ``select_for_update`` and
writes a matching ``AccountTransaction`` in the same database transaction,
so the ledger and the balances cannot drift apart.

Example:
    Paying a supplier from the main checking account::

        from apps.finance.services import AccountService

        AccountService.withdraw(
            account_id=checking.id,
            amount=Decimal('1500.00'),
            description='Payment: Fabric order (1/3)',
            user=request.user,
            metadata={'payable_id': str(payable.id)},
        )
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from .exceptions import (
    InvalidAmountError,
    InsufficientFundsError,
    SameAccountTransferError,
    AccountInUseError,
)
from .models import (
    BankAccount,
    SubBalance,
    AccountTransaction,
    TransactionType,
    Revenue,
)

logger = logging.getLogger(__name__)


def _require_positive(amount):
    if amount is None or amount <= 0:
        raise InvalidAmountError()


def clean_sub_balances(sub_balances):
    """Keep only named sub-balances with a positive amount."""
    cleaned = []
    for entry in sub_balances or ():
        name = (entry.get('name') or '').strip()
        amount = entry.get('amount') or Decimal('0')
        if name and amount > 0:
            cleaned.append((name, amount))
    return cleaned


class AccountService:
    """
    Service for bank account maintenance and money movement.

    Methods:
        create_account: Create an account with optional sub-balances.
        update_account: Edit name, type, balance or sub-balances.
        delete_account: Delete an account and its transactions.
        deposit: Credit an account.
        withdraw: Debit an account.
        transfer: Move money between two accounts.
        global_balance: Sum of every account's total balance.
    """

    @staticmethod
    @transaction.atomic
    def create_account(*, name, account_type, balance=Decimal('0.00'), sub_balances=()):
        account = BankAccount.objects.create(
            name=name.strip(),
            account_type=account_type,
            balance=balance,
        )
        SubBalance.objects.bulk_create([
            SubBalance(account=account, name=sub_name, amount=amount)
            for sub_name, amount in clean_sub_balances(sub_balances)
        ])
        logger.info("Bank account %s created with balance %s", account.name, account.balance)
        return account

    @staticmethod
    @transaction.atomic
    def update_account(*, account_id, sub_balances=None, **changes):
        """
        Update account fields.

        When ``sub_balances`` is given it replaces the existing set, after
        dropping unnamed and non-positive entries.
        """
        account = BankAccount.objects.select_for_update().get(id=account_id)

        for field in ('name', 'account_type', 'balance'):
            if field in changes:
                setattr(account, field, changes[field])
        account.save()

        if sub_balances is not None:
            account.sub_balances.all().delete()
            SubBalance.objects.bulk_create([
                SubBalance(account=account, name=sub_name, amount=amount)
                for sub_name, amount in clean_sub_balances(sub_balances)
            ])

        return account

    @staticmethod
    @transaction.atomic
    def delete_account(*, account_id):
        """
        Delete an account together with its transaction history.

        Raises:
            AccountInUseError: If revenues point at the account.
        """
        account = BankAccount.objects.select_for_update().get(id=account_id)
        if account.revenues.exists():
            raise AccountInUseError()

        name = account.name
        account.transactions.all().delete()
        account.delete()
        logger.info("Bank account %s deleted", name)

    @staticmethod
    @transaction.atomic
    def deposit(*, account_id, amount, description, user=None, metadata=None):
        """
        Credit an account and record a deposit.

        Returns:
            AccountTransaction: The ledger entry created.
        """
        _require_positive(amount)
        account = BankAccount.objects.select_for_update().get(id=account_id)

        account.balance += amount
        account.save(update_fields=['balance', 'updated_at'])

        return AccountTransaction.objects.create(
            account=account,
            transaction_type=TransactionType.DEPOSIT,
            amount=amount,
            description=description,
            metadata=metadata or {},
            performed_by=user,
        )

    @staticmethod
    @transaction.atomic
    def withdraw(*, account_id, amount, description, user=None, metadata=None,
                 cover_with_sub_balances=False):
        """
        Debit an account and record a withdrawal.

        Args:
            cover_with_sub_balances (bool): Accept the debit when balance plus
                sub-balances covers it. The main balance is still the one
                debited and may go negative. Used when paying payables.

        Raises:
            InvalidAmountError: If amount is not positive.
            InsufficientFundsError: If the available funds are lower than amount.
        """
        _require_positive(amount)
        account = BankAccount.objects.select_for_update().get(id=account_id)

        available = account.total_balance if cover_with_sub_balances else account.balance
        if available < amount:
            raise InsufficientFundsError(
                f"Insufficient balance in {account.name}: available {available}, required {amount}"
            )

        account.balance -= amount
        account.save(update_fields=['balance', 'updated_at'])

        return AccountTransaction.objects.create(
            account=account,
            transaction_type=TransactionType.WITHDRAWAL,
            amount=amount,
            description=description,
            metadata=metadata or {},
            performed_by=user,
        )

    @staticmethod
    @transaction.atomic
    def transfer(*, from_account_id, to_account_id, amount, description='', user=None):
        """
        Move money between accounts.

        Both rows are locked in primary key order so two opposite transfers
        cannot deadlock.

        Returns:
            tuple: (transfer_out transaction, transfer_in transaction)

        Raises:
            SameAccountTransferError: If both accounts are the same.
            InvalidAmountError: If amount is not positive.
            InsufficientFundsError: If the source balance is lower than amount.
        """
        if str(from_account_id) == str(to_account_id):
            raise SameAccountTransferError()
        _require_positive(amount)

        accounts = {
            str(account.id): account
            for account in BankAccount.objects.select_for_update()
            .filter(id__in=[from_account_id, to_account_id])
            .order_by('id')
        }
        source = accounts[str(from_account_id)]
        destination = accounts[str(to_account_id)]

        if source.balance < amount:
            raise InsufficientFundsError(
                f"Insufficient balance in {source.name}: available {source.balance}, required {amount}"
            )

        source.balance -= amount
        destination.balance += amount
        source.save(update_fields=['balance', 'updated_at'])
        destination.save(update_fields=['balance', 'updated_at'])

        note = f": {description}" if description else ''
        outgoing = AccountTransaction.objects.create(
            account=source,
            transaction_type=TransactionType.TRANSFER_OUT,
            amount=amount,
            description=f"Transfer to {destination.name}{note}",
            metadata={'counterpart_account_id': str(destination.id)},
            performed_by=user,
        )
        incoming = AccountTransaction.objects.create(
            account=destination,
            transaction_type=TransactionType.TRANSFER_IN,
            amount=amount,
            description=f"Transfer from {source.name}{note}",
            metadata={'counterpart_account_id': str(source.id)},
            performed_by=user,
        )

        logger.info("Transferred %s from %s to %s", amount, source.name, destination.name)
        return outgoing, incoming

    @staticmethod
    def global_balance():
        """Total money across all accounts, sub-balances included."""
        main = BankAccount.objects.aggregate(total=Sum('balance'))['total'] or Decimal('0.00')
        reserved = SubBalance.objects.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')
        return main + reserved


class RevenueService:
    """
    Service for revenues (income that does not come from sales).

    A revenue always owns exactly one deposit transaction on its
    destination account; editing or deleting the revenue keeps the account
    balance and that transaction in step.
    """

    @staticmethod
    def _describe(description, store):
        return f"Revenue: {description} (Store: {store.name})"

    @staticmethod
    @transaction.atomic
    def record_revenue(*, category, description, amount, received_date,
                       destination_account, store, user=None):
        """
        Record a revenue and credit its destination account.

        Returns:
            Revenue: The created revenue, linked to its deposit transaction.
        """
        _require_positive(amount)

        deposit = AccountService.deposit(
            account_id=destination_account.id,
            amount=amount,
            description=RevenueService._describe(description, store),
            user=user,
        )
        revenue = Revenue.objects.create(
            category=category,
            description=description,
            amount=amount,
            received_date=received_date,
            destination_account=destination_account,
            store=store,
            transaction=deposit,
            created_by=user,
        )
        deposit.metadata = {'revenue_id': str(revenue.id)}
        deposit.save(update_fields=['metadata'])

        logger.info("Revenue %s of %s credited to %s", revenue.id, amount, destination_account.name)
        return revenue

    @staticmethod
    @transaction.atomic
    def update_revenue(*, revenue_id, **changes):
        """
        Update a revenue and rebalance the accounts involved.

        If the destination account changes, the old account gives back the
        old amount and the new account receives the new amount. Otherwise
        the account is adjusted by the difference.
        """
        revenue = Revenue.objects.select_for_update().get(id=revenue_id)
        old_amount = revenue.amount
        old_account_id = revenue.destination_account_id

        for field in ('category', 'description', 'amount', 'received_date',
                      'destination_account', 'store'):
            if field in changes:
                setattr(revenue, field, changes[field])
        _require_positive(revenue.amount)

        new_account_id = revenue.destination_account_id
        if new_account_id != old_account_id:
            old_account = BankAccount.objects.select_for_update().get(id=old_account_id)
            old_account.balance -= old_amount
            old_account.save(update_fields=['balance', 'updated_at'])

            new_account = BankAccount.objects.select_for_update().get(id=new_account_id)
            new_account.balance += revenue.amount
            new_account.save(update_fields=['balance', 'updated_at'])
        elif revenue.amount != old_amount:
            account = BankAccount.objects.select_for_update().get(id=new_account_id)
            account.balance += revenue.amount - old_amount
            account.save(update_fields=['balance', 'updated_at'])

        revenue.save()

        if revenue.transaction_id:
            entry = revenue.transaction
            entry.account_id = new_account_id
            entry.amount = revenue.amount
            entry.description = RevenueService._describe(revenue.description, revenue.store)
            entry.save(update_fields=['account', 'amount', 'description'])

        return revenue

    @staticmethod
    @transaction.atomic
    def delete_revenue(*, revenue_id):
        """Delete a revenue, debit its account and remove its deposit."""
        revenue = Revenue.objects.select_for_update().get(id=revenue_id)

        account = BankAccount.objects.select_for_update().get(id=revenue.destination_account_id)
        account.balance -= revenue.amount
        account.save(update_fields=['balance', 'updated_at'])

        entry = revenue.transaction
        revenue.delete()
        if entry is not None:
            entry.delete()

        logger.info("Revenue %s deleted, %s debited from %s", revenue_id, revenue.amount, account.name)
