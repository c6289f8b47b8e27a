"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 2 stores (Centro, Shopping Norte)
- 5 users, one per role plus a second seller
- Product attributes (categories, colors, size grades, suppliers)
- 6 products with color/size variations
- Bank accounts, revenue/expense categories and payment method settings
- A merchandise purchase per store (stock + payable installments)
- A recurring rent expense
- An open cash register and a few sales in Centro
- Sales targets for the current month
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.accounts.models import User, UserRole, SalesTarget
from apps.accounts.services import set_sales_target
from apps.catalog.models import Category, Color, SizeGrade, Supplier, Product, ProductVariation
from apps.catalog.services import create_product
from apps.finance.models import (
    AccountType,
    AccountTransaction,
    BankAccount,
    ExpenseCategory,
    Revenue,
    RevenueCategory,
    SubBalance,
)
from apps.finance.services import AccountService
from apps.inventory.models import InventoryLine, StockCount
from apps.purchases.models import AccountPayable, Purchase
from apps.purchases.services import PurchaseService, PayableService
from apps.sales.models import (
    CashRegisterSession,
    Customer,
    PaymentMethod,
    PaymentMethodSetting,
    Sale,
)
from apps.sales.services import configure_payment_methods, open_register, finalize_sale
from apps.stores.models import Store

SAMPLE_PASSWORD = 'password123'


class Command(BaseCommand):
    help = 'Create sample retail data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        stores = self.create_stores()
        users = self.create_users(stores)
        products = self.create_catalog()
        accounts = self.create_finance(stores)
        self.create_purchases(stores, users, products)
        self.create_sales(stores, users, products)
        self.create_targets(users)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        for key in ('manager', 'finance', 'seller', 'seller_norte'):
            self.stdout.write(f'  {users[key].email} / {SAMPLE_PASSWORD}')
        self.stdout.write(f"Global balance: {AccountService.global_balance()} across {len(accounts)} accounts")

    def clear_data(self):
        """Clear all data from the database, dependents first."""
        Sale.objects.all().delete()
        CashRegisterSession.objects.all().delete()
        Customer.objects.all().delete()
        PaymentMethodSetting.objects.all().delete()
        AccountPayable.objects.all().delete()
        Purchase.objects.all().delete()
        Revenue.objects.all().delete()
        AccountTransaction.objects.all().delete()
        SubBalance.objects.all().delete()
        BankAccount.objects.all().delete()
        RevenueCategory.objects.all().delete()
        ExpenseCategory.objects.all().delete()
        StockCount.objects.all().delete()
        InventoryLine.objects.all().delete()
        ProductVariation.objects.all().delete()
        Product.objects.all().delete()
        for model in (Category, Color, SizeGrade, Supplier):
            model.objects.all().delete()
        SalesTarget.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()
        Store.objects.all().delete()

    def create_stores(self):
        self.stdout.write('  Creating stores...')
        centro, _ = Store.objects.get_or_create(name='Centro', defaults={'location': 'Rua Direita, 100'})
        norte, _ = Store.objects.get_or_create(name='Shopping Norte', defaults={'location': 'Av. Norte, 2000'})
        return {'centro': centro, 'norte': norte}

    def create_users(self, stores):
        """Create one user per role, plus a seller in each store."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'username': 'Admin',
                'role': UserRole.ADMIN,
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users_data = [
            ('manager', 'gerente@example.com', 'Gerente Centro', UserRole.MANAGER, stores['centro']),
            ('finance', 'financeiro@example.com', 'Financeiro', UserRole.FINANCE, None),
            ('seller', 'ana@example.com', 'Ana', UserRole.EMPLOYEE, stores['centro']),
            ('seller_norte', 'bruno@example.com', 'Bruno', UserRole.EMPLOYEE, stores['norte']),
        ]

        users = {'admin': admin}
        for key, email, username, role, store in users_data:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={'username': username, 'role': role, 'store': store}
            )
            user.set_password(SAMPLE_PASSWORD)
            user.save()
            users[key] = user

        return users

    def create_catalog(self):
        """Create product attributes and products with variations."""
        self.stdout.write('  Creating catalog...')

        categories = {
            name: Category.objects.get_or_create(name=name)[0]
            for name in ('Camisas', 'Calcas', 'Vestidos')
        }
        for name in ('Branco', 'Preto', 'Azul', 'Vermelho'):
            Color.objects.get_or_create(name=name)
        letters, _ = SizeGrade.objects.get_or_create(name='Letras', defaults={'sizes': ['P', 'M', 'G', 'GG']})
        numbers, _ = SizeGrade.objects.get_or_create(name='Numeracao', defaults={'sizes': ['36', '38', '40', '42']})
        suppliers = {
            name: Supplier.objects.get_or_create(name=name)[0]
            for name in ('Tecelagem Norte', 'Jeans & Cia')
        }

        products_data = [
            ('CAM-001', 'Camisa Linho', 'Camisas', 'Tecelagem Norte', '149.90', '62.00', ['Branco', 'Azul'], letters),
            ('CAM-002', 'Camisa Oxford', 'Camisas', 'Tecelagem Norte', '129.90', '51.00', ['Branco'], letters),
            ('CAL-001', 'Calca Jeans Reta', 'Calcas', 'Jeans & Cia', '199.90', '85.00', ['Azul', 'Preto'], numbers),
            ('CAL-002', 'Calca Alfaiataria', 'Calcas', 'Jeans & Cia', '229.90', '96.00', ['Preto'], numbers),
            ('VES-001', 'Vestido Midi', 'Vestidos', 'Tecelagem Norte', '259.90', '110.00', ['Vermelho', 'Preto'], letters),
            ('VES-002', 'Vestido Chemise', 'Vestidos', 'Tecelagem Norte', '219.90', '90.00', ['Azul'], letters),
        ]

        products = {}
        for code, name, category, supplier, price, cost, colors, grade in products_data:
            product = Product.objects.filter(code=code).first()
            if product is None:
                product = create_product(
                    code=code,
                    name=name,
                    price=Decimal(price),
                    cost_price=Decimal(cost),
                    category=categories[category],
                    supplier=suppliers[supplier],
                    variations=[{'color': color, 'size': size} for color in colors for size in grade.sizes],
                )
            products[code] = product

        return products

    def create_finance(self, stores):
        """Create bank accounts, categories and payment method settings."""
        self.stdout.write('  Creating bank accounts and payment settings...')

        accounts = {}
        if not BankAccount.objects.filter(name='Conta Movimento').exists():
            accounts['checking'] = AccountService.create_account(
                name='Conta Movimento',
                account_type=AccountType.CHECKING,
                balance=Decimal('15000.00'),
                sub_balances=[{'name': 'Reserva impostos', 'amount': Decimal('3000.00')}],
            )
        else:
            accounts['checking'] = BankAccount.objects.get(name='Conta Movimento')
        accounts['acquirer'], _ = BankAccount.objects.get_or_create(
            name='Adquirente Cartoes',
            defaults={'account_type': AccountType.CHECKING},
        )

        for name in ('Aluguel', 'Energia', 'Salarios'):
            ExpenseCategory.objects.get_or_create(name=name)
        RevenueCategory.objects.get_or_create(name='Sublocacao')

        for store in stores.values():
            configure_payment_methods(store=store, entries=[
                {'method': PaymentMethod.PIX, 'account': accounts['checking'], 'fee_percentage': Decimal('0.00')},
                {'method': PaymentMethod.DEBIT_CARD, 'account': accounts['acquirer'], 'fee_percentage': Decimal('1.50')},
                {'method': PaymentMethod.CREDIT_CARD, 'account': accounts['acquirer'], 'fee_percentage': Decimal('3.20')},
                {'method': PaymentMethod.INSTALLMENTS_3X, 'account': accounts['acquirer'], 'fee_percentage': Decimal('4.90')},
            ])

        return accounts

    def create_purchases(self, stores, users, products):
        """Stock both stores through purchases and launch a recurring expense."""
        self.stdout.write('  Creating purchases and payables...')

        if Purchase.objects.exists():
            return

        today = timezone.localdate()
        for store_key, quantity in (('centro', 6), ('norte', 3)):
            items = [
                {
                    'product': product,
                    'color': variation.color,
                    'size': variation.size,
                    'quantity': quantity,
                    'unit_cost': product.cost_price,
                }
                for product in products.values()
                for variation in product.variations.all()
            ]
            PurchaseService.create_merchandise_purchase(
                description=f'Colecao de estacao - {stores[store_key].name}',
                supplier=products['CAM-001'].supplier,
                store=stores[store_key],
                issue_date=today - timedelta(days=15),
                items=items,
                due_dates=[today + timedelta(days=days) for days in (15, 45, 75)],
                user=users['finance'],
            )

        PayableService.create_expense(
            description='Aluguel loja Centro',
            amount=Decimal('4500.00'),
            expense_category=ExpenseCategory.objects.get(name='Aluguel'),
            store=stores['centro'],
            issue_date=today,
            due_dates=[today.replace(day=1) + timedelta(days=34)],
            is_recurring=True,
            recurrence_months=6,
            user=users['finance'],
        )

    def create_sales(self, stores, users, products):
        """Open the Centro register and ring up a few sales."""
        self.stdout.write('  Creating customers and sales...')

        if Sale.objects.exists():
            return

        customers = [
            Customer.objects.create(name='Maria Souza', phone='11 99999-0000', cpf='123.456.789-00'),
            Customer.objects.create(name='Joao Lima', phone='11 98888-1111'),
        ]
        open_register(store=stores['centro'], opening_balance=Decimal('200.00'), user=users['seller'])

        shirt = products['CAM-001']
        jeans = products['CAL-001']
        carts = [
            (customers[0], [(shirt, 'Branco', 'M', 2)], [(PaymentMethod.PIX, None)]),
            (customers[1], [(jeans, 'Azul', '40', 1)], [(PaymentMethod.CREDIT_CARD, None)]),
            (customers[0], [(shirt, 'Azul', 'G', 1), (jeans, 'Preto', '38', 1)],
             [(PaymentMethod.CASH, Decimal('100.00')), (PaymentMethod.DEBIT_CARD, None)]),
        ]

        for customer, cart, payments in carts:
            items = [
                {'product': product, 'color': color, 'size': size, 'quantity': quantity}
                for product, color, size, quantity in cart
            ]
            total = sum(product.price * quantity for product, _, _, quantity in cart)
            fixed = sum(amount for _, amount in payments if amount is not None)
            finalize_sale(
                store=stores['centro'],
                seller=users['seller'],
                customer=customer,
                items=items,
                payments=[
                    {'method': method, 'amount': amount if amount is not None else total - fixed}
                    for method, amount in payments
                ],
                user=users['seller'],
            )

    def create_targets(self, users):
        self.stdout.write('  Creating sales targets...')
        month = timezone.localdate().strftime('%Y-%m')
        for key in ('seller', 'seller_norte'):
            set_sales_target(
                user=users[key],
                month=month,
                monthly_goal=Decimal('20000.00'),
                commission_rate=Decimal('2.00'),
                bonus_commission_rate=Decimal('3.50'),
            )
