import random
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction as db_transaction
from django.utils import timezone

from apps.dashboard.utils import month_bounds, shift_months
from apps.transactions.models import Category, Transaction

User = get_user_model()

# (카테고리 이름, 설명, 최소 금액, 최대 금액)
EXPENSE_SAMPLES = [
    ('Food & Dining', 'Grocery Shopping', 40, 180),
    ('Food & Dining', 'Dinner out', 20, 90),
    ('Transportation', 'Gas Station', 30, 70),
    ('Shopping', 'Online order', 15, 200),
    ('Entertainment', 'Movie Tickets', 15, 40),
    ('Utilities', 'Electricity bill', 60, 140),
    ('Healthcare', 'Pharmacy', 10, 60),
]


class Command(BaseCommand):
    help = '데모용 거래 데이터 생성 (최근 N개월)'

    def add_arguments(self, parser):
        parser.add_argument('--username', type=str, default='demo', help='사용자명')
        parser.add_argument('--months', type=int, default=6, help='생성할 개월 수 (이번 달 포함)')
        parser.add_argument('--clear', action='store_true', help='기존 거래를 지우고 새로 생성')
        parser.add_argument('--seed', type=int, default=None, help='난수 시드 (재현용)')

    @db_transaction.atomic
    def handle(self, *args, **options):
        username = options['username']
        months = max(options['months'], 1)
        rng = random.Random(options['seed'])

        self.stdout.write("=== 데모 데이터 생성 시작 ===")

        # 1. 사용자
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'email': f'{username}@example.com'}
        )
        if created:
            user.set_password('demo1234')
            user.save()
            self.stdout.write(f"👤 사용자 생성: {username} (비밀번호: demo1234)")

        if options['clear']:
            count, _ = Transaction.objects.filter(user=user).delete()
            self.stdout.write(f"🗑️ 기존 거래 삭제: {count}건")

        # 2. 카테고리 (시스템 카테고리 필요)
        categories = {c.name: c for c in Category.objects.filter(is_system=True)}
        salary = categories.get('Salary')
        freelance = categories.get('Freelance')
        housing = categories.get('Housing')
        if not salary or not housing:
            self.stdout.write(self.style.ERROR("❌ 시스템 카테고리가 없습니다. seed_categories 를 먼저 실행하세요."))
            return

        # 3. 거래 생성
        today = timezone.localdate()
        to_create = []
        for offset in range(months - 1, -1, -1):
            month_day = shift_months(today, -offset)
            first_day, last_day = month_bounds(month_day.year, month_day.month)
            if first_day > today:
                continue
            last_day = min(last_day, today)

            to_create.append(Transaction(
                user=user, category=salary, type='income',
                description='Monthly Salary', amount=Decimal('5000.00'),
                date=first_day, notes=f'{first_day:%B} salary',
            ))
            to_create.append(Transaction(
                user=user, category=housing, type='expense',
                description='Rent', amount=Decimal('1500.00'), date=first_day,
            ))
            if freelance and rng.random() < 0.5:
                to_create.append(Transaction(
                    user=user, category=freelance, type='income',
                    description='Freelance Project',
                    amount=Decimal(rng.randint(300, 1200)),
                    date=date(first_day.year, first_day.month, rng.randint(1, last_day.day)),
                ))

            for _ in range(rng.randint(12, 20)):
                name, description, low, high = rng.choice(EXPENSE_SAMPLES)
                category = categories.get(name)
                if category is None:
                    continue
                to_create.append(Transaction(
                    user=user, category=category, type='expense',
                    description=description,
                    amount=Decimal(rng.randint(low * 100, high * 100)) / 100,
                    date=date(first_day.year, first_day.month, rng.randint(1, last_day.day)),
                ))

        Transaction.objects.bulk_create(to_create)
        self.stdout.write(self.style.SUCCESS(f"🎉 완료! 총 {len(to_create)}건의 거래 저장"))
