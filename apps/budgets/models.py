from decimal import Decimal

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Count, Q, Sum
from django.utils import timezone

from apps.core.models import SoftDeleteModel
from apps.dashboard.utils import budget_status, month_bounds, percentage_of
from apps.transactions.models import Category, Transaction, TYPE_EXPENSE

PERIOD_MONTHLY = 'monthly'
PERIOD_YEARLY = 'yearly'
PERIOD_CHOICES = [
    (PERIOD_MONTHLY, 'Monthly'),
    (PERIOD_YEARLY, 'Yearly'),
]


class BudgetQuerySet(models.QuerySet):
    """Budget 전용 QuerySet"""
    def for_user(self, user): return self.filter(user=user)
    def with_relations(self): return self.select_related('category')

    def overlapping(self, start_date, end_date):
        """[start_date, end_date] 기간과 겹치는 예산 (종료일 없음 = 계속 유효)"""
        return self.filter(start_date__lte=end_date).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=start_date)
        )

    def blocking(self, category, today):
        """새 예산 생성을 막는 기존 예산 (종료일 없음 또는 오늘 이후 종료)"""
        return self.filter(category=category).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=today)
        )


class BudgetManager(models.Manager):
    """활성 예산 Manager"""
    def get_queryset(self): return BudgetQuerySet(self.model, using=self._db).filter(is_active=True)
    def for_user(self, user): return self.get_queryset().for_user(user)


class Budget(SoftDeleteModel):
    """지출 카테고리별 예산 (월간/연간)"""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='budgets', db_index=True)
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name='budgets')
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'), message='Amount must be greater than 0')]
    )
    period = models.CharField(max_length=10, choices=PERIOD_CHOICES, default=PERIOD_MONTHLY)
    start_date = models.DateField(default=timezone.localdate)
    end_date = models.DateField(null=True, blank=True)

    objects = BudgetQuerySet.as_manager()
    active = BudgetManager()

    class Meta:
        db_table = 'budgets'
        ordering = ['-start_date', '-created_at']
        indexes = [
            models.Index(fields=['user', 'category'], name='budget_user_category_idx'),
            models.Index(fields=['is_active', '-start_date'], name='budget_active_start_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='budget_amount_positive'),
        ]

    def __str__(self):
        return f"{self.category.name} {self.get_period_display()} {self.amount:,.2f}"

    def clean(self):
        errors = {}
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            errors['end_date'] = 'End date must be after start date'
        if self.category_id:
            category = self.category
            if category.type != TYPE_EXPENSE:
                errors['category'] = 'Budgets can only be set for expense categories'
            elif not category.is_system and category.user_id != self.user_id:
                errors['category'] = 'Category not found'
        if errors: raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    # ------------------------------------------------------------
    # 지출 집계
    # ------------------------------------------------------------

    def spending_window(self, year, month):
        """
        사용량 계산 기간
            monthly: 선택한 달
            yearly : 선택한 달이 속한 연도 전체
        """
        if self.period == PERIOD_YEARLY:
            return month_bounds(year, 1)[0], month_bounds(year, 12)[1]
        return month_bounds(year, month)

    def spending_between(self, start_date, end_date):
        """기간 내 이 카테고리의 활성 지출 (합계, 건수)"""
        totals = Transaction.active.filter(
            user_id=self.user_id,
            category_id=self.category_id,
            type=TYPE_EXPENSE,
        ).by_date_range(start_date, end_date).aggregate(
            total=Sum('amount'),
            count=Count('id'),
        )
        return totals['total'] or Decimal('0'), totals['count'] or 0

    def utilization(self, start_date, end_date):
        """예산 대비 사용 현황"""
        spent, count = self.spending_between(start_date, end_date)
        return {
            'actual_spending': spent,
            'remaining': self.amount - spent,
            'percentage': percentage_of(spent, self.amount),
            'transaction_count': count,
            'status': budget_status(spent, self.amount),
        }

    def as_dict(self):
        category = self.category
        return {
            'id': self.pk,
            'category_id': self.category_id,
            'category_name': category.name,
            'category_color': category.color,
            'category_icon': category.icon,
            'amount': self.amount,
            'period': self.period,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'is_active': self.is_active,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
