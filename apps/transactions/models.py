from decimal import Decimal
import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.db.models import Q

from apps.core.models import TimeStampedModel, SoftDeleteModel

logger = logging.getLogger(__name__)

# 상수
DEFAULT_CATEGORY_COLOR = '#3B82F6'
DEFAULT_CATEGORY_ICON = '💰'

TYPE_INCOME = 'income'
TYPE_EXPENSE = 'expense'
TYPE_CHOICES = [
    (TYPE_INCOME, 'Income'),
    (TYPE_EXPENSE, 'Expense'),
]

HEX_COLOR_VALIDATOR = RegexValidator(
    regex=r'^#[0-9A-Fa-f]{6}$',
    message='Color must be a valid hex color code'
)


class CategoryQuerySet(models.QuerySet):
    """Category 전용 QuerySet"""
    def visible_to(self, user): return self.filter(Q(is_system=True) | Q(user=user))
    def income(self): return self.filter(type=TYPE_INCOME)
    def expense(self): return self.filter(type=TYPE_EXPENSE)


class Category(TimeStampedModel):
    """거래 카테고리 (시스템 공용 + 사용자 정의)"""

    name = models.CharField(max_length=50)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, db_index=True)
    color = models.CharField(max_length=7, default=DEFAULT_CATEGORY_COLOR, validators=[HEX_COLOR_VALIDATOR])
    icon = models.CharField(max_length=10, default=DEFAULT_CATEGORY_ICON)
    user = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='custom_categories')
    order = models.IntegerField(default=0, db_index=True)
    is_system = models.BooleanField(default=False, db_index=True)

    objects = CategoryQuerySet.as_manager()

    class Meta:
        db_table = 'categories'
        ordering = ['type', 'order', 'name']
        verbose_name_plural = 'categories'
        indexes = [
            models.Index(fields=['type', 'order'], name='cat_type_order_idx'),
            models.Index(fields=['user', 'type'], name='cat_user_type_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'name'],
                condition=models.Q(user__isnull=False),
                name='unique_user_category_name'
            ),
            models.UniqueConstraint(
                fields=['name'],
                condition=models.Q(is_system=True),
                name='unique_system_category_name'
            )
        ]

    def __str__(self):
        return f"[{self.get_type_display()}] {self.name}"

    def clean(self):
        """시스템/사용자 카테고리 구분 검증"""
        if self.name:
            self.name = self.name.strip()
        if self.is_system and self.user_id:
            raise ValidationError({'user': 'System categories cannot belong to a user'})
        if not self.is_system and not self.user_id:
            raise ValidationError({'user': 'Custom categories must belong to a user'})

    def is_editable_by(self, user):
        """사용자가 수정/삭제 가능한 카테고리인지"""
        return not self.is_system and self.user_id == user.pk

    def as_dict(self, transaction_count=None):
        data = {
            'id': self.pk,
            'name': self.name,
            'type': self.type,
            'color': self.color,
            'icon': self.icon,
            'is_system': self.is_system,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
        if transaction_count is not None:
            data['transaction_count'] = transaction_count
        return data


class TransactionQuerySet(models.QuerySet):
    """Transaction 전용 QuerySet (헬퍼 메서드)"""
    def income(self): return self.filter(type=TYPE_INCOME)
    def expense(self): return self.filter(type=TYPE_EXPENSE)
    def for_user(self, user): return self.filter(user=user)
    def by_month(self, year, month): return self.filter(date__year=year, date__month=month)
    def by_year(self, year): return self.filter(date__year=year)
    def with_relations(self): return self.select_related('category')

    def by_date_range(self, start_date=None, end_date=None):
        """시작/종료일 중 주어진 것만 적용 (양 끝 포함)"""
        qs = self
        if start_date:
            qs = qs.filter(date__gte=start_date)
        if end_date:
            qs = qs.filter(date__lte=end_date)
        return qs


class TransactionManager(models.Manager):
    """Transaction Manager (active + QuerySet 결합)"""
    def get_queryset(self): return TransactionQuerySet(self.model, using=self._db).filter(is_active=True)
    def income(self): return self.get_queryset().income()
    def expense(self): return self.get_queryset().expense()
    def for_user(self, user): return self.get_queryset().for_user(user)
    def by_month(self, year, month): return self.get_queryset().by_month(year, month)
    def with_relations(self): return self.get_queryset().with_relations()


class Transaction(SoftDeleteModel):
    """거래 내역 (수입/지출, 핵심 모델)"""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='transactions', db_index=True)
    # 삭제된(soft) 거래만 남은 카테고리는 지울 수 있으므로 SET_NULL
    category = models.ForeignKey(Category, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')

    description = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'), message='Amount must be greater than 0')]
    )
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    date = models.DateField(db_index=True)
    notes = models.TextField(blank=True, max_length=500)

    objects = models.Manager()
    active = TransactionManager()

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['user', '-date'], name='tx_user_date_idx'),
            models.Index(fields=['user', 'type', '-date'], name='tx_user_type_date_idx'),
            models.Index(fields=['category', '-date'], name='tx_category_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gt=0), name='transaction_amount_positive'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.amount:,.2f} ({self.date})"

    def clean(self):
        errors = {}
        if self.description:
            self.description = self.description.strip()
        if self.category_id:
            category = self.category
            if category.type != self.type:
                errors['category'] = (
                    f"Category type ({category.type}) does not match transaction type ({self.type})"
                )
            elif not category.is_system and category.user_id != self.user_id:
                errors['category'] = 'Category not found'
        if errors: raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    @property
    def signed_amount(self):
        """수입은 +, 지출은 - 로 표시한 금액"""
        return self.amount if self.type == TYPE_INCOME else -self.amount

    def as_dict(self):
        category = self.category
        return {
            'id': self.pk,
            'description': self.description,
            'amount': self.amount,
            'type': self.type,
            'category_id': self.category_id,
            'category_name': category.name if category else None,
            'category_color': category.color if category else None,
            'category_icon': category.icon if category else None,
            'date': self.date,
            'notes': self.notes,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
