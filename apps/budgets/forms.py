from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.transactions.models import Category
from .models import Budget

PERIOD_ERROR = 'Period must be either monthly or yearly'
AMOUNT_ERROR = 'Amount must be greater than 0'


class BudgetForm(forms.ModelForm):
    """예산 생성/수정 폼 (API JSON 본문 검증용)"""

    class Meta:
        model = Budget
        fields = ['category', 'amount', 'period', 'start_date', 'end_date']
        widgets = {
            'start_date': forms.DateInput(attrs={'type': 'date'}),
            'end_date': forms.DateInput(attrs={'type': 'date'}),
            'amount': forms.NumberInput(attrs={'step': '0.01'}),
        }
        error_messages = {
            'period': {
                'invalid_choice': PERIOD_ERROR,
            },
            'start_date': {
                'invalid': 'Invalid date, expected YYYY-MM-DD',
            },
            'end_date': {
                'invalid': 'Invalid date, expected YYYY-MM-DD',
            },
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)

        if self.user:
            self.fields['category'].queryset = Category.objects.visible_to(self.user)
            if not self.instance.pk:
                self.instance.user = self.user

        self.fields['category'].error_messages['invalid_choice'] = 'Category not found'
        self.fields['start_date'].required = False
        self.fields['end_date'].required = False

        # 수정 시 카테고리는 바꾸지 않음
        if self.instance.pk:
            self.fields['category'].disabled = True

    def clean_amount(self):
        amount = self.cleaned_data.get('amount')
        if amount is not None and amount <= Decimal('0'):
            raise ValidationError(AMOUNT_ERROR)
        return amount

    def clean_start_date(self):
        return self.cleaned_data.get('start_date') or self.instance.start_date or timezone.localdate()

    def clean(self):
        cleaned_data = super().clean()
        category = cleaned_data.get('category')
        start_date = cleaned_data.get('start_date')
        end_date = cleaned_data.get('end_date')

        if category and category.type != 'expense':
            self.add_error('category', 'Budgets can only be set for expense categories')
            return cleaned_data

        if start_date and end_date and end_date <= start_date:
            self.add_error('end_date', 'End date must be after start date')

        # 카테고리당 진행 중인 예산은 하나 (생성, 또는 삭제된 예산 복구 시)
        reactivating = (
            self.instance.pk
            and not self.instance.is_active
            and cleaned_data.get('is_active')
        )
        if category and (not self.instance.pk or reactivating):
            existing = Budget.active.for_user(self.instance.user).blocking(category, timezone.localdate())
            if self.instance.pk:
                existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise ValidationError('A budget already exists for this category', code='duplicate')

        return cleaned_data


class BudgetUpdateForm(BudgetForm):
    """예산 수정 폼 (is_active 포함)"""

    class Meta(BudgetForm.Meta):
        fields = ['category', 'amount', 'period', 'start_date', 'end_date', 'is_active']
