from django import forms
from django.core.exceptions import ValidationError
from django.db.models import Q
from decimal import Decimal

from .models import Transaction, Category, DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON

TYPE_ERROR = 'Type must be either income or expense'


class TransactionForm(forms.ModelForm):
    """거래 입력/수정 폼 (API JSON 본문 검증용)"""

    class Meta:
        model = Transaction
        fields = ['description', 'amount', 'type', 'category', 'date', 'notes']
        widgets = {
            'date': forms.DateInput(attrs={'type': 'date'}),
            'notes': forms.Textarea(attrs={'rows': 3}),
            'amount': forms.NumberInput(attrs={'step': '0.01'}),
        }
        error_messages = {
            'description': {
                'max_length': 'Description cannot exceed 200 characters',
            },
            'type': {
                'invalid_choice': TYPE_ERROR,
            },
            'notes': {
                'max_length': 'Notes cannot exceed 500 characters',
            },
            'date': {
                'invalid': 'Invalid date, expected YYYY-MM-DD',
            },
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)

        # 카테고리 필터링: 시스템 카테고리 + 사용자가 만든 카테고리
        if self.user:
            self.fields['category'].queryset = Category.objects.visible_to(self.user)
            if not self.instance.pk:
                self.instance.user = self.user

        self.fields['category'].required = True
        self.fields['category'].error_messages['invalid_choice'] = 'Category not found'
        self.fields['notes'].required = False

    def clean_amount(self):
        amount = self.cleaned_data.get('amount')
        if amount is not None and amount <= Decimal('0'):
            raise ValidationError('Amount must be greater than 0')
        return amount

    def clean(self):
        """카테고리 유형과 거래 유형 일치 검증"""
        cleaned_data = super().clean()
        category = cleaned_data.get('category')
        tx_type = cleaned_data.get('type')

        if category and tx_type and category.type != tx_type:
            self.add_error(
                'category',
                f"Category type ({category.type}) does not match transaction type ({tx_type})"
            )
        return cleaned_data


class CategoryForm(forms.ModelForm):
    """사용자 카테고리 생성/수정 폼"""

    class Meta:
        model = Category
        fields = ['name', 'type', 'color', 'icon']
        error_messages = {
            'name': {
                'required': 'Name and type are required',
                'max_length': 'Category name cannot exceed 50 characters',
            },
            'type': {
                'required': 'Name and type are required',
                'invalid_choice': TYPE_ERROR,
            },
            'icon': {
                'max_length': 'Icon cannot exceed 10 characters',
            },
        }

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop('user', None)
        super().__init__(*args, **kwargs)
        self.fields['color'].required = False
        self.fields['icon'].required = False

        if self.user and not self.instance.pk:
            self.instance.user = self.user
            self.instance.is_system = False

    def clean_name(self):
        """같은 이름 체크 (시스템 카테고리 + 내 카테고리)"""
        name = (self.cleaned_data.get('name') or '').strip()
        if not name:
            raise ValidationError('Name and type are required')

        owner = self.user or self.instance.user
        duplicates = Category.objects.filter(name__iexact=name).filter(
            Q(is_system=True) | Q(user=owner)
        )
        if self.instance.pk:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise ValidationError('Category with this name already exists', code='duplicate')
        return name

    def clean_type(self):
        """
        사용 중인 카테고리는 유형 변경 불가
        (거래/예산의 유형 검증이 깨져 이후 수정/삭제가 막힘, 삭제된 행 포함)
        """
        category_type = self.cleaned_data.get('type')
        if self.instance.pk and category_type and category_type != self.instance.type:
            transaction_count = self.instance.transactions.count()
            budget_count = self.instance.budgets.count()
            if transaction_count or budget_count:
                raise ValidationError(
                    f'Cannot change category type. It is being used by '
                    f'{transaction_count} transaction(s) and {budget_count} budget(s).',
                    code='in_use',
                )
        return category_type

    def clean_color(self):
        return self.cleaned_data.get('color') or DEFAULT_CATEGORY_COLOR

    def clean_icon(self):
        return self.cleaned_data.get('icon') or DEFAULT_CATEGORY_ICON

    @property
    def is_duplicate(self):
        return self.has_error('name', code='duplicate')
