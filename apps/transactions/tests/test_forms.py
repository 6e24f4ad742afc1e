from decimal import Decimal

import pytest

from apps.transactions.forms import CategoryForm, TransactionForm
from apps.transactions.models import Category


def _tx_data(category, **overrides):
    data = {
        'description': 'Groceries',
        'amount': '52.30',
        'type': category.type,
        'category': category.pk,
        'date': '2024-01-16',
        'notes': '',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestTransactionForm:
    def test_valid_form_sets_user(self, test_user, expense_category):
        """폼 저장 시 요청 사용자가 소유자가 됨"""
        form = TransactionForm(data=_tx_data(expense_category), user=test_user)

        assert form.is_valid(), form.errors
        tx = form.save()
        assert tx.user == test_user
        assert tx.amount == Decimal('52.30')

    def test_amount_must_be_positive(self, test_user, expense_category):
        form = TransactionForm(data=_tx_data(expense_category, amount='0'), user=test_user)

        assert not form.is_valid()
        assert form.errors['amount'] == ['Amount must be greater than 0']

    def test_invalid_type(self, test_user, expense_category):
        form = TransactionForm(data=_tx_data(expense_category, type='transfer'), user=test_user)

        assert not form.is_valid()
        assert form.errors['type'] == ['Type must be either income or expense']

    def test_category_type_mismatch(self, test_user, income_category):
        form = TransactionForm(data=_tx_data(income_category, type='expense'), user=test_user)

        assert not form.is_valid()
        assert form.errors['category'] == [
            'Category type (income) does not match transaction type (expense)'
        ]

    def test_other_users_category_not_found(self, other_user, user_category):
        """다른 사용자의 카테고리는 선택지에 없음"""
        form = TransactionForm(data=_tx_data(user_category), user=other_user)

        assert not form.is_valid()
        assert form.errors['category'] == ['Category not found']

    def test_category_required(self, test_user, expense_category):
        data = _tx_data(expense_category)
        data['category'] = ''
        form = TransactionForm(data=data, user=test_user)

        assert not form.is_valid()
        assert 'category' in form.errors

    def test_notes_max_length(self, test_user, expense_category):
        form = TransactionForm(data=_tx_data(expense_category, notes='x' * 501), user=test_user)

        assert not form.is_valid()
        assert form.errors['notes'] == ['Notes cannot exceed 500 characters']


@pytest.mark.django_db
class TestCategoryForm:
    def test_create_defaults_color_and_icon(self, test_user):
        """색상/아이콘 미입력 시 기본값"""
        form = CategoryForm(data={'name': ' Pets ', 'type': 'expense'}, user=test_user)

        assert form.is_valid(), form.errors
        category = form.save()
        assert category.name == 'Pets'
        assert category.color == '#3B82F6'
        assert category.icon == '💰'
        assert category.user == test_user
        assert category.is_system is False

    def test_duplicate_of_system_category(self, test_user):
        """시스템 카테고리와 같은 이름 (대소문자 무시)"""
        form = CategoryForm(data={'name': 'salary', 'type': 'income'}, user=test_user)

        assert not form.is_valid()
        assert form.is_duplicate
        assert form.errors['name'] == ['Category with this name already exists']

    def test_duplicate_of_own_category(self, test_user, user_category):
        form = CategoryForm(data={'name': 'Coffee', 'type': 'expense'}, user=test_user)

        assert not form.is_valid()
        assert form.is_duplicate

    def test_same_name_allowed_for_other_user(self, other_user, user_category):
        """다른 사용자의 카테고리 이름은 중복 아님"""
        form = CategoryForm(data={'name': 'Coffee', 'type': 'expense'}, user=other_user)

        assert form.is_valid(), form.errors

    def test_update_keeps_own_name(self, test_user, user_category):
        """자기 자신과는 중복 체크하지 않음"""
        form = CategoryForm(
            data={'name': 'Coffee', 'type': 'expense', 'color': '#000000'},
            instance=user_category,
            user=test_user,
        )

        assert form.is_valid(), form.errors
        assert form.save().color == '#000000'

    def test_invalid_type(self, test_user):
        form = CategoryForm(data={'name': 'Gifts', 'type': 'other'}, user=test_user)

        assert not form.is_valid()
        assert not form.is_duplicate
        assert form.errors['type'] == ['Type must be either income or expense']

    def test_invalid_color(self, test_user):
        form = CategoryForm(data={'name': 'Gifts', 'type': 'expense', 'color': 'blue'}, user=test_user)

        assert not form.is_valid()
        assert form.errors['color'] == ['Color must be a valid hex color code']

    def test_name_required(self, test_user):
        form = CategoryForm(data={'name': '', 'type': 'expense'}, user=test_user)

        assert not form.is_valid()
        assert form.errors['name'] == ['Name and type are required']
        assert not Category.objects.filter(user=test_user).exists()

    def test_type_locked_while_in_use(self, test_user, user_category, make_transaction):
        make_transaction(category=user_category)
        form = CategoryForm(data={'name': 'Coffee', 'type': 'income'}, instance=user_category, user=test_user)

        assert not form.is_valid()
        assert not form.is_duplicate
        assert form.has_error('type', code='in_use')
