from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.transactions.defaults import DEFAULT_CATEGORIES
from apps.transactions.models import Category, Transaction


# Category model tests
@pytest.mark.django_db
class TestCategoryModel:
    def test_category_str_method(self, expense_category):
        """카테고리 문자열 표현"""
        assert str(expense_category) == '[Expense] Test Expense'

    def test_system_categories_are_seeded(self):
        """마이그레이션으로 기본 카테고리가 설치됨"""
        seeded = Category.objects.filter(is_system=True, user__isnull=True)
        assert seeded.count() == len(DEFAULT_CATEGORIES)
        assert seeded.filter(name='Salary', type='income').exists()
        assert seeded.filter(name='Food & Dining', type='expense').exists()

    def test_system_category_cannot_have_user(self, test_user):
        """시스템 카테고리는 사용자를 가질 수 없음"""
        category = Category(name='Broken', type='income', is_system=True, user=test_user)

        with pytest.raises(ValidationError) as exc_info:
            category.full_clean()

        assert 'user' in exc_info.value.message_dict

    def test_custom_category_requires_user(self):
        """사용자 카테고리는 user 필수"""
        category = Category(name='Orphan', type='expense', is_system=False)

        with pytest.raises(ValidationError) as exc_info:
            category.full_clean()

        assert 'user' in exc_info.value.message_dict

    def test_invalid_color_rejected(self, test_user):
        """hex 색상 형식 검증"""
        category = Category(name='Bad color', type='expense', color='red', user=test_user)

        with pytest.raises(ValidationError) as exc_info:
            category.full_clean()

        assert 'color' in exc_info.value.message_dict

    def test_visible_to_includes_system_and_own(self, test_user, other_user, user_category):
        """visible_to: 시스템 + 내 카테고리만"""
        Category.objects.create(name='Theirs', type='expense', user=other_user)

        visible = Category.objects.visible_to(test_user)

        assert user_category in visible
        assert visible.filter(name='Salary').exists()
        assert not visible.filter(name='Theirs').exists()

    def test_is_editable_by(self, test_user, other_user, user_category, expense_category):
        assert user_category.is_editable_by(test_user)
        assert not user_category.is_editable_by(other_user)
        assert not expense_category.is_editable_by(test_user)

    def test_as_dict_with_count(self, user_category):
        data = user_category.as_dict(transaction_count=3)

        assert data['name'] == 'Coffee'
        assert data['is_system'] is False
        assert data['transaction_count'] == 3
        assert 'transaction_count' not in user_category.as_dict()


# Transaction model tests
@pytest.mark.django_db
class TestTransactionModel:
    def test_create_transaction(self, make_transaction):
        tx = make_transaction('expense', '42.10')

        assert tx.pk is not None
        assert tx.is_active
        assert str(tx) == 'Expense 42.10 (2024-01-15)'

    def test_amount_must_be_positive(self, test_user, expense_category):
        """금액 0 이하는 저장 불가"""
        with pytest.raises(ValidationError) as exc_info:
            Transaction.objects.create(
                user=test_user, category=expense_category, type='expense',
                amount=Decimal('0'), date=date(2024, 1, 1), description='Zero',
            )

        assert 'Amount must be greater than 0' in exc_info.value.message_dict['amount']

    def test_category_type_must_match(self, test_user, income_category):
        """카테고리 유형과 거래 유형 불일치"""
        with pytest.raises(ValidationError) as exc_info:
            Transaction.objects.create(
                user=test_user, category=income_category, type='expense',
                amount=Decimal('10'), date=date(2024, 1, 1), description='Mismatch',
            )

        assert exc_info.value.message_dict['category'] == [
            'Category type (income) does not match transaction type (expense)'
        ]

    def test_cannot_use_other_users_category(self, other_user, user_category):
        """다른 사용자의 카테고리는 사용 불가"""
        with pytest.raises(ValidationError):
            Transaction.objects.create(
                user=other_user, category=user_category, type='expense',
                amount=Decimal('10'), date=date(2024, 1, 1), description='Foreign',
            )

    def test_description_is_trimmed(self, make_transaction):
        tx = make_transaction(description='  Lunch  ')
        assert tx.description == 'Lunch'

    def test_soft_delete_and_restore(self, make_transaction, test_user):
        """소프트 삭제 후 active 에서 제외, 복구 가능"""
        tx = make_transaction()

        tx.soft_delete()
        assert not Transaction.active.for_user(test_user).exists()
        assert Transaction.objects.filter(pk=tx.pk).exists()

        tx.restore()
        assert Transaction.active.for_user(test_user).count() == 1

    def test_signed_amount(self, make_transaction):
        assert make_transaction('income', '100').signed_amount == Decimal('100')
        assert make_transaction('expense', '40').signed_amount == Decimal('-40')

    def test_category_set_null_on_delete(self, make_transaction, user_category):
        """카테고리 삭제 시 거래는 남고 category 만 NULL"""
        tx = make_transaction(category=user_category)
        tx.soft_delete()

        user_category.delete()
        tx.refresh_from_db()

        assert tx.category is None
        assert tx.as_dict()['category_name'] is None


@pytest.mark.django_db
class TestTransactionQuerySet:
    def test_income_expense_helpers(self, make_transaction, test_user):
        make_transaction('income', '500')
        make_transaction('expense', '20')
        make_transaction('expense', '30')

        assert Transaction.active.income().count() == 1
        assert Transaction.active.expense().count() == 2

    def test_by_date_range_inclusive(self, make_transaction):
        make_transaction(tx_date=date(2024, 1, 1))
        make_transaction(tx_date=date(2024, 1, 31))
        make_transaction(tx_date=date(2024, 2, 1))

        qs = Transaction.active.get_queryset()

        assert qs.by_date_range(date(2024, 1, 1), date(2024, 1, 31)).count() == 2
        assert qs.by_date_range(start_date=date(2024, 1, 15)).count() == 2
        assert qs.by_date_range(end_date=date(2024, 1, 1)).count() == 1
        assert qs.by_date_range().count() == 3

    def test_by_month_and_year(self, make_transaction):
        make_transaction(tx_date=date(2024, 3, 10))
        make_transaction(tx_date=date(2024, 4, 10))
        make_transaction(tx_date=date(2023, 3, 10))

        assert Transaction.active.by_month(2024, 3).count() == 1
        assert Transaction.active.get_queryset().by_year(2024).count() == 2

    def test_active_excludes_soft_deleted(self, make_transaction):
        make_transaction().soft_delete()
        make_transaction()

        assert Transaction.active.count() == 1
        assert Transaction.objects.count() == 2
