"""
프로젝트 공통 pytest fixture

앱별 tests/ 에서 같이 사용하는 사용자/카테고리/거래 fixture
"""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth.models import User

from apps.transactions.models import Category, Transaction


@pytest.fixture
def test_user(db):
    """테스트용 사용자"""
    return User.objects.create_user(username='tester', password='pass')


@pytest.fixture
def other_user(db):
    """다른 사용자 (권한 테스트용)"""
    return User.objects.create_user(username='other', password='pass')


@pytest.fixture
def auth_client(client, test_user):
    """로그인된 클라이언트"""
    client.login(username='tester', password='pass')
    return client


@pytest.fixture
def income_category(db):
    """수입 카테고리 (시스템)"""
    return Category.objects.create(
        name='Test Income', type='income', color='#10B981', icon='💵', is_system=True
    )


@pytest.fixture
def expense_category(db):
    """지출 카테고리 (시스템)"""
    return Category.objects.create(
        name='Test Expense', type='expense', color='#EF4444', icon='🧾', is_system=True
    )


@pytest.fixture
def user_category(test_user):
    """test_user 가 만든 지출 카테고리"""
    return Category.objects.create(
        name='Coffee', type='expense', color='#F97316', icon='☕', user=test_user
    )


@pytest.fixture
def make_transaction(test_user, income_category, expense_category):
    """
    거래 생성 헬퍼

    사용 예:
        make_transaction('expense', '12.50', date(2024, 1, 5))
    """
    def _make(tx_type='expense', amount='100.00', tx_date=None, category=None,
              user=None, description='Test transaction', notes=''):
        if category is None:
            category = income_category if tx_type == 'income' else expense_category
        return Transaction.objects.create(
            user=user or test_user,
            category=category,
            type=tx_type,
            amount=Decimal(str(amount)),
            date=tx_date or date(2024, 1, 15),
            description=description,
            notes=notes,
        )
    return _make
