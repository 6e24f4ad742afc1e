"""
transactions 앱 admin.py 테스트
"""
import pytest
from django.contrib.admin.sites import AdminSite
from django.contrib.auth.models import User
from django.test import RequestFactory
from django.urls import reverse

from apps.transactions.admin import CategoryAdmin, TransactionAdmin
from apps.transactions.models import Category, Transaction


@pytest.fixture
def admin_user(db):
    """관리자 유저"""
    return User.objects.create_superuser(username='admin', email='admin@test.com', password='admin123')


@pytest.fixture
def admin_request(admin_user):
    """관리자 권한 요청 객체"""
    request = RequestFactory().get('/admin/')
    request.user = admin_user
    return request


@pytest.mark.django_db
class TestTransactionAdmin:
    def test_get_queryset_includes_inactive(self, admin_request, make_transaction):
        """삭제된 거래도 관리자에서 보임"""
        make_transaction()
        make_transaction().soft_delete()

        admin = TransactionAdmin(Transaction, AdminSite())

        assert admin.get_queryset(admin_request).count() == 2

    def test_colored_type_and_amount(self, make_transaction):
        admin = TransactionAdmin(Transaction, AdminSite())
        income = make_transaction('income', '1234.5')
        expense = make_transaction('expense', '10')

        assert 'color:green' in admin.get_type_display_colored(income)
        assert 'Expense' in admin.get_type_display_colored(expense)
        assert '+1,234.50' in admin.get_amount_display(income)
        assert '-10.00' in admin.get_amount_display(expense)

    def test_changelist_renders(self, client, admin_user, make_transaction):
        make_transaction()
        client.force_login(admin_user)

        response = client.get(reverse('admin:transactions_transaction_changelist'))

        assert response.status_code == 200


@pytest.mark.django_db
class TestCategoryAdmin:
    def test_transaction_count_annotation(self, admin_request, make_transaction, user_category):
        make_transaction(category=user_category)
        make_transaction(category=user_category).soft_delete()

        admin = CategoryAdmin(Category, AdminSite())
        category = admin.get_queryset(admin_request).get(pk=user_category.pk)

        assert admin.get_transaction_count(category) == 1

    def test_color_display(self, admin_request, user_category):
        admin = CategoryAdmin(Category, AdminSite())
        category = admin.get_queryset(admin_request).get(pk=user_category.pk)

        assert '#F97316' in admin.get_color_display(category)
