from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse

from apps.budgets.models import Budget


@pytest.mark.django_db
class TestSecurity:

    # --- 1. 인증 테스트 (Authentication) ---

    @pytest.mark.parametrize('url_name', [
        'dashboard:index',
        'dashboard:insights',
        'transactions:transaction_page',
        'transactions:category_page',
        'budgets:budget_page',
    ])
    def test_unauthenticated_user_redirected_from_pages(self, client, url_name):
        """로그인 안 한 사용자가 페이지 접근 시 로그인 페이지로 이동"""
        response = client.get(reverse(url_name))
        assert response.status_code == 302
        assert response.url.startswith(reverse('accounts:login'))

    @pytest.mark.parametrize('url_name', [
        'transactions:transaction_list',
        'transactions:category_list',
        'transactions:transaction_export',
        'budgets:budget_list',
        'dashboard:summary',
        'dashboard:dashboard_api',
        'dashboard:insights_api',
        'dashboard:chart_daily_pattern',
    ])
    def test_unauthenticated_api_returns_401(self, client, url_name):
        """API 는 리다이렉트 대신 401 JSON"""
        response = client.get(reverse(url_name))
        assert response.status_code == 401
        assert response.json()['success'] is False

    def test_health_is_public(self, client):
        response = client.get(reverse('dashboard:health'))
        assert response.status_code == 200
        assert response.json()['status'] == 'OK'

    # --- 2. 인가/권한 테스트 (Authorization) ---

    def test_user_cannot_access_others_transaction(self, client, other_user, make_transaction):
        """A 사용자가 B 사용자의 거래를 조회/수정/삭제할 수 없음"""
        tx = make_transaction('expense', '50.00')
        client.login(username='other', password='pass')

        url = reverse('transactions:transaction_detail', kwargs={'pk': tx.pk})
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404

        tx.refresh_from_db()
        assert tx.is_active is True

    def test_user_cannot_access_others_category(self, client, other_user, user_category):
        client.login(username='other', password='pass')
        url = reverse('transactions:category_detail', kwargs={'pk': user_category.pk})
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404

    def test_user_cannot_access_others_budget(self, client, test_user, other_user, expense_category):
        budget = Budget.objects.create(
            user=test_user, category=expense_category, amount=Decimal('300.00'),
            period='monthly', start_date=date(2024, 1, 1),
        )
        client.login(username='other', password='pass')

        url = reverse('budgets:budget_detail', kwargs={'pk': budget.pk})
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404

    def test_summary_only_counts_own_transactions(self, client, other_user, make_transaction):
        """다른 사용자의 거래는 합계에 포함되지 않음"""
        make_transaction('income', '1000.00')
        make_transaction('expense', '40.00', user=other_user)
        client.login(username='other', password='pass')

        response = client.get(reverse('dashboard:summary'))
        data = response.json()['data']
        assert data['summary']['total_income'] == 0
        assert data['summary']['total_expenses'] == 40.0

    # --- 3. 회원가입/로그인 보안 ---

    def test_logout_requires_post(self, auth_client):
        """GET 으로는 로그아웃 되지 않음 (CSRF 보호)"""
        response = auth_client.get(reverse('accounts:logout'))
        assert response.status_code == 405
