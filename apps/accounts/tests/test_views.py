import json

import pytest
from django.contrib.auth.models import User
from django.urls import reverse

STRONG_PASSWORD = 'Budget-Keeper-2024'


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


@pytest.mark.django_db
class TestSignupApi:

    def test_signup_creates_user_and_logs_in(self, client):
        """가입 성공 시 201 + 바로 로그인 상태"""
        response = post_json(client, reverse('accounts:api_signup'), {
            'username': 'newuser',
            'email': 'New@Example.com',
            'password': STRONG_PASSWORD,
        })

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        assert body['data']['username'] == 'newuser'
        assert body['data']['email'] == 'new@example.com'
        assert User.objects.filter(username='newuser').exists()

        me = client.get(reverse('accounts:api_me'))
        assert me.status_code == 200
        assert me.json()['data']['username'] == 'newuser'

    def test_signup_missing_fields(self, client):
        response = post_json(client, reverse('accounts:api_signup'), {'username': 'newuser'})
        assert response.status_code == 400
        assert response.json()['error'] == 'Username, email and password are required'

    def test_signup_duplicate_username(self, client, test_user):
        """이미 있는 아이디는 400"""
        response = post_json(client, reverse('accounts:api_signup'), {
            'username': 'Tester',
            'email': 'another@example.com',
            'password': STRONG_PASSWORD,
        })
        assert response.status_code == 400
        assert response.json()['error'] == 'Username is already taken'

    def test_signup_duplicate_email(self, client):
        User.objects.create_user(username='someone', email='taken@example.com', password='x')
        response = post_json(client, reverse('accounts:api_signup'), {
            'username': 'newuser',
            'email': 'taken@example.com',
            'password': STRONG_PASSWORD,
        })
        assert response.status_code == 400
        assert response.json()['error'] == 'Email is already registered'

    def test_signup_weak_password(self, client):
        """비밀번호 검증기 (숫자만) 통과 못하면 400"""
        response = post_json(client, reverse('accounts:api_signup'), {
            'username': 'newuser',
            'email': 'new@example.com',
            'password': '12345678',
        })
        assert response.status_code == 400
        assert response.json()['success'] is False
        assert not User.objects.filter(username='newuser').exists()

    def test_signup_short_username(self, client):
        response = post_json(client, reverse('accounts:api_signup'), {
            'username': 'abc',
            'email': 'abc@example.com',
            'password': STRONG_PASSWORD,
        })
        assert response.status_code == 400
        assert response.json()['error'] == 'Username must be at least 4 characters'


@pytest.mark.django_db
class TestLoginApi:

    def test_login_success(self, client, test_user):
        response = post_json(client, reverse('accounts:api_login'), {
            'username': 'tester',
            'password': 'pass',
        })
        assert response.status_code == 200
        assert response.json()['data']['id'] == test_user.pk
        assert client.get(reverse('accounts:api_me')).status_code == 200

    def test_login_wrong_password(self, client, test_user):
        response = post_json(client, reverse('accounts:api_login'), {
            'username': 'tester',
            'password': 'wrong',
        })
        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid username or password'

    def test_login_missing_fields(self, client):
        response = post_json(client, reverse('accounts:api_login'), {'username': 'tester'})
        assert response.status_code == 400
        assert response.json()['error'] == 'Username and password are required'

    def test_login_get_not_allowed(self, client):
        response = client.get(reverse('accounts:api_login'))
        assert response.status_code == 405

    def test_logout(self, auth_client):
        response = auth_client.post(reverse('accounts:api_logout'))
        assert response.status_code == 200
        assert response.json()['message'] == 'Logged out successfully'
        assert auth_client.get(reverse('accounts:api_me')).status_code == 401

    def test_me_requires_login(self, client):
        response = client.get(reverse('accounts:api_me'))
        assert response.status_code == 401
        assert response.json() == {'success': False, 'error': 'Authentication required'}


@pytest.mark.django_db
class TestAccountPages:

    def test_login_page_renders(self, client):
        response = client.get(reverse('accounts:login'))
        assert response.status_code == 200
        assert 'accounts/login.html' in [t.name for t in response.templates]

    def test_login_page_redirects_authenticated_user(self, auth_client):
        response = auth_client.get(reverse('accounts:login'))
        assert response.status_code == 302
        assert response.url == reverse('dashboard:index')

    def test_login_form_post(self, client, test_user):
        response = client.post(reverse('accounts:login'), {'username': 'tester', 'password': 'pass'})
        assert response.status_code == 302
        assert response.url == reverse('dashboard:index')

    def test_logout_page_redirects_to_login(self, auth_client):
        response = auth_client.post(reverse('accounts:logout'))
        assert response.status_code == 302
        assert response.url == reverse('accounts:login')

    def test_signup_page_renders(self, client):
        response = client.get(reverse('accounts:signup'))
        assert response.status_code == 200
        assert 'form' in response.context

    def test_signup_page_creates_user(self, client):
        """폼 가입 후 대시보드로 이동"""
        response = client.post(reverse('accounts:signup'), {
            'username': 'pageuser',
            'email': 'page@example.com',
            'password1': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD,
        })
        assert response.status_code == 302
        assert response.url == reverse('dashboard:index')
        assert User.objects.filter(username='pageuser').exists()

    def test_signup_page_password_mismatch(self, client):
        response = client.post(reverse('accounts:signup'), {
            'username': 'pageuser',
            'email': 'page@example.com',
            'password1': STRONG_PASSWORD,
            'password2': STRONG_PASSWORD + 'x',
        })
        assert response.status_code == 200
        assert response.context['form'].errors
        assert not User.objects.filter(username='pageuser').exists()

    def test_authenticated_user_cannot_signup_again(self, auth_client):
        """이미 로그인한 사용자는 대시보드로"""
        response = auth_client.get(reverse('accounts:signup'))
        assert response.status_code == 302
        assert response.url == reverse('dashboard:index')
