import logging

from django.contrib import messages
from django.contrib.auth import login as auth_login, logout as auth_logout
from django.contrib.auth.forms import AuthenticationForm
from django.contrib.auth.views import LoginView as DjangoLoginView, LogoutView as DjangoLogoutView
from django.shortcuts import redirect, render
from django.urls import reverse_lazy

from apps.core.api import api_view, form_error_message, json_error, json_success, missing_fields, parse_body
from .forms import SignupForm

logger = logging.getLogger(__name__)


def _user_dict(user):
    return {
        'id': user.pk,
        'username': user.username,
        'email': user.email,
        'date_joined': user.date_joined,
    }


def _signup_form_data(payload):
    """API 본문은 password 하나만 보내도 되도록 password1/password2 로 펼침"""
    password = payload.get('password')
    return {
        'username': payload.get('username'),
        'email': payload.get('email'),
        'password1': payload.get('password1') or password,
        'password2': payload.get('password2') or password,
    }


# ============================================================
# 페이지 (템플릿)
# ============================================================

class UserLoginView(DjangoLoginView):
    """사용자 로그인"""
    template_name = 'accounts/login.html'
    redirect_authenticated_user = True
    next_page = reverse_lazy('dashboard:index')


class UserLogoutView(DjangoLogoutView):
    """사용자 로그아웃 (POST 전용)"""
    next_page = reverse_lazy('accounts:login')


def signup(request):
    """
    회원가입
    - 가입 즉시 로그인 처리
    """
    if request.user.is_authenticated:
        return redirect('dashboard:index')

    if request.method == 'POST':
        form = SignupForm(request.POST)
        if form.is_valid():
            user = form.save()
            auth_login(request, user)
            logger.info(f"신규 회원가입: {user.username} (ID: {user.pk})")
            messages.success(request, f"Welcome, {user.username}!")
            return redirect('dashboard:index')
        messages.error(request, 'Please check the highlighted fields.')
    else:
        form = SignupForm()

    return render(request, 'accounts/signup.html', {'form': form})


# ============================================================
# JSON API
# ============================================================

@api_view(['POST'], login_required=False)
def api_signup(request):
    payload = parse_body(request)
    if missing_fields(payload, ['username', 'email']) or not (payload.get('password') or payload.get('password1')):
        return json_error('Username, email and password are required')

    form = SignupForm(_signup_form_data(payload))
    if not form.is_valid():
        return json_error(form_error_message(form))

    user = form.save()
    auth_login(request, user)
    logger.info(f"신규 회원가입 (API): {user.username} (ID: {user.pk})")
    return json_success(_user_dict(user), status=201, message='Account created successfully')


@api_view(['POST'], login_required=False)
def api_login(request):
    payload = parse_body(request)
    if missing_fields(payload, ['username', 'password']):
        return json_error('Username and password are required')

    form = AuthenticationForm(request, data={
        'username': payload.get('username'),
        'password': payload.get('password'),
    })
    if not form.is_valid():
        logger.info(f"로그인 실패: {payload.get('username')}")
        return json_error('Invalid username or password')

    user = form.get_user()
    auth_login(request, user)
    logger.info(f"로그인: {user.username} (ID: {user.pk})")
    return json_success(_user_dict(user), message='Logged in successfully')


@api_view(['POST'], login_required=False)
def api_logout(request):
    if request.user.is_authenticated:
        logger.info(f"로그아웃: {request.user.username} (ID: {request.user.pk})")
    auth_logout(request)
    return json_success(message='Logged out successfully')


@api_view(['GET'])
def api_me(request):
    return json_success(_user_dict(request.user))
