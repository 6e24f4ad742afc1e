import re

from django import forms
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError

USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9_]+$')


class SignupForm(UserCreationForm):
    """
    회원가입 폼
    - 이메일 필드 추가 (필수)
    - 아이디/이메일 중복 검증
    - 비밀번호 강도는 AUTH_PASSWORD_VALIDATORS 가 검증
    """
    email = forms.EmailField(
        required=True,
        error_messages={
            'required': 'Email is required',
            'invalid': 'Enter a valid email address',
        },
        widget=forms.EmailInput(attrs={
            'placeholder': 'you@example.com',
            'autocomplete': 'email',
        }),
    )

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('username', 'email')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            existing_classes = field.widget.attrs.get('class', '')
            field.widget.attrs['class'] = f'{existing_classes} form-input'.strip()

    def clean_username(self):
        """아이디 검증 (4-30자, 영문/숫자/밑줄)"""
        username = (self.cleaned_data.get('username') or '').strip()

        if len(username) < 4:
            raise ValidationError('Username must be at least 4 characters')
        if len(username) > 30:
            raise ValidationError('Username cannot exceed 30 characters')
        if not USERNAME_PATTERN.match(username):
            raise ValidationError('Username may only contain letters, numbers and underscores')

        if User.objects.filter(username__iexact=username).exists():
            raise ValidationError('Username is already taken')

        return username

    def clean_email(self):
        """이메일 중복 확인"""
        email = (self.cleaned_data.get('email') or '').strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError('Email is already registered')
        return email

    def save(self, commit=True):
        user = super().save(commit=False)
        user.email = self.cleaned_data['email']
        if commit:
            user.save()
        return user
