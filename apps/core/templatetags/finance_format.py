from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings

register = template.Library()

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'KRW': '₩',
}


def _to_decimal(value):
    try:
        return Decimal(str(value if value not in (None, '') else 0))
    except (InvalidOperation, ValueError):
        return None


@register.filter
def format_currency(value, currency=None):
    """
    금액 표시: 1234.5 → "$1,234.50", 음수는 "-$12.00"
    통화 코드는 settings.FINANCE_CURRENCY (기본 USD)
    """
    amount = _to_decimal(value)
    if amount is None:
        return value

    code = (currency or settings.FINANCE_CURRENCY).upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    sign = '-' if amount < 0 else ''
    formatted = f"{abs(amount):,.2f}"

    if symbol:
        return f"{sign}{symbol}{formatted}"
    return f"{sign}{formatted} {code}"


@register.filter
def format_percentage(value, digits=1):
    """비율 표시: 82.456 → "82.5%" """
    number = _to_decimal(value)
    if number is None:
        return value
    try:
        digits = int(digits)
    except (TypeError, ValueError):
        digits = 1
    return f"{number:.{digits}f}%"
