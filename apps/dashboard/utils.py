"""
대시보드/요약/차트 공용 집계 헬퍼

뷰에서 반복되는 기간 계산과 합계 집계를 모아둔 모듈입니다.
금액은 모두 Decimal 로 유지하고, JSON 변환은 응답 단계에서 처리합니다.
"""
import calendar
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db.models import Avg, Count, Max, Min, Q, Sum

ZERO = Decimal('0')
TWO_PLACES = Decimal('0.01')

PERIOD_MONTHS = {
    'month': 1,
    'quarter': 3,
    'year': 12,
}
DEFAULT_PERIOD = 'month'


def percentage_of(part, whole):
    """part 가 whole 의 몇 % 인지 (소수점 2자리), whole 이 0 이면 0"""
    part = Decimal(part or 0)
    whole = Decimal(whole or 0)
    if whole == 0:
        return ZERO
    return (part / whole * 100).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_money(value):
    return Decimal(value or 0).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def budget_status(spent, amount):
    """
    예산 상태
        over    : 지출 > 예산
        warning : 사용률 > 경고 기준 (기본 80%)
        good    : 그 외
    """
    spent = Decimal(spent or 0)
    amount = Decimal(amount or 0)
    if spent > amount:
        return 'over'
    if percentage_of(spent, amount) > settings.FINANCE_BUDGET_WARNING_PERCENT:
        return 'warning'
    return 'good'


def month_bounds(year, month):
    """해당 월의 (1일, 말일)"""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_months(day, months):
    """day 에서 months 개월 이동 (말일 보정: 3/31 - 1개월 → 2/28 또는 2/29)"""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def normalize_period(period):
    return period if period in PERIOD_MONTHS else DEFAULT_PERIOD


def period_start(period, today):
    """
    대시보드 기간의 시작일 (오늘 기준 1/3/12 개월 전)

    알 수 없는 period 는 month 로 처리합니다.
    """
    return shift_months(today, -PERIOD_MONTHS[normalize_period(period)])


def days_between(start, end):
    """평균 일일 지출 계산용 일수 (최소 1일)"""
    return max((end - start).days, 1)


def summarize_totals(queryset):
    """수입/지출 합계와 건수, 순이익"""
    totals = queryset.aggregate(
        total_income=Sum('amount', filter=Q(type='income')),
        total_expenses=Sum('amount', filter=Q(type='expense')),
        income_count=Count('id', filter=Q(type='income')),
        expense_count=Count('id', filter=Q(type='expense')),
    )
    total_income = totals['total_income'] or ZERO
    total_expenses = totals['total_expenses'] or ZERO
    return {
        'total_income': total_income,
        'total_expenses': total_expenses,
        'net_income': total_income - total_expenses,
        'income_count': totals['income_count'] or 0,
        'expense_count': totals['expense_count'] or 0,
    }


def category_breakdown(queryset, limit=None):
    """
    지출 카테고리별 합계 (금액 내림차순)

    카테고리가 지워진 거래는 category_id=None 한 줄로 모입니다.
    percentage 는 전체 지출 대비 비율입니다.
    """
    expenses = queryset.filter(type='expense')
    total = expenses.aggregate(total=Sum('amount'))['total'] or ZERO

    rows = (
        expenses
        .values('category_id', 'category__name', 'category__color', 'category__icon')
        .annotate(total_amount=Sum('amount'), transaction_count=Count('id'))
        .order_by('-total_amount', 'category__name')
    )
    if limit:
        rows = rows[:limit]

    return [
        {
            'category_id': row['category_id'],
            'category_name': row['category__name'],
            'category_color': row['category__color'],
            'category_icon': row['category__icon'],
            'total_amount': row['total_amount'],
            'transaction_count': row['transaction_count'],
            'percentage': percentage_of(row['total_amount'], total),
        }
        for row in rows
    ]


def spending_insights(queryset):
    """지출 카테고리별 합계/건수/평균/최대/최소"""
    rows = (
        queryset.filter(type='expense')
        .values('category_id', 'category__name', 'category__color', 'category__icon')
        .annotate(
            total_spent=Sum('amount'),
            transaction_count=Count('id'),
            average_amount=Avg('amount'),
            max_amount=Max('amount'),
            min_amount=Min('amount'),
        )
        .order_by('-total_spent', 'category__name')
    )
    return [
        {
            'category_id': row['category_id'],
            'category_name': row['category__name'],
            'category_color': row['category__color'],
            'category_icon': row['category__icon'],
            'total_spent': row['total_spent'],
            'transaction_count': row['transaction_count'],
            'average_amount': round_money(row['average_amount']),
            'max_amount': row['max_amount'],
            'min_amount': row['min_amount'],
        }
        for row in rows
    ]
