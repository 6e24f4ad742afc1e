"""
Chart.js 용 데이터셋 생성

모든 함수는 {"labels", "datasets", "raw_data"} 형태의 dict 를 반환합니다.
queryset 은 이미 사용자/기간 필터가 적용된 Transaction QuerySet 입니다.
"""
import calendar

from django.db.models import Count, Q, Sum
from django.db.models.functions import ExtractMonth, ExtractWeekDay

from apps.transactions.models import DEFAULT_CATEGORY_COLOR
from .utils import ZERO, category_breakdown

INCOME_RGB = '16, 185, 129'
EXPENSE_RGB = '239, 68, 68'
NET_RGB = '59, 130, 246'

GROUP_BY_FORMATS = {
    'day': '%Y-%m-%d',
    'week': '%Y-%W',
    'month': '%Y-%m',
    'year': '%Y',
}
DEFAULT_GROUP_BY = 'month'

MONTH_NAMES = list(calendar.month_name)[1:]
# ExtractWeekDay: 1=일요일 ... 7=토요일
WEEKDAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


def _dataset(label, data, rgb, alpha='0.8', border_width=1, **extra):
    dataset = {
        'label': label,
        'data': data,
        'backgroundColor': f'rgba({rgb}, {alpha})',
        'borderColor': f'rgba({rgb}, 1)',
        'borderWidth': border_width,
    }
    dataset.update(extra)
    return dataset


def _income_expense_sums():
    return {
        'income': Sum('amount', filter=Q(type='income')),
        'expenses': Sum('amount', filter=Q(type='expense')),
    }


def spending_by_category_chart(queryset, limit=10):
    """지출 카테고리별 도넛/파이 차트"""
    rows = category_breakdown(queryset, limit=limit)
    for row in rows:
        row['category_name'] = row['category_name'] or 'Uncategorized'
        row['category_color'] = row['category_color'] or DEFAULT_CATEGORY_COLOR

    colors = [row['category_color'] for row in rows]
    return {
        'labels': [row['category_name'] for row in rows],
        'datasets': [{
            'data': [row['total_amount'] for row in rows],
            'backgroundColor': colors,
            'borderColor': colors,
            'borderWidth': 1,
        }],
        'raw_data': rows,
    }


def income_vs_expenses_chart(queryset, group_by=DEFAULT_GROUP_BY):
    """
    기간별 수입/지출 라인 차트

    group_by: day(YYYY-MM-DD), week(YYYY-WW), month(YYYY-MM), year(YYYY)
    알 수 없는 값은 month 로 처리합니다.
    """
    label_format = GROUP_BY_FORMATS.get(group_by, GROUP_BY_FORMATS[DEFAULT_GROUP_BY])

    daily = (
        queryset
        .values('date')
        .annotate(**_income_expense_sums())
        .order_by('date')
    )

    # 날짜별 합계를 라벨 단위로 다시 합산 (날짜 오름차순이므로 라벨도 오름차순)
    buckets = {}
    for row in daily:
        label = row['date'].strftime(label_format)
        bucket = buckets.setdefault(label, {'period': label, 'income': ZERO, 'expenses': ZERO})
        bucket['income'] += row['income'] or ZERO
        bucket['expenses'] += row['expenses'] or ZERO

    rows = list(buckets.values())
    return {
        'labels': [row['period'] for row in rows],
        'datasets': [
            _dataset('Income', [row['income'] for row in rows], INCOME_RGB,
                     alpha='0.2', border_width=2, fill=False),
            _dataset('Expenses', [row['expenses'] for row in rows], EXPENSE_RGB,
                     alpha='0.2', border_width=2, fill=False),
        ],
        'raw_data': rows,
    }


def monthly_trend_chart(queryset, year):
    """연도별 월간 수입/지출 막대 + 순이익 라인"""
    monthly = (
        queryset.filter(date__year=year)
        .annotate(month=ExtractMonth('date'))
        .values('month')
        .annotate(**_income_expense_sums())
        .order_by('month')
    )

    rows = []
    for item in monthly:
        income = item['income'] or ZERO
        expenses = item['expenses'] or ZERO
        rows.append({
            'month': f"{item['month']:02d}",
            'income': income,
            'expenses': expenses,
            'net_income': income - expenses,
        })

    return {
        'labels': [MONTH_NAMES[int(row['month']) - 1] for row in rows],
        'datasets': [
            _dataset('Income', [row['income'] for row in rows], INCOME_RGB),
            _dataset('Expenses', [row['expenses'] for row in rows], EXPENSE_RGB),
            _dataset('Net Income', [row['net_income'] for row in rows], NET_RGB,
                     border_width=2, type='line', fill=False),
        ],
        'raw_data': rows,
    }


def daily_pattern_chart(queryset):
    """요일별 수입/지출 패턴"""
    weekly = (
        queryset
        .annotate(day_of_week=ExtractWeekDay('date'))
        .values('day_of_week')
        .annotate(
            **_income_expense_sums(),
            income_count=Count('id', filter=Q(type='income')),
            expense_count=Count('id', filter=Q(type='expense')),
        )
        .order_by('day_of_week')
    )

    rows = [
        {
            # 0=일요일 ... 6=토요일
            'day_of_week': item['day_of_week'] - 1,
            'income': item['income'] or ZERO,
            'expenses': item['expenses'] or ZERO,
            'income_count': item['income_count'],
            'expense_count': item['expense_count'],
        }
        for item in weekly
    ]

    return {
        'labels': [WEEKDAY_NAMES[row['day_of_week']] for row in rows],
        'datasets': [
            _dataset('Income', [row['income'] for row in rows], INCOME_RGB),
            _dataset('Expenses', [row['expenses'] for row in rows], EXPENSE_RGB),
        ],
        'raw_data': rows,
    }
