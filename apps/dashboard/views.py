import calendar
import logging

from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q, Sum
from django.db.models.functions import ExtractMonth, ExtractYear
from django.http import JsonResponse
from django.shortcuts import render
from django.utils import timezone
from django.utils.html import json_script

from apps.budgets.models import Budget
from apps.core.api import ApiError, FinanceJSONEncoder, api_view, json_success, parse_date, parse_int, parse_year
from apps.transactions.models import Transaction
from .charts import (
    DEFAULT_GROUP_BY,
    daily_pattern_chart,
    income_vs_expenses_chart,
    monthly_trend_chart,
    spending_by_category_chart,
)
from .utils import (
    ZERO,
    category_breakdown,
    days_between,
    month_bounds,
    normalize_period,
    percentage_of,
    period_start,
    round_money,
    shift_months,
    spending_insights,
    summarize_totals,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 10
TOP_CATEGORY_LIMIT = 5
TREND_MONTHS = 6
PERIOD_CHOICES = [
    ('month', 'Last month'),
    ('quarter', 'Last 3 months'),
    ('year', 'Last year'),
]


# ============================================================
# Helper 함수
# ============================================================

def _user_transactions(user):
    return Transaction.active.for_user(user).with_relations()


def _date_filtered(request):
    """start_date / end_date 쿼리스트링이 적용된 내 거래"""
    start_date = parse_date(request.GET.get('start_date'), 'start_date')
    end_date = parse_date(request.GET.get('end_date'), 'end_date')
    return _user_transactions(request.user).by_date_range(start_date, end_date)


def _required_year(request, message):
    year = parse_year(request.GET.get('year'))
    if year is None:
        raise ApiError(message)
    return year


def _recent(queryset):
    return [tx.as_dict() for tx in queryset.order_by('-date', '-created_at')[:RECENT_LIMIT]]


def _grouped_sums():
    """values().annotate() 용 수입/지출 합계와 건수"""
    return {
        'income': Sum('amount', filter=Q(type='income')),
        'expenses': Sum('amount', filter=Q(type='expense')),
        'income_count': Count('id', filter=Q(type='income')),
        'expense_count': Count('id', filter=Q(type='expense')),
    }


def _dashboard_data(user, period, today):
    """대시보드 요약 (기간: 오늘 기준 1/3/12 개월)"""
    period = normalize_period(period)
    start_date = period_start(period, today)
    logger.debug(f"대시보드 집계: user={user.pk}, period={period}, {start_date} ~ {today}")
    transactions = _user_transactions(user).by_date_range(start_date, today)

    summary = summarize_totals(transactions)
    summary['total_transactions'] = summary['income_count'] + summary['expense_count']

    breakdown = category_breakdown(transactions)
    return {
        'summary': summary,
        'category_breakdown': breakdown,
        'top_categories': breakdown[:TOP_CATEGORY_LIMIT],
        # 최근 거래는 기간과 무관하게 최신 10건
        'recent_transactions': _recent(_user_transactions(user)),
        'period': period,
        'start_date': start_date,
        'end_date': today,
    }


def _trend_data(user, today):
    """이번 달 포함 최근 6개월 지출 추이"""
    first_month = shift_months(today.replace(day=1), -(TREND_MONTHS - 1))
    _, last_day = month_bounds(today.year, today.month)

    monthly = (
        _user_transactions(user).expense()
        .by_date_range(first_month, last_day)
        .annotate(year=ExtractYear('date'), month=ExtractMonth('date'))
        .values('year', 'month')
        .annotate(total=Sum('amount'))
    )
    totals = {(row['year'], row['month']): row['total'] for row in monthly}

    trend = []
    for offset in range(TREND_MONTHS):
        month_start = shift_months(first_month, offset)
        trend.append({
            'month': f"{calendar.month_abbr[month_start.month]} {month_start.year}",
            'total': totals.get((month_start.year, month_start.month)) or ZERO,
        })
    return trend


def _insights_data(user, period, today):
    """지출 분석 + 예산 비교 + 6개월 추이"""
    period = normalize_period(period)
    start_date = period_start(period, today)
    logger.debug(f"인사이트 집계: user={user.pk}, period={period}, {start_date} ~ {today}")
    transactions = _user_transactions(user).by_date_range(start_date, today)

    insights = spending_insights(transactions)

    budgets = (
        Budget.active.for_user(user)
        .with_relations()
        .overlapping(start_date, today)
        .order_by('category__name')
    )
    budget_comparison = []
    for budget in budgets:
        usage = budget.utilization(start_date, today)
        budget_comparison.append({
            'budget_id': budget.pk,
            'category_id': budget.category_id,
            'category_name': budget.category.name,
            'category_icon': budget.category.icon,
            'category_color': budget.category.color,
            'budget_amount': budget.amount,
            'actual_spending': usage['actual_spending'],
            'remaining': usage['remaining'],
            'percentage': usage['percentage'],
            'status': usage['status'],
        })

    total_spending = sum((row['total_spent'] for row in insights), ZERO)
    total_transactions = sum(row['transaction_count'] for row in insights)
    total_income = transactions.income().aggregate(total=Sum('amount'))['total'] or ZERO

    average_transaction = round_money(total_spending / total_transactions) if total_transactions else ZERO
    savings_rate = percentage_of(total_income - total_spending, total_income)

    top_category = insights[0] if insights else None
    over_budget_count = sum(1 for row in budget_comparison if row['status'] == 'over')

    if budget_comparison:
        budget_utilization = round_money(
            sum((row['percentage'] for row in budget_comparison), ZERO) / len(budget_comparison)
        )
    else:
        budget_utilization = ZERO

    if top_category:
        top_spending_category = top_category['category_name'] or 'Uncategorized'
    else:
        top_spending_category = 'None'

    return {
        'period': period,
        'start_date': start_date,
        'end_date': today,
        'summary': {
            'total_spending': total_spending,
            'total_transactions': total_transactions,
            'average_transaction': average_transaction,
            'total_income': total_income,
            'savings_rate': savings_rate,
        },
        'spending_insights': insights,
        'budget_comparison': budget_comparison,
        'trend_data': _trend_data(user, today),
        'top_category': top_category,
        'over_budget_categories': over_budget_count,
        'insights': {
            'top_spending_category': top_spending_category,
            'average_daily_spending': round_money(total_spending / days_between(start_date, today)),
            'budget_utilization': budget_utilization,
            'over_budget_count': over_budget_count,
        },
    }


# ============================================================
# Summary API
# ============================================================

@api_view(['GET'])
def summary(request):
    """기간 합계 + 상위 지출 카테고리 5개 + 최근 거래 10건"""
    transactions = _date_filtered(request)
    return json_success({
        'summary': summarize_totals(transactions),
        'top_categories': category_breakdown(transactions, limit=TOP_CATEGORY_LIMIT),
        'recent_transactions': _recent(transactions),
    })


@api_view(['GET'])
def monthly_summary(request):
    """월간 요약 (일별 수입/지출)"""
    year = parse_year(request.GET.get('year'))
    month = parse_int(request.GET.get('month'), 'month')
    if year is None or month is None:
        raise ApiError('Year and month are required')
    if not 1 <= month <= 12:
        raise ApiError('Month must be between 1 and 12')

    transactions = _user_transactions(request.user).by_month(year, month)
    totals = summarize_totals(transactions)

    daily = (
        transactions
        .values('date')
        .annotate(**_grouped_sums())
        .order_by('date')
    )
    daily_data = [
        {
            'day': row['date'],
            'daily_income': row['income'] or ZERO,
            'daily_expenses': row['expenses'] or ZERO,
            'income_count': row['income_count'],
            'expense_count': row['expense_count'],
        }
        for row in daily
    ]

    return json_success({
        'year': year,
        'month': month,
        'total_income': totals['total_income'],
        'total_expenses': totals['total_expenses'],
        'net_income': totals['net_income'],
        'daily_data': daily_data,
    })


@api_view(['GET'])
def yearly_summary(request):
    """연간 요약 (월별 수입/지출)"""
    year = _required_year(request, 'Year is required')

    transactions = _user_transactions(request.user).filter(date__year=year)
    totals = summarize_totals(transactions)

    monthly = (
        transactions
        .annotate(month=ExtractMonth('date'))
        .values('month')
        .annotate(**_grouped_sums())
        .order_by('month')
    )
    monthly_data = [
        {
            'month': f"{row['month']:02d}",
            'total_income': row['income'] or ZERO,
            'total_expenses': row['expenses'] or ZERO,
            'income_count': row['income_count'],
            'expense_count': row['expense_count'],
        }
        for row in monthly
    ]

    return json_success({
        'year': year,
        'total_income': totals['total_income'],
        'total_expenses': totals['total_expenses'],
        'net_income': totals['net_income'],
        'monthly_data': monthly_data,
    })


# ============================================================
# Charts API
# ============================================================

@api_view(['GET'])
def spending_by_category(request):
    limit = parse_int(request.GET.get('limit'), 'limit', default=10, minimum=1, maximum=50)
    return json_success(spending_by_category_chart(_date_filtered(request), limit=limit))


@api_view(['GET'])
def income_vs_expenses(request):
    group_by = request.GET.get('group_by') or DEFAULT_GROUP_BY
    return json_success(income_vs_expenses_chart(_date_filtered(request), group_by=group_by))


@api_view(['GET'])
def monthly_trend(request):
    year = _required_year(request, 'Year is required')
    return json_success(monthly_trend_chart(_user_transactions(request.user), year))


@api_view(['GET'])
def daily_pattern(request):
    return json_success(daily_pattern_chart(_date_filtered(request)))


# ============================================================
# Dashboard / Insights API
# ============================================================

@api_view(['GET'])
def dashboard_api(request):
    """?period=month|quarter|year (기본 month)"""
    data = _dashboard_data(request.user, request.GET.get('period'), timezone.localdate())
    return json_success(data)


@api_view(['GET'])
def insights_api(request):
    data = _insights_data(request.user, request.GET.get('period'), timezone.localdate())
    return json_success(data)


def health(request):
    """헬스 체크 (로그인 불필요)"""
    return JsonResponse({'status': 'OK', 'timestamp': timezone.now().isoformat()})


# ============================================================
# 페이지 (템플릿)
# ============================================================

@login_required
def dashboard_page(request):
    """메인 대시보드 (요약 카드 + 차트)"""
    today = timezone.localdate()
    data = _dashboard_data(request.user, request.GET.get('period'), today)
    transactions = _user_transactions(request.user)
    window = transactions.by_date_range(data['start_date'], today)

    context = {
        **data,
        'period_choices': PERIOD_CHOICES,
        'charts': {
            'spending_by_category': spending_by_category_chart(window),
            'income_vs_expenses': income_vs_expenses_chart(
                transactions.by_date_range(shift_months(today.replace(day=1), -(TREND_MONTHS - 1)), today)
            ),
            'monthly_trend': monthly_trend_chart(transactions, today.year),
        },
        'year': today.year,
    }
    context['charts_script'] = json_script(context['charts'], 'chart-data', encoder=FinanceJSONEncoder)
    return render(request, 'dashboard/index.html', context)


@login_required
def insights_page(request):
    """지출 분석 페이지"""
    data = _insights_data(request.user, request.GET.get('period'), timezone.localdate())
    context = {
        **data,
        'period_choices': PERIOD_CHOICES,
        'charts': {
            'trend': {
                'labels': [row['month'] for row in data['trend_data']],
                'datasets': [{
                    'label': 'Spending',
                    'data': [row['total'] for row in data['trend_data']],
                    'backgroundColor': 'rgba(239, 68, 68, 0.8)',
                }],
            },
            'daily_pattern': daily_pattern_chart(
                _user_transactions(request.user).by_date_range(data['start_date'], data['end_date'])
            ),
        },
    }
    context['charts_script'] = json_script(context['charts'], 'chart-data', encoder=FinanceJSONEncoder)
    return render(request, 'dashboard/insights.html', context)
