import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.utils import timezone

from apps.core.api import (
    MAX_YEAR,
    MIN_YEAR,
    ApiError,
    api_view,
    coerce_date_string,
    form_error_message,
    get_or_404,
    json_error,
    json_success,
    missing_fields,
    parse_body,
    parse_int,
    parse_month,
)
from apps.dashboard.utils import month_bounds, shift_months
from apps.transactions.models import Category
from apps.transactions.utils import to_decimal
from .forms import AMOUNT_ERROR, PERIOD_ERROR, BudgetForm, BudgetUpdateForm
from .models import Budget, PERIOD_CHOICES

logger = logging.getLogger(__name__)

VALID_PERIODS = {value for value, _ in PERIOD_CHOICES}
TRUE_VALUES = ('true', '1', 'yes')


# ============================================================
# Helper 함수
# ============================================================

def _selected_month(value):
    """?month=YYYY-MM, 없으면 이번 달"""
    selected = parse_month(value)
    if selected:
        return selected
    today = timezone.localdate()
    return today.year, today.month


def _validate_budget_payload(payload):
    """period / amount 검증 후 Decimal 금액 반환"""
    period = payload.get('period')
    if not isinstance(period, str) or period not in VALID_PERIODS:
        raise ApiError(PERIOD_ERROR)
    amount = to_decimal(payload.get('amount'))
    if amount is None or amount <= 0:
        raise ApiError(AMOUNT_ERROR)
    return amount


def _neighbor_month(month_start, offset):
    """이전/다음 달 YYYY-MM, 표현 가능한 연도 범위를 벗어나면 None"""
    month_index = month_start.year * 12 + (month_start.month - 1) + offset
    if not MIN_YEAR <= month_index // 12 <= MAX_YEAR:
        return None
    target = shift_months(month_start, offset)
    return f'{target.year:04d}-{target.month:02d}'


def _budgets_with_spending(budgets, year, month):
    rows = []
    for budget in budgets:
        row = budget.as_dict()
        row.update(budget.utilization(*budget.spending_window(year, month)))
        rows.append(row)
    return rows


# ============================================================
# Budget API
# ============================================================

@api_view(['GET', 'POST'])
def budget_list(request):
    """선택한 달에 유효한 예산 목록 (include_spending=true 면 사용 현황 포함) / 예산 생성"""
    if request.method == 'POST':
        return _budget_create(request)

    year, month = _selected_month(request.GET.get('month'))
    month_start, month_end = month_bounds(year, month)

    budgets = (
        Budget.active.for_user(request.user)
        .with_relations()
        .overlapping(month_start, month_end)
        .order_by('category__name', '-start_date')
    )

    if (request.GET.get('include_spending') or '').lower() in TRUE_VALUES:
        data = _budgets_with_spending(budgets, year, month)
    else:
        data = [budget.as_dict() for budget in budgets]

    return json_success(data, month=f'{year:04d}-{month:02d}')


def _budget_create(request):
    payload = parse_body(request)
    if missing_fields(payload, ['category_id', 'amount', 'period']):
        return json_error('Category, amount, and period are required')

    amount = _validate_budget_payload(payload)

    category_id = parse_int(payload.get('category_id'), 'category_id')
    category = get_or_404(Category.objects.visible_to(request.user), 'Category not found', pk=category_id)

    form = BudgetForm({
        'category': category.pk,
        'amount': amount,
        'period': payload.get('period'),
        'start_date': coerce_date_string(payload.get('start_date')),
        'end_date': coerce_date_string(payload.get('end_date')),
    }, user=request.user)
    if not form.is_valid():
        return json_error(form_error_message(form))

    budget = form.save()
    logger.info(
        f"예산 등록: {category.name} {budget.period} {budget.amount} "
        f"(ID: {budget.pk}, user={request.user.pk})"
    )
    return json_success(budget.as_dict(), status=201, message='Budget created successfully')


@api_view(['GET', 'PUT', 'DELETE'])
def budget_detail(request, pk):
    """예산 조회 / 수정 / 삭제 (소프트 삭제, PUT 으로 복구 가능)"""
    budget = get_or_404(
        Budget.objects.for_user(request.user).with_relations(),
        'Budget not found',
        pk=pk,
    )

    if request.method == 'GET':
        return json_success(budget.as_dict())

    if request.method == 'PUT':
        payload = parse_body(request)
        if missing_fields(payload, ['amount', 'period']):
            return json_error('Amount and period are required')

        amount = _validate_budget_payload(payload)

        # 보내지 않은 날짜는 기존 값 유지, end_date 는 null 로 해제 가능
        end_date = budget.end_date
        if 'end_date' in payload:
            end_date = coerce_date_string(payload.get('end_date'))

        form = BudgetUpdateForm({
            'amount': amount,
            'period': payload.get('period'),
            'start_date': coerce_date_string(payload.get('start_date')) or budget.start_date,
            'end_date': end_date,
            'is_active': payload.get('is_active', True),
        }, instance=budget, user=request.user)
        if not form.is_valid():
            return json_error(form_error_message(form))

        budget = form.save()
        logger.info(f"예산 수정: ID {budget.pk}")
        return json_success(budget.as_dict(), message='Budget updated successfully')

    budget.soft_delete()
    logger.info(f"예산 삭제: ID {pk}")
    return json_success(message='Budget deleted successfully')


# ============================================================
# 페이지 (템플릿)
# ============================================================

@login_required
def budget_page(request):
    """예산 관리 페이지 (월 선택 + 사용 현황)"""
    try:
        year, month = _selected_month(request.GET.get('month'))
    except ApiError as e:
        messages.error(request, e.message)
        today = timezone.localdate()
        year, month = today.year, today.month

    month_start, month_end = month_bounds(year, month)
    budgets = (
        Budget.active.for_user(request.user)
        .with_relations()
        .overlapping(month_start, month_end)
        .order_by('category__name', '-start_date')
    )
    rows = _budgets_with_spending(budgets, year, month)

    total_budget = sum((row['amount'] for row in rows), 0)
    total_spent = sum((row['actual_spending'] for row in rows), 0)

    context = {
        'budgets': rows,
        'month_start': month_start,
        'selected_month': f'{year:04d}-{month:02d}',
        'prev_month': _neighbor_month(month_start, -1),
        'next_month': _neighbor_month(month_start, 1),
        'expense_categories': Category.objects.visible_to(request.user).expense().order_by('name'),
        'period_choices': PERIOD_CHOICES,
        'totals': {
            'budget': total_budget,
            'spent': total_spent,
            'remaining': total_budget - total_spent,
            'over_count': sum(1 for row in rows if row['status'] == 'over'),
        },
        'today': timezone.localdate(),
    }
    return render(request, 'budgets/budget_list.html', context)
