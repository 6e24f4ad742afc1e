import logging
import math
from decimal import Decimal

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.db.models import Count, Q, Sum
from django.http import HttpResponse
from django.shortcuts import render
from django.utils import timezone

from apps.core.api import (
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
)
from .forms import CategoryForm, TransactionForm
from .models import Category, Transaction
from .utils import export_transactions_to_excel, filter_transactions, parse_type, to_decimal

logger = logging.getLogger(__name__)

TRANSACTION_REQUIRED_FIELDS = ['description', 'amount', 'type', 'category_id', 'date']


# ============================================================
# Helper 함수
# ============================================================

def _categories_with_counts(user):
    """사용자에게 보이는 카테고리 + 내 활성 거래 건수"""
    return Category.objects.visible_to(user).annotate(
        tx_count=Count(
            'transactions',
            filter=Q(transactions__user=user, transactions__is_active=True)
        )
    )


def _category_form_data(payload):
    return {
        'name': payload.get('name'),
        'type': payload.get('type'),
        'color': payload.get('color') or '',
        'icon': payload.get('icon') or '',
    }


def _transaction_form_data(payload):
    """API 본문(category_id, 숫자 amount)을 폼 필드 형태로 변환"""
    raw_amount = payload.get('amount')
    amount = to_decimal(raw_amount)
    return {
        'description': payload.get('description'),
        'amount': amount if amount is not None else raw_amount,
        'type': payload.get('type'),
        'category': payload.get('category_id'),
        'date': coerce_date_string(payload.get('date')),
        'notes': payload.get('notes') or '',
    }


def _validate_transaction_payload(payload):
    missing = missing_fields(payload, TRANSACTION_REQUIRED_FIELDS)
    if missing:
        raise ApiError(f"Missing required fields: {', '.join(TRANSACTION_REQUIRED_FIELDS)}")
    parse_type(payload.get('type'))


# ============================================================
# Category
# ============================================================

@api_view(['GET', 'POST'])
def category_list(request):
    """카테고리 목록 (시스템 + 사용자) / 사용자 카테고리 생성"""
    if request.method == 'POST':
        return _category_create(request)

    categories = _categories_with_counts(request.user)

    category_type = parse_type(request.GET.get('type'))
    if category_type:
        categories = categories.filter(type=category_type)

    categories = categories.order_by('type', 'name')
    data = [c.as_dict(transaction_count=c.tx_count) for c in categories]
    return json_success(data)


def _category_create(request):
    payload = parse_body(request)
    if missing_fields(payload, ['name', 'type']):
        return json_error('Name and type are required')

    form = CategoryForm(_category_form_data(payload), user=request.user)
    if not form.is_valid():
        status = 409 if form.is_duplicate else 400
        return json_error(form_error_message(form), status=status)

    category = form.save()
    logger.info(f"카테고리 생성: {category.name} (ID: {category.pk}, user={request.user.pk})")
    return json_success(category.as_dict(transaction_count=0), status=201)


@api_view(['GET', 'PUT', 'DELETE'])
def category_detail(request, pk):
    """카테고리 조회 / 수정 / 삭제"""
    category = get_or_404(_categories_with_counts(request.user), 'Category not found', pk=pk)

    if request.method == 'GET':
        return json_success(category.as_dict(transaction_count=category.tx_count))

    # 권한 체크
    if category.is_system:
        action = 'modified' if request.method == 'PUT' else 'deleted'
        return json_error(f'System categories cannot be {action}', status=403)

    if request.method == 'PUT':
        payload = parse_body(request)
        if missing_fields(payload, ['name', 'type']):
            return json_error('Name and type are required')

        form = CategoryForm(_category_form_data(payload), instance=category, user=request.user)
        if not form.is_valid():
            status = 409 if form.is_duplicate else 400
            return json_error(form_error_message(form), status=status)

        category = form.save()
        logger.info(f"카테고리 수정: {category.name} (ID: {category.pk})")
        return json_success(category.as_dict(transaction_count=category.tx_count))

    # 사용 중인지 체크
    transaction_count = category.tx_count
    if transaction_count > 0:
        logger.info(f"카테고리 삭제 거부: {category.name} (거래 {transaction_count}건)")
        return json_error(
            f'Cannot delete category. It is being used by {transaction_count} transaction(s).'
        )

    category_name = category.name
    category.delete()
    logger.info(f"카테고리 삭제: {category_name} (ID: {pk})")
    return json_success(message='Category deleted successfully')


# ============================================================
# Transaction CRUD
# ============================================================

@api_view(['GET', 'POST'])
def transaction_list(request):
    """거래 목록 (필터 + limit/offset 페이지네이션) / 거래 생성"""
    if request.method == 'POST':
        return _transaction_create(request)

    transactions = filter_transactions(
        Transaction.active.for_user(request.user).with_relations(),
        request.GET,
    )

    limit = parse_int(
        request.GET.get('limit'), 'limit',
        default=settings.FINANCE_DEFAULT_PAGE_SIZE,
        minimum=1,
        maximum=settings.FINANCE_MAX_PAGE_SIZE,
    )
    offset = parse_int(request.GET.get('offset'), 'offset', default=0, minimum=0)

    total = transactions.count()
    page = transactions.order_by('-date', '-created_at')[offset:offset + limit]

    return json_success(
        [tx.as_dict() for tx in page],
        total=total,
        limit=limit,
        offset=offset,
        total_pages=math.ceil(total / limit),
    )


def _transaction_create(request):
    payload = parse_body(request)
    _validate_transaction_payload(payload)

    form = TransactionForm(_transaction_form_data(payload), user=request.user)
    if not form.is_valid():
        return json_error(form_error_message(form))

    transaction = form.save()
    logger.info(
        f"거래 등록: {transaction.type} {transaction.amount} "
        f"(ID: {transaction.pk}, user={request.user.pk})"
    )
    return json_success(
        transaction.as_dict(),
        status=201,
        message='Transaction created successfully',
    )


@api_view(['GET', 'PUT', 'DELETE'])
def transaction_detail(request, pk):
    """거래 조회 / 수정 / 삭제 (소프트 삭제)"""
    transaction = get_or_404(
        Transaction.active.for_user(request.user).with_relations(),
        'Transaction not found',
        pk=pk,
    )

    if request.method == 'GET':
        return json_success(transaction.as_dict())

    if request.method == 'PUT':
        payload = parse_body(request)
        _validate_transaction_payload(payload)

        form = TransactionForm(_transaction_form_data(payload), instance=transaction, user=request.user)
        if not form.is_valid():
            return json_error(form_error_message(form))

        transaction = form.save()
        logger.info(f"거래 수정: ID {transaction.pk}")
        return json_success(transaction.as_dict(), message='Transaction updated successfully')

    transaction.soft_delete()
    logger.info(f"거래 삭제: ID {pk}")
    return json_success(message='Transaction deleted successfully')


@api_view(['GET'])
def transaction_export(request):
    """필터링된 거래 내역 엑셀 다운로드"""
    queryset = filter_transactions(
        Transaction.active.for_user(request.user).with_relations(),
        request.GET,
    ).order_by('-date', '-created_at')

    excel_file = export_transactions_to_excel(queryset)
    timestamp = timezone.localtime().strftime('%Y%m%d_%H%M%S')

    # HTTP 응답 설정
    filename = f"transactions_{request.user.username}_{timestamp}.xlsx"
    response = HttpResponse(
        excel_file.read(),
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# ============================================================
# 페이지 (템플릿)
# ============================================================

@login_required
def transaction_page(request):
    """거래 목록 페이지 (필터 + 페이지네이션 + 합계)"""
    base_qs = Transaction.active.for_user(request.user).with_relations()
    try:
        transactions = filter_transactions(base_qs, request.GET)
    except ApiError as e:
        messages.error(request, e.message)
        transactions = base_qs

    stats = transactions.aggregate(
        total_income=Sum('amount', filter=Q(type='income')),
        total_expense=Sum('amount', filter=Q(type='expense')),
        count=Count('id'),
    )
    stats['total_income'] = stats['total_income'] or Decimal('0')
    stats['total_expense'] = stats['total_expense'] or Decimal('0')
    stats['net'] = stats['total_income'] - stats['total_expense']

    paginator = Paginator(transactions.order_by('-date', '-created_at'), 20)
    page_obj = paginator.get_page(request.GET.get('page'))

    query_params = request.GET.copy()
    query_params.pop('page', None)

    context = {
        'page_obj': page_obj,
        'stats': stats,
        'categories': Category.objects.visible_to(request.user).order_by('type', 'name'),
        'querystring': query_params.urlencode(),
        'filters': {
            'type': request.GET.get('type', ''),
            'category_id': request.GET.get('category_id', ''),
            'start_date': request.GET.get('start_date', ''),
            'end_date': request.GET.get('end_date', ''),
            'search': request.GET.get('search', ''),
        },
        'today': timezone.localdate(),
    }
    return render(request, 'transactions/transaction_list.html', context)


@login_required
def category_page(request):
    """카테고리 관리 페이지"""
    categories = _categories_with_counts(request.user).order_by('type', 'name')
    income_categories = [c for c in categories if c.type == 'income']
    expense_categories = [c for c in categories if c.type == 'expense']
    return render(request, 'transactions/category_list.html', {
        'income_categories': income_categories,
        'expense_categories': expense_categories,
        'category_groups': [
            ('Income', income_categories),
            ('Expense', expense_categories),
        ],
    })
