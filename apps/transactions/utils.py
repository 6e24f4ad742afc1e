import openpyxl
from io import BytesIO
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db.models import Q

from apps.core.api import ApiError, parse_date, parse_int
from .models import TYPE_CHOICES

VALID_TYPES = {value for value, _ in TYPE_CHOICES}


def to_decimal(value):
    """
    값을 Decimal로 변환하고 소수점 2자리로 통일
    금융 데이터는 정확성이 중요하므로 quantize 필수
    """
    if value is None or value == '' or str(value).strip() == '':
        return None
    if isinstance(value, bool):
        return None

    try:
        # 문자열로 변환 후 Decimal (부동소수점 오차 방지)
        decimal_value = Decimal(str(value))

        # 소수점 2자리로 통일 (DB와 동일, 반올림)
        return decimal_value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return None


def parse_type(value):
    """type 파라미터 검증 (income/expense), 비어있으면 None"""
    if value in (None, ''):
        return None
    # JSON 본문은 리스트/객체가 올 수 있음
    if not isinstance(value, str) or value not in VALID_TYPES:
        raise ApiError('Type must be either income or expense')
    return value


def filter_transactions(queryset, params):
    """
    쿼리스트링 필터 적용 (목록/내보내기/페이지 공용)

    지원 파라미터:
        type, category_id, start_date, end_date, search
    """
    tx_type = parse_type(params.get('type'))
    if tx_type:
        queryset = queryset.filter(type=tx_type)

    category_id = parse_int(params.get('category_id'), 'category_id')
    if category_id is not None:
        queryset = queryset.filter(category_id=category_id)

    start_date = parse_date(params.get('start_date'), 'start_date')
    end_date = parse_date(params.get('end_date'), 'end_date')
    queryset = queryset.by_date_range(start_date, end_date)

    # 검색 필터
    search = (params.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(description__icontains=search) |
            Q(notes__icontains=search) |
            Q(category__name__icontains=search)
        )

    return queryset


def export_transactions_to_excel(queryset):
    """
    필터링된 거래 내역을 엑셀로 내보내기
    Decimal 정확성 유지
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Transactions"

    headers = ['Date', 'Description', 'Type', 'Category', 'Amount', 'Notes']
    ws.append(headers)

    for tx in queryset:
        ws.append([
            tx.date,
            tx.description,
            tx.get_type_display(),
            tx.category.name if tx.category else 'Uncategorized',
            # 엑셀 셀은 float 만 지원
            float(tx.amount),
            tx.notes or '',
        ])

    # 금액/날짜 열 서식
    for row in ws.iter_rows(min_row=2):
        row[0].number_format = 'yyyy-mm-dd'
        row[4].number_format = '#,##0.00'

    ws.column_dimensions['A'].width = 12
    ws.column_dimensions['B'].width = 40
    ws.column_dimensions['D'].width = 20
    ws.column_dimensions['E'].width = 14

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
