"""
JSON API 공통 헬퍼

모든 /api/ 뷰는 같은 응답 형태를 사용합니다:
    성공: {"success": true, "data": ..., (추가 키)}
    실패: {"success": false, "error": "메시지"}

api_view 데코레이터가 처리하는 것:
    - 허용되지 않은 HTTP 메서드 → 405
    - 로그인 안 된 요청 → 401 (login_required 처럼 리다이렉트하지 않음)
    - ApiError / ValidationError → 400 (또는 지정된 status)
    - Http404 → 404
    - IntegrityError (유니크 제약 위반) → 409
"""
import json
import logging
from datetime import date
from decimal import Decimal
from functools import wraps

from django.core.exceptions import ValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.http import Http404, JsonResponse
from django.utils.dateparse import parse_date as django_parse_date

logger = logging.getLogger(__name__)


class FinanceJSONEncoder(DjangoJSONEncoder):
    """Decimal 을 문자열이 아닌 숫자로 직렬화 (차트 데이터용)"""

    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        return super().default(o)


class ApiError(Exception):
    """뷰 안에서 던지면 그대로 JSON 에러 응답이 되는 예외"""

    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status


def json_success(data=None, status=200, **extra):
    payload = {'success': True}
    if data is not None:
        payload['data'] = data
    payload.update(extra)
    return JsonResponse(payload, status=status, encoder=FinanceJSONEncoder)


def json_error(message, status=400):
    return JsonResponse(
        {'success': False, 'error': message},
        status=status,
        encoder=FinanceJSONEncoder,
    )


def api_view(methods, login_required=True):
    """
    JSON API 뷰 데코레이터

    Args:
        methods: 허용할 HTTP 메서드 목록 (예: ['GET', 'POST'])
        login_required: False 면 비로그인 요청도 허용 (health, login 등)
    """
    allowed = [m.upper() for m in methods]

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                response = json_error(f'Method {request.method} not allowed', status=405)
                response['Allow'] = ', '.join(allowed)
                return response

            if login_required and not request.user.is_authenticated:
                return json_error('Authentication required', status=401)

            try:
                # 실패 시 savepoint 롤백 (테스트 트랜잭션 보호)
                with transaction.atomic():
                    return view_func(request, *args, **kwargs)
            except ApiError as e:
                return json_error(e.message, status=e.status)
            except ValidationError as e:
                return json_error(validation_error_message(e), status=400)
            except Http404 as e:
                return json_error(str(e) or 'Not found', status=404)
            except IntegrityError as e:
                logger.warning(f"제약 조건 위반: {request.method} {request.path} ({e})")
                return json_error('Resource conflicts with an existing record', status=409)

        return wrapper

    return decorator


def parse_body(request):
    """요청 본문을 dict 로 변환 (JSON 우선, 폼 인코딩도 허용)"""
    if request.content_type in ('application/x-www-form-urlencoded', 'multipart/form-data'):
        return request.POST.dict()
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise ApiError('Invalid JSON body')
    if not isinstance(payload, dict):
        raise ApiError('JSON body must be an object')
    return payload


def validation_error_message(error):
    """ValidationError 에서 사용자에게 보여줄 첫 메시지 추출"""
    if hasattr(error, 'message_dict'):
        for messages in error.message_dict.values():
            if messages:
                return messages[0]
    if error.messages:
        return error.messages[0]
    return 'Invalid data'


def form_error_message(form):
    """폼 에러 중 첫 메시지 (전체 에러 우선)"""
    non_field = form.non_field_errors()
    if non_field:
        return non_field[0]
    for errors in form.errors.values():
        if errors:
            return errors[0]
    return 'Invalid data'


def missing_fields(payload, fields):
    """비어있는 필수 필드 이름 목록"""
    return [name for name in fields if payload.get(name) in (None, '')]


def coerce_date_string(value):
    """'2024-01-15T00:00:00.000Z' 같은 ISO 일시 문자열을 날짜 부분만 남김"""
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ApiError('Invalid date, expected YYYY-MM-DD')
    if 'T' in value:
        return value.split('T', 1)[0]
    return value


def parse_date(value, field_name):
    """쿼리스트링 날짜 (YYYY-MM-DD) 파싱, 비어있으면 None"""
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    try:
        parsed = django_parse_date(coerce_date_string(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ApiError(f"Invalid date for '{field_name}', expected YYYY-MM-DD")
    return parsed


def parse_int(value, field_name, default=None, minimum=None, maximum=None):
    """정수 파라미터 파싱 (범위를 벗어나면 경계값으로 보정)"""
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ApiError(f"Invalid integer for '{field_name}'")
    if minimum is not None and number < minimum:
        number = minimum
    if maximum is not None and number > maximum:
        number = maximum
    return number


MIN_YEAR = 1
MAX_YEAR = 9999
YEAR_RANGE_ERROR = f'Year must be between {MIN_YEAR} and {MAX_YEAR}'


def parse_year(value, default=None):
    """연도 파라미터 파싱, 날짜로 만들 수 없는 연도 (1..9999 밖) 는 400"""
    year = parse_int(value, 'year', default=default)
    if year is not None and not MIN_YEAR <= year <= MAX_YEAR:
        raise ApiError(YEAR_RANGE_ERROR)
    return year


def parse_month(value):
    """'YYYY-MM' → (year, month), 비어있으면 None"""
    if not value:
        return None
    try:
        year_str, month_str = value.split('-')
        year, month = int(year_str), int(month_str)
    except (TypeError, ValueError, AttributeError):
        raise ApiError("Invalid month, expected YYYY-MM")
    if not 1 <= month <= 12 or not MIN_YEAR <= year <= MAX_YEAR:
        raise ApiError("Invalid month, expected YYYY-MM")
    return year, month


def get_or_404(queryset, message, **lookup):
    """get_object_or_404 의 JSON 버전 (메시지 지정)"""
    try:
        return queryset.get(**lookup)
    except queryset.model.DoesNotExist:
        raise ApiError(message, status=404)
