from .base import *

DEBUG = True

ALLOWED_HOSTS = ['localhost', '127.0.0.1', '0.0.0.0']

# 개발 중에는 브라우저 UI 를 다른 포트(프론트 dev 서버)에서 띄울 수 있음
CSRF_TRUSTED_ORIGINS = ['http://localhost:3000', 'http://127.0.0.1:3000']

# 개발 환경 로깅: 앱 로그는 DEBUG 까지, SQL 은 LOG_SQL=1 일 때만
LOGGING['root']['level'] = 'INFO'
LOGGING['loggers']['apps']['level'] = 'DEBUG'
LOGGING['loggers']['django.db.backends'] = {
    'handlers': ['console'],
    'level': 'DEBUG' if os.environ.get('LOG_SQL') == '1' else 'INFO',
    'propagate': False,
}
