from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # 각 앱은 페이지(/transactions/)와 API(/api/...) 경로를 모두 직접 선언
    path('', include('apps.accounts.urls')),
    path('', include('apps.transactions.urls')),
    path('', include('apps.budgets.urls')),
    path('', include('apps.dashboard.urls')),
]
