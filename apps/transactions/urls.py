from django.urls import path
from . import views

app_name = 'transactions'

urlpatterns = [
    # Category API
    path('api/categories/', views.category_list, name='category_list'),
    path('api/categories/<int:pk>/', views.category_detail, name='category_detail'),

    # Transaction API
    path('api/transactions/', views.transaction_list, name='transaction_list'),
    # export 는 <int:pk> 보다 먼저
    path('api/transactions/export/', views.transaction_export, name='transaction_export'),
    path('api/transactions/<int:pk>/', views.transaction_detail, name='transaction_detail'),

    # 페이지
    path('transactions/', views.transaction_page, name='transaction_page'),
    path('categories/', views.category_page, name='category_page'),
]
