from django.urls import path
from . import views

app_name = 'budgets'

urlpatterns = [
    # Budget API
    path('api/budgets/', views.budget_list, name='budget_list'),
    path('api/budgets/<int:pk>/', views.budget_detail, name='budget_detail'),

    # 페이지
    path('budgets/', views.budget_page, name='budget_page'),
]
