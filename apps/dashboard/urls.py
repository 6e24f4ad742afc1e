from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    # 페이지
    path('', views.dashboard_page, name='index'),
    path('insights/', views.insights_page, name='insights'),

    # Summary API
    path('api/summary/', views.summary, name='summary'),
    path('api/summary/monthly/', views.monthly_summary, name='monthly_summary'),
    path('api/summary/yearly/', views.yearly_summary, name='yearly_summary'),

    # Charts API
    path('api/charts/spending-by-category/', views.spending_by_category, name='chart_spending_by_category'),
    path('api/charts/income-vs-expenses/', views.income_vs_expenses, name='chart_income_vs_expenses'),
    path('api/charts/monthly-trend/', views.monthly_trend, name='chart_monthly_trend'),
    path('api/charts/daily-pattern/', views.daily_pattern, name='chart_daily_pattern'),

    # Dashboard / Insights API
    path('api/dashboard/', views.dashboard_api, name='dashboard_api'),
    path('api/insights/', views.insights_api, name='insights_api'),
    path('api/health/', views.health, name='health'),
]
