from django.contrib import admin
from django.utils.html import format_html

from apps.transactions.admin import SoftDeleteAdminMixin
from .models import Budget


@admin.register(Budget)
class BudgetAdmin(SoftDeleteAdminMixin, admin.ModelAdmin):
    """
    예산 관리
    """
    list_display = ['category', 'user', 'period', 'get_amount_display', 'start_date', 'end_date', 'is_active']
    list_filter = ['is_active', 'period']
    search_fields = ['category__name', 'user__username']
    list_select_related = ['category', 'user']
    date_hierarchy = 'start_date'

    @admin.display(description='Amount', ordering='amount')
    def get_amount_display(self, obj):
        return format_html('<strong>{}</strong>', f"{obj.amount:,.2f}")
