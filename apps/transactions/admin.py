from django.contrib import admin
from django.utils.html import format_html
from django.db.models import Count, Q
from .models import Transaction, Category


# 1. 공통 믹스인
class SoftDeleteAdminMixin:
    """관리자 화면에서는 삭제된(is_active=False) 데이터도 보이도록"""
    def get_queryset(self, request):
        return self.model.objects.all()


@admin.register(Transaction)
class TransactionAdmin(SoftDeleteAdminMixin, admin.ModelAdmin):
    """
    거래 내역 관리
    """
    list_display = [
        'date',
        'description',
        'get_type_display_colored',
        'get_amount_display',
        'category',
        'user',
        'is_active'
    ]

    date_hierarchy = 'date'

    list_filter = [
        'is_active',
        'type',
        'category',
    ]

    search_fields = ['description', 'notes', 'category__name', 'user__username']
    list_select_related = ['category', 'user']

    @admin.display(description='Type', ordering='type')
    def get_type_display_colored(self, obj):
        if obj.type == 'income':
            return format_html('<span style="color:green; font-weight:bold;">{}</span>', 'Income')
        return format_html('<span style="color:red; font-weight:bold;">{}</span>', 'Expense')

    @admin.display(description='Amount', ordering='amount')
    def get_amount_display(self, obj):
        formatted = f"{obj.amount:,.2f}"
        if obj.type == 'income':
            return format_html('<span style="color:green;">+{}</span>', formatted)
        return format_html('<span style="color:red;">-{}</span>', formatted)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'get_color_display', 'icon', 'user', 'is_system', 'get_transaction_count', 'order']
    list_filter = ['type', 'is_system']
    ordering = ['type', 'order']
    search_fields = ['name']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(tx_count=Count('transactions', filter=Q(transactions__is_active=True)))

    @admin.display(description='Color')
    def get_color_display(self, obj):
        return format_html(
            '<span style="display:inline-block; width:12px; height:12px; background:{};"></span> {}',
            obj.color, obj.color
        )

    @admin.display(description='Transactions', ordering='tx_count')
    def get_transaction_count(self, obj):
        return obj.tx_count
