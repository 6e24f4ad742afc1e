"""
기본(시스템) 카테고리 목록

데이터 마이그레이션과 seed_categories 커맨드가 같이 사용합니다.
"""

DEFAULT_CATEGORIES = [
    # 수입
    {'name': 'Salary', 'type': 'income', 'color': '#10B981', 'icon': '💰', 'order': 1},
    {'name': 'Freelance', 'type': 'income', 'color': '#3B82F6', 'icon': '💼', 'order': 2},
    {'name': 'Investment', 'type': 'income', 'color': '#8B5CF6', 'icon': '📈', 'order': 3},
    {'name': 'Business', 'type': 'income', 'color': '#F59E0B', 'icon': '🏢', 'order': 4},
    {'name': 'Other Income', 'type': 'income', 'color': '#6B7280', 'icon': '🎁', 'order': 5},

    # 지출
    {'name': 'Food & Dining', 'type': 'expense', 'color': '#EF4444', 'icon': '🍽️', 'order': 1},
    {'name': 'Transportation', 'type': 'expense', 'color': '#06B6D4', 'icon': '🚗', 'order': 2},
    {'name': 'Shopping', 'type': 'expense', 'color': '#EC4899', 'icon': '🛍️', 'order': 3},
    {'name': 'Entertainment', 'type': 'expense', 'color': '#F97316', 'icon': '🎬', 'order': 4},
    {'name': 'Utilities', 'type': 'expense', 'color': '#6366F1', 'icon': '⚡', 'order': 5},
    {'name': 'Healthcare', 'type': 'expense', 'color': '#84CC16', 'icon': '🏥', 'order': 6},
    {'name': 'Education', 'type': 'expense', 'color': '#8B5CF6', 'icon': '📚', 'order': 7},
    {'name': 'Housing', 'type': 'expense', 'color': '#F59E0B', 'icon': '🏠', 'order': 8},
    {'name': 'Insurance', 'type': 'expense', 'color': '#10B981', 'icon': '🛡️', 'order': 9},
    {'name': 'Other Expenses', 'type': 'expense', 'color': '#6B7280', 'icon': '📝', 'order': 10},
]
