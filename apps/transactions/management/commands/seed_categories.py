from django.core.management.base import BaseCommand

from apps.transactions.defaults import DEFAULT_CATEGORIES
from apps.transactions.models import Category


class Command(BaseCommand):
    help = '기본(시스템) 카테고리 생성/갱신'

    def handle(self, *args, **kwargs):
        created = 0
        updated = 0
        for cat_data in DEFAULT_CATEGORIES:
            defaults = {key: value for key, value in cat_data.items() if key != 'name'}
            category, created_flag = Category.objects.update_or_create(
                name=cat_data['name'],
                is_system=True,
                defaults=defaults,
            )
            if created_flag:
                created += 1
            else:
                updated += 1

        self.stdout.write(
            self.style.SUCCESS(f'✅ 카테고리 생성: {created}개, 업데이트: {updated}개')
        )
