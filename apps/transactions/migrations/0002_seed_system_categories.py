from django.db import migrations

from apps.transactions.defaults import DEFAULT_CATEGORIES


def seed_system_categories(apps, schema_editor):
    Category = apps.get_model('transactions', 'Category')

    for cat_data in DEFAULT_CATEGORIES:
        defaults = {key: value for key, value in cat_data.items() if key != 'name'}
        Category.objects.get_or_create(
            name=cat_data['name'],
            is_system=True,
            defaults=defaults,
        )


def unseed_system_categories(apps, schema_editor):
    Category = apps.get_model('transactions', 'Category')
    Category.objects.filter(is_system=True, user__isnull=True).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('transactions', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_system_categories, unseed_system_categories),
    ]
