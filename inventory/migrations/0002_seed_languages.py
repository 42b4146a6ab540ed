from django.db import migrations

LANGUAGES = [
    ('en', 'English', 'English', 'ltr', True),
    ('ar', 'Arabic', 'العربية', 'rtl', False),
    ('ku', 'Kurdish', 'کوردی', 'rtl', False),
]


def seed_languages(apps, schema_editor):
    Language = apps.get_model('inventory', 'Language')
    db_alias = schema_editor.connection.alias
    for code, name, native_name, direction, is_default in LANGUAGES:
        Language.objects.using(db_alias).update_or_create(
            code=code,
            defaults={
                'name': name,
                'native_name': native_name,
                'direction': direction,
                'is_active': True,
                'is_default': is_default,
            },
        )


def remove_languages(apps, schema_editor):
    Language = apps.get_model('inventory', 'Language')
    Language.objects.using(schema_editor.connection.alias).filter(
        code__in=[row[0] for row in LANGUAGES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_languages, remove_languages),
    ]
