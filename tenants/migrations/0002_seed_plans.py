from decimal import Decimal

from django.db import migrations

PLANS = [
    {
        'slug': 'free',
        'name': 'Free',
        'description': 'Basic access after a subscription ends.',
        'price_monthly': Decimal('0'),
        'price_yearly': Decimal('0'),
        'max_jobs': 1,
        'max_users': 1,
        'max_applications_per_month': 25,
        'is_public': False,
        'sort_order': 0,
    },
    {
        'slug': 'trial',
        'name': 'Trial',
        'description': 'Professional features for the first 14 days.',
        'price_monthly': Decimal('0'),
        'price_yearly': Decimal('0'),
        'max_jobs': 25,
        'max_users': 5,
        'max_applications_per_month': 1000,
        'is_public': False,
        'sort_order': 1,
    },
    {
        'slug': 'starter',
        'name': 'Starter',
        'description': 'Perfect for small companies starting to grow.',
        'price_monthly': Decimal('29'),
        'price_yearly': Decimal('290'),
        'max_jobs': 5,
        'max_users': 1,
        'max_applications_per_month': 100,
        'is_public': True,
        'sort_order': 2,
    },
    {
        'slug': 'professional',
        'name': 'Professional',
        'description': 'For growing companies with larger teams.',
        'price_monthly': Decimal('79'),
        'price_yearly': Decimal('790'),
        'max_jobs': 25,
        'max_users': 5,
        'max_applications_per_month': 1000,
        'is_public': True,
        'sort_order': 3,
    },
    {
        'slug': 'business',
        'name': 'Business',
        'description': 'For companies with advanced recruiting needs.',
        'price_monthly': Decimal('199'),
        'price_yearly': Decimal('1990'),
        'max_jobs': -1,
        'max_users': -1,
        'max_applications_per_month': -1,
        'is_public': True,
        'sort_order': 4,
    },
]


def seed_plans(apps, schema_editor):
    Plan = apps.get_model('tenants', 'Plan')
    for data in PLANS:
        defaults = {k: v for k, v in data.items() if k != 'slug'}
        Plan.objects.update_or_create(slug=data['slug'], defaults=defaults)


def remove_plans(apps, schema_editor):
    Plan = apps.get_model('tenants', 'Plan')
    Plan.objects.filter(slug__in=[p['slug'] for p in PLANS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('tenants', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_plans, remove_plans),
    ]
