from rest_framework import serializers

from tenants.models import Plan


class CheckoutSessionSerializer(serializers.Serializer):
    plan_id = serializers.CharField(max_length=50)
    interval = serializers.ChoiceField(choices=Plan.Interval.choices, default=Plan.Interval.MONTH)


class PlanSerializer(serializers.ModelSerializer):
    class Meta:
        model = Plan
        fields = [
            'slug', 'name', 'description', 'price_monthly', 'price_yearly', 'currency',
            'max_jobs', 'max_users', 'max_applications_per_month',
        ]
