"""
Tenants Admin - plans, companies and membership under /django-admin/.
"""

from django.contrib import admin
from django.utils.html import format_html

from .models import ActivityLog, Company, CompanyUser, Plan, SystemAdmin, TeamMember


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'slug', 'price_monthly', 'price_yearly',
        'max_users', 'max_jobs', 'max_applications_per_month', 'is_public',
    ]
    list_filter = ['is_public']
    search_fields = ['name', 'slug']
    ordering = ['sort_order', 'price_monthly']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'description', 'is_public', 'sort_order')
        }),
        ('Pricing', {
            'fields': ('price_monthly', 'price_yearly', 'currency',
                       'stripe_price_id_monthly', 'stripe_price_id_yearly')
        }),
        ('Limits', {
            'fields': ('max_jobs', 'max_users', 'max_applications_per_month')
        }),
    )


class CompanyUserInline(admin.TabularInline):
    model = CompanyUser
    extra = 0
    raw_id_fields = ['user']


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'plan', 'status_badge', 'trial_ends_at', 'created_at']
    list_filter = ['plan', 'subscription_status', 'size']
    search_fields = ['name', 'slug', 'stripe_customer_id']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [CompanyUserInline]

    def status_badge(self, obj):
        colors = {
            Company.SubscriptionStatus.ACTIVE: 'green',
            Company.SubscriptionStatus.TRIALING: 'blue',
            Company.SubscriptionStatus.PAST_DUE: 'orange',
            Company.SubscriptionStatus.CANCELED: 'red',
        }
        return format_html(
            '<span style="color: {};">{}</span>',
            colors.get(obj.subscription_status, 'gray'),
            obj.subscription_status,
        )
    status_badge.short_description = 'Subscription'


@admin.register(SystemAdmin)
class SystemAdminAdmin(admin.ModelAdmin):
    list_display = ['user', 'created_at']
    raw_id_fields = ['user']


@admin.register(TeamMember)
class TeamMemberAdmin(admin.ModelAdmin):
    list_display = ['email', 'company', 'role', 'status', 'invited_at', 'joined_at']
    list_filter = ['status', 'role']
    search_fields = ['email', 'company__name']
    raw_id_fields = ['company', 'invited_by', 'user']
    readonly_fields = ['invite_token']


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ['action', 'company', 'user', 'entity_type', 'entity_id', 'created_at']
    list_filter = ['action', 'entity_type']
    search_fields = ['company__name', 'entity_id']
    raw_id_fields = ['company', 'user']

    def has_change_permission(self, request, obj=None):
        return False
