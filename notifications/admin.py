from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'user', 'company', 'notification_type', 'read', 'created_at']
    list_filter = ['notification_type', 'read']
    search_fields = ['title', 'user__email']
    raw_id_fields = ['user', 'company']
