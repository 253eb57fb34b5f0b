"""
ATS Admin - jobs, candidates, applications and the talent pool.
"""

from django.contrib import admin

from .models import Application, Candidate, Job, TalentPoolEntry


class ApplicationInline(admin.TabularInline):
    model = Application
    extra = 0
    fields = ['candidate', 'stage', 'rating', 'updated_at']
    readonly_fields = ['updated_at']
    raw_id_fields = ['candidate']


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'company', 'department', 'status', 'published_at', 'created_at']
    list_filter = ['status', 'remote_type', 'employment_type']
    search_fields = ['company__name', 'department', 'location']
    raw_id_fields = ['company', 'created_by']
    inlines = [ApplicationInline]


@admin.register(Candidate)
class CandidateAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'location', 'created_at']
    search_fields = ['name', 'email']


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ['candidate', 'job', 'company', 'stage', 'rating', 'updated_at']
    list_filter = ['stage']
    search_fields = ['candidate__name', 'candidate__email', 'company__name']
    raw_id_fields = ['company', 'job', 'candidate']


@admin.register(TalentPoolEntry)
class TalentPoolEntryAdmin(admin.ModelAdmin):
    list_display = ['candidate', 'company', 'added_by', 'created_at']
    search_fields = ['candidate__name', 'candidate__email']
    raw_id_fields = ['company', 'candidate', 'added_by']
