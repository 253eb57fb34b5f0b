"""
Operator console views, mounted at /admin/.
"""

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.views.generic import ListView, TemplateView

from tenants.models import SystemAdmin

from .services import PlatformStatsService


class SystemAdminRequiredMixin(LoginRequiredMixin):
    redirect_field_name = 'redirectTo'

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated and not SystemAdmin.objects.filter(user=request.user).exists():
            raise PermissionDenied("System admin required")
        return super().dispatch(request, *args, **kwargs)


class ConsoleDashboardView(SystemAdminRequiredMixin, TemplateView):
    template_name = 'console/dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({
            'stats': PlatformStatsService.stats(),
            'recent_companies': PlatformStatsService.recent_companies(),
            'recent_activity': PlatformStatsService.recent_activity(),
        })
        return context


class CompanyListView(SystemAdminRequiredMixin, ListView):
    template_name = 'console/companies.html'
    context_object_name = 'companies'
    paginate_by = 25

    def get_queryset(self):
        return PlatformStatsService.companies(self.request.GET.get('q', '').strip())
