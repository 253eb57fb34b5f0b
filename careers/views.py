"""
Careers Views - public, unauthenticated career pages under /careers/<slug>/.
"""

import logging

from django.http import Http404
from django.shortcuts import redirect
from django.utils.translation import get_language
from django.views.generic import FormView, TemplateView

from ats.models import Job
from tenants.models import Company

from .exceptions import ApplicationRejected
from .forms import PublicApplicationForm
from .services import ApplicationSubmissionService, get_company, get_published_job, jobs_by_department

logger = logging.getLogger(__name__)


class CompanyPageMixin:
    """Resolves the company from the slug, 404 when unknown."""

    def get_company(self) -> Company:
        if not hasattr(self, '_company'):
            try:
                self._company = get_company(self.kwargs['slug'])
            except Company.DoesNotExist:
                raise Http404('Company not found')
        return self._company

    def get_job(self) -> Job:
        if not hasattr(self, '_job'):
            try:
                self._job = get_published_job(self.get_company(), self.kwargs['job_id'])
            except Job.DoesNotExist:
                raise Http404('Job not found')
        return self._job

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        company = self.get_company()
        context.update({'company': company, 'career_page': company.career_page})
        return context


class CareerPageView(CompanyPageMixin, TemplateView):
    template_name = 'careers/index.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['departments'] = jobs_by_department(self.get_company())
        return context


class JobPublicDetailView(CompanyPageMixin, TemplateView):
    template_name = 'careers/job.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['job'] = self.get_job()
        context['content'] = context['job'].localized_content(get_language())
        return context


class ApplyView(CompanyPageMixin, FormView):
    template_name = 'careers/apply.html'
    form_class = PublicApplicationForm

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['job'] = self.get_job()
        return context

    def form_valid(self, form):
        data = {k: v for k, v in form.cleaned_data.items() if k not in ('resume', 'website')}
        try:
            ApplicationSubmissionService.submit(
                self.get_company(), self.get_job(), data, form.cleaned_data['resume'],
            )
        except ApplicationRejected as e:
            form.add_error(None, e.message)
            return self.form_invalid(form)
        except Exception:
            logger.exception(f"Application submission failed for job {self.kwargs['job_id']}")
            form.add_error(None, 'Something went wrong while submitting your application. Please try again.')
            return self.form_invalid(form)

        return redirect('careers:apply_success', slug=self.kwargs['slug'], job_id=self.kwargs['job_id'])

    def form_invalid(self, form):
        return self.render_to_response(self.get_context_data(form=form), status=400)


class ApplySuccessView(CompanyPageMixin, TemplateView):
    template_name = 'careers/success.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['job'] = self.get_job()
        return context
