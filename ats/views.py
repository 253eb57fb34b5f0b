"""
ATS Views - the recruiter panel under /app/.

Pages render templates; the pipeline board is driven through small JSON
endpoints (load and move).
"""

import json
import logging

from django.contrib import messages
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.views import View
from django.views.generic import FormView, TemplateView

from tenants.exceptions import PermissionDenied, PlanLimitExceeded
from tenants.mixins import TenantViewMixin
from tenants.services import AuditService

from .exceptions import StageConflictError
from .forms import (
    BoardMoveForm,
    JobForm,
    JobStatusForm,
    NoteForm,
    RatingForm,
    RejectForm,
    TalentPoolForm,
)
from .models import Application, Candidate, Job, TalentPoolEntry
from .pipeline import BoardError
from .services import (
    ApplicationService,
    BoardService,
    CandidateService,
    DashboardService,
    JobService,
    TalentPoolService,
)

logger = logging.getLogger(__name__)


class DashboardView(TenantViewMixin, TemplateView):
    template_name = 'app/dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        scope = self.get_scope_or_fail()
        context.update({
            'stats': DashboardService.stats(scope),
            'recent_applications': DashboardService.recent_applications(scope),
            'jobs_overview': DashboardService.jobs_overview(scope),
            'recent_activity': AuditService.recent(scope),
        })
        return context


# =============================================================================
# JOBS
# =============================================================================

class JobListView(TenantViewMixin, TemplateView):
    template_name = 'app/jobs/list.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        jobs = JobService.queryset(self.get_scope_or_fail())
        status = self.request.GET.get('status')
        if status in Job.Status.values:
            jobs = jobs.filter(status=status)
        context.update({'jobs': jobs, 'status': status, 'statuses': Job.Status.choices})
        return context


class JobCreateView(TenantViewMixin, FormView):
    template_name = 'app/jobs/form.html'
    form_class = JobForm

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        locale = data.pop('locale', None)
        try:
            job = JobService.create(self.get_scope_or_fail(), data, locale=locale)
        except PlanLimitExceeded as e:
            form.add_error(None, e.message)
            return self.form_invalid(form)

        messages.success(self.request, 'Job created.')
        return redirect('ats:job_detail', pk=job.pk)


class JobUpdateView(TenantViewMixin, FormView):
    template_name = 'app/jobs/form.html'
    form_class = JobForm

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            self.job = get_object_or_404(JobService.queryset(self.get_scope_or_fail()), pk=kwargs['pk'])
        return super().dispatch(request, *args, **kwargs)

    def get_initial(self):
        return JobForm.initial_for(self.job, self.request.GET.get('locale'))

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['job'] = self.job
        return context

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        locale = data.pop('locale', None)
        JobService.update(self.get_scope_or_fail(), self.job.pk, data, locale=locale)
        messages.success(self.request, 'Job updated.')
        return redirect('ats:job_detail', pk=self.job.pk)


class JobDetailView(TenantViewMixin, TemplateView):
    template_name = 'app/jobs/detail.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        scope = self.get_scope_or_fail()
        job = get_object_or_404(JobService.queryset(scope), pk=kwargs['pk'])
        board = BoardService.load(scope, job, self.request.session)
        context.update({
            'job': job,
            'board': BoardService.serialize(scope, job, board),
            'content': job.localized_content(self.request.GET.get('locale')),
            'status_form': JobStatusForm(initial={'status': job.status}),
        })
        return context


class JobStatusView(TenantViewMixin, View):

    def post(self, request, pk):
        scope = self.get_scope_or_fail()
        form = JobStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, 'Invalid status.')
            return redirect('ats:job_detail', pk=pk)
        try:
            JobService.change_status(scope, pk, form.cleaned_data['status'])
        except Job.DoesNotExist:
            raise Http404('Job not found')
        messages.success(request, 'Job status updated.')
        return redirect('ats:job_detail', pk=pk)


class JobDeleteView(TenantViewMixin, View):

    def post(self, request, pk):
        try:
            JobService.delete(self.get_scope_or_fail(), pk)
        except Job.DoesNotExist:
            raise Http404('Job not found')
        except PermissionDenied as e:
            messages.error(request, e.message)
            return redirect('ats:job_detail', pk=pk)
        messages.success(request, 'Job deleted.')
        return redirect('ats:job_list')


# =============================================================================
# PIPELINE BOARD
# =============================================================================

class BoardView(TenantViewMixin, View):
    """GET the job's board as JSON."""

    def get(self, request, pk):
        scope = self.get_scope_or_fail()
        job = get_object_or_404(JobService.queryset(scope), pk=pk)
        board = BoardService.load(scope, job, request.session)
        return JsonResponse(BoardService.serialize(scope, job, board))


class BoardMoveView(TenantViewMixin, View):
    """
    Endpoint called when a card is dropped on the board.

    Responds with the resulting board; on failure the board in the
    response is the restored pre-move state.
    """

    def post(self, request, pk):
        scope = self.get_scope_or_fail()
        job = get_object_or_404(JobService.queryset(scope), pk=pk)

        if request.content_type == 'application/json':
            try:
                payload = json.loads(request.body or b'{}')
            except json.JSONDecodeError:
                return JsonResponse({'error': 'Invalid JSON'}, status=400)
        else:
            payload = request.POST

        form = BoardMoveForm(payload)
        if not form.is_valid():
            return JsonResponse({'error': 'Invalid move', 'errors': form.errors}, status=400)
        move = form.cleaned_data

        try:
            board = BoardService.move(
                scope, job, request.session,
                application_id=move['application_id'],
                from_stage=move['from_stage'],
                to_index=move['to_index'],
                to_stage=move['to_stage'],
            )
        except (StageConflictError, BoardError) as e:
            return self._failure(scope, job, str(e), status=409)
        except Application.DoesNotExist:
            return self._failure(scope, job, 'Application not found', status=404)
        except Exception:
            return self._failure(scope, job, 'Could not move the application. Please try again.', status=500)

        return JsonResponse(BoardService.serialize(scope, job, board))

    def _failure(self, scope, job, message, status):
        board = BoardService.load(scope, job, self.request.session)
        data = BoardService.serialize(scope, job, board)
        data['error'] = message
        return JsonResponse(data, status=status)


# =============================================================================
# CANDIDATES & APPLICATIONS
# =============================================================================

class CandidateListView(TenantViewMixin, TemplateView):
    template_name = 'app/candidates/list.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        scope = self.get_scope_or_fail()
        search = self.request.GET.get('q', '').strip()
        context.update({
            'search': search,
            'candidates': CandidateService.queryset(scope, search),
            'applications': ApplicationService.queryset(scope).order_by('-created_at')[:50],
        })
        return context


class CandidateDetailView(TenantViewMixin, TemplateView):
    template_name = 'app/candidates/detail.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        try:
            context.update(CandidateService.detail(self.get_scope_or_fail(), kwargs['pk']))
        except Candidate.DoesNotExist:
            raise Http404('Candidate not found')
        context.update({
            'rating_form': RatingForm(),
            'note_form': NoteForm(),
            'reject_form': RejectForm(),
        })
        return context


class ApplicationActionView(TenantViewMixin, View):
    """Base for the small POST actions on an application."""

    form_class = None
    success_message = ''

    def post(self, request, pk):
        scope = self.get_scope_or_fail()
        application = get_object_or_404(ApplicationService.queryset(scope), pk=pk)
        form = self.form_class(request.POST)
        if form.is_valid():
            self.perform(scope, application, form.cleaned_data)
            messages.success(request, self.success_message)
        else:
            messages.error(request, 'Please correct the errors below.')
        return redirect('ats:candidate_detail', pk=application.candidate_id)

    def perform(self, scope, application, data):
        raise NotImplementedError


class ApplicationRateView(ApplicationActionView):
    form_class = RatingForm
    success_message = 'Rating saved.'

    def perform(self, scope, application, data):
        ApplicationService.rate(scope, application.pk, data['rating'])


class ApplicationNoteView(ApplicationActionView):
    form_class = NoteForm
    success_message = 'Note added.'

    def perform(self, scope, application, data):
        ApplicationService.add_note(scope, application.pk, data['content'])


class ApplicationRejectView(ApplicationActionView):
    form_class = RejectForm
    success_message = 'Application rejected.'

    def perform(self, scope, application, data):
        ApplicationService.reject(scope, application.pk, data['reason'])


# =============================================================================
# TALENT POOL
# =============================================================================

class TalentPoolView(TenantViewMixin, TemplateView):
    template_name = 'app/talent_pool.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        search = self.request.GET.get('q', '').strip()
        context.update({
            'search': search,
            'entries': TalentPoolService.queryset(self.get_scope_or_fail(), search),
            'form': TalentPoolForm(),
        })
        return context


class TalentPoolAddView(TenantViewMixin, View):

    def post(self, request):
        form = TalentPoolForm(request.POST)
        if not form.is_valid():
            messages.error(request, 'Invalid candidate.')
            return redirect('ats:talent_pool')
        try:
            entry = TalentPoolService.add(
                self.get_scope_or_fail(),
                form.cleaned_data['candidate_id'],
                notes=form.cleaned_data['notes'],
                tags=form.cleaned_data['tags'],
            )
        except Candidate.DoesNotExist:
            raise Http404('Candidate not found')
        messages.success(request, f'{entry.candidate.name} added to the talent pool.')
        return redirect('ats:talent_pool')


class TalentPoolRemoveView(TenantViewMixin, View):

    def post(self, request, pk):
        try:
            TalentPoolService.remove(self.get_scope_or_fail(), pk)
        except TalentPoolEntry.DoesNotExist:
            raise Http404('Entry not found')
        messages.success(request, 'Removed from the talent pool.')
        return redirect('ats:talent_pool')
