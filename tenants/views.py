"""
Tenants Views - authentication, onboarding and company settings.

- /auth/login, /auth/signup, /auth/logout, /auth/invite/<token>/
- /onboarding/ (company), /onboarding/job/, /onboarding/career-page/
- /app/settings/ (company, career page, team)
"""

import logging

from django.contrib import messages
from django.contrib.auth import login
from django.contrib.auth.views import LoginView, LogoutView
from django.db import transaction
from django.shortcuts import redirect, render
from django.views import View
from django.views.generic import FormView, TemplateView

from ats.forms import JobForm
from ats.services import JobService

from .exceptions import AlreadyMember, DuplicateInvitation, InvalidInvitation, PlanLimitExceeded, TenantError
from .forms import (
    CareerPageForm,
    CompanyOnboardingForm,
    CompanySettingsForm,
    EmailAuthenticationForm,
    InviteAcceptForm,
    SignupForm,
    TeamInviteForm,
)
from .mixins import CompanyAdminRequiredMixin, TenantViewMixin
from .models import CompanyUser, TeamMember
from .services import CompanyService, InvitationService

logger = logging.getLogger(__name__)

DASHBOARD_URL = '/app/dashboard/'
ONBOARDING_URL = '/onboarding/'


# =============================================================================
# AUTHENTICATION
# =============================================================================

class MiniatsLoginView(LoginView):
    template_name = 'auth/login.html'
    authentication_form = EmailAuthenticationForm
    redirect_field_name = 'redirectTo'

    def get_default_redirect_url(self):
        if CompanyUser.objects.filter(user=self.request.user).exists():
            return DASHBOARD_URL
        return ONBOARDING_URL


class MiniatsLogoutView(LogoutView):
    next_page = '/'


class SignupView(FormView):
    template_name = 'auth/signup.html'
    form_class = SignupForm

    def form_valid(self, form):
        user = form.save()
        login(self.request, user, backend='django.contrib.auth.backends.ModelBackend')
        logger.info(f"User {user.pk} signed up")
        return redirect(ONBOARDING_URL)


class InviteAcceptView(View):
    """
    Accept a team invitation.

    Logged-in users accept with their own account (the email must match);
    anonymous visitors create an account for the invited email.
    """

    template_name = 'auth/invite.html'

    def get(self, request, token):
        try:
            member = InvitationService.get_pending(token)
        except InvalidInvitation as e:
            return render(request, self.template_name, {'error': e.message}, status=404)
        form = None if request.user.is_authenticated else InviteAcceptForm(email=member.email)
        return render(request, self.template_name, {'member': member, 'form': form})

    def post(self, request, token):
        try:
            member = InvitationService.get_pending(token)
        except InvalidInvitation as e:
            return render(request, self.template_name, {'error': e.message}, status=404)

        if request.user.is_authenticated:
            if request.user.email.lower() != member.email.lower():
                return render(request, self.template_name, {
                    'member': member,
                    'error': 'This invitation was sent to a different email address.',
                }, status=403)
            form = None
        else:
            form = InviteAcceptForm(request.POST, email=member.email)
            if not form.is_valid():
                return render(request, self.template_name, {'member': member, 'form': form}, status=400)

        # A new account only survives if the invitation is accepted with it.
        try:
            with transaction.atomic():
                user = request.user if form is None else form.save()
                InvitationService.accept(token, user)
        except TenantError as e:
            return render(request, self.template_name, {
                'member': member,
                'form': form,
                'error': e.message,
            }, status=400)

        if form is not None:
            login(request, user, backend='django.contrib.auth.backends.ModelBackend')

        messages.success(request, f'Welcome to {member.company.name}!')
        return redirect(DASHBOARD_URL)


# =============================================================================
# ONBOARDING
# =============================================================================

class OnboardingCompanyView(TenantViewMixin, FormView):
    """Step 1: create the company. Users who already have one skip ahead."""

    template_name = 'onboarding/company.html'
    form_class = CompanyOnboardingForm

    def dispatch(self, request, *args, **kwargs):
        if getattr(request, 'scope', None) is not None:
            return redirect(DASHBOARD_URL)
        return super().dispatch(request, *args, **kwargs)

    def get_initial(self):
        name = self.request.GET.get('name', '')
        return {'name': name, 'slug': CompanyService.suggest_slug(name) if name else ''}

    def form_valid(self, form):
        try:
            CompanyService.onboard(self.request.user, **form.cleaned_data)
        except AlreadyMember:
            return redirect(DASHBOARD_URL)
        return redirect('onboarding_job')


class OnboardingStepMixin(TenantViewMixin):
    """Later steps need the company created in step 1."""

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated and getattr(request, 'scope', None) is None:
            return redirect(ONBOARDING_URL)
        return super().dispatch(request, *args, **kwargs)

    def post(self, request, *args, **kwargs):
        if 'skip' in request.POST:
            return redirect(self.next_url)
        return super().post(request, *args, **kwargs)


class OnboardingJobView(OnboardingStepMixin, FormView):
    """Step 2 (optional): the first job."""

    template_name = 'onboarding/job.html'
    form_class = JobForm
    next_url = '/onboarding/career-page/'

    def form_valid(self, form):
        data = dict(form.cleaned_data)
        locale = data.pop('locale', None)
        try:
            JobService.create(self.get_scope_or_fail(), data, locale=locale)
        except PlanLimitExceeded as e:
            form.add_error(None, e.message)
            return self.form_invalid(form)
        return redirect(self.next_url)


class OnboardingCareerPageView(OnboardingStepMixin, FormView):
    """Step 3 (optional): career page copy."""

    template_name = 'onboarding/career_page.html'
    form_class = CareerPageForm
    next_url = DASHBOARD_URL

    def get_initial(self):
        return self.get_scope_or_fail().company.career_page

    def form_valid(self, form):
        CompanyService.update_career_page(self.get_scope_or_fail(), form.cleaned_data)
        messages.success(self.request, 'Your company is ready.')
        return redirect(self.next_url)


# =============================================================================
# SETTINGS
# =============================================================================

class CompanySettingsView(CompanyAdminRequiredMixin, FormView):
    template_name = 'app/settings/company.html'
    form_class = CompanySettingsForm

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs['instance'] = self.get_scope_or_fail().company
        return kwargs

    def form_valid(self, form):
        data = {k: v for k, v in form.cleaned_data.items() if k != 'logo'}
        CompanyService.update_settings(self.get_scope_or_fail(), data, logo=form.cleaned_data.get('logo'))
        messages.success(self.request, 'Settings saved.')
        return redirect('tenants:settings')


class CareerPageSettingsView(TenantViewMixin, FormView):
    template_name = 'app/settings/career_page.html'
    form_class = CareerPageForm

    def get_initial(self):
        return self.get_scope_or_fail().company.career_page

    def form_valid(self, form):
        try:
            CompanyService.update_career_page(self.get_scope_or_fail(), form.cleaned_data)
        except TenantError as e:
            form.add_error(None, e.message)
            return self.form_invalid(form)
        messages.success(self.request, 'Career page saved.')
        return redirect('tenants:career_page')


class TeamView(TenantViewMixin, TemplateView):
    """List members and invitations; admins can invite."""

    template_name = 'app/settings/team.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        scope = self.get_scope_or_fail()
        plan = scope.company.get_plan()
        context.update({
            'members': CompanyUser.objects.filter(company=scope.company).select_related('user'),
            'invitations': TeamMember.objects.for_company(scope.company),
            'seat_count': InvitationService.seat_count(scope.company),
            'plan': plan,
            'form': kwargs.get('form') or TeamInviteForm(),
        })
        return context

    def post(self, request):
        scope = self.get_scope_or_fail()
        form = TeamInviteForm(request.POST)
        if form.is_valid():
            try:
                InvitationService.invite(scope, form.cleaned_data['email'], form.cleaned_data['role'])
            except TenantError as e:
                form.add_error('email' if isinstance(e, DuplicateInvitation) else None, e.message)
            else:
                messages.success(request, f"Invitation sent to {form.cleaned_data['email']}.")
                return redirect('tenants:team')
        return self.render_to_response(self.get_context_data(form=form), status=400)


class TeamMemberActionView(CompanyAdminRequiredMixin, View):
    action = None

    def post(self, request, pk):
        scope = self.get_scope_or_fail()
        try:
            if self.action == 'resend':
                InvitationService.resend(scope, pk)
                messages.success(request, 'Invitation resent.')
            else:
                InvitationService.remove(scope, pk)
                messages.success(request, 'Team member removed.')
        except TeamMember.DoesNotExist:
            messages.error(request, 'Team member not found.')
        except TenantError as e:
            messages.error(request, e.message)
        return redirect('tenants:team')

