"""
Tests for ATS services: jobs, stage moves, the board, candidates and the talent pool.
"""

import pytest

from ats.exceptions import InvalidStage, StageConflictError
from ats.models import Application, Job
from ats.services import (
    ApplicationService,
    BoardService,
    CandidateService,
    DashboardService,
    JobService,
    TalentPoolService,
)
from conftest import ApplicationFactory, CandidateFactory, CompanyUserFactory, JobFactory
from tenants.exceptions import PermissionDenied, PlanLimitExceeded
from tenants.models import ActivityLog


@pytest.mark.django_db
class TestJobService:

    def test_create_stores_localized_text(self, scope):
        job = JobService.create(scope, {'title': 'Engenheira de Dados', 'status': 'published'}, locale='pt')

        assert job.title == {'pt': 'Engenheira de Dados'}
        assert job.published_at is not None
        assert ActivityLog.objects.filter(company=scope.company, action=ActivityLog.Action.JOB_PUBLISHED).exists()

    def test_update_adds_locale_without_losing_others(self, scope):
        job = JobService.create(scope, {'title': 'Engenheira de Dados'}, locale='pt')

        job = JobService.update(scope, job.pk, {'title': 'Data Engineer'}, locale='en')

        assert job.title == {'pt': 'Engenheira de Dados', 'en': 'Data Engineer'}
        assert job.localized_content('en')['title'] == 'Data Engineer'

    def test_plan_job_limit(self, scope):
        scope.company.plan = 'starter'
        scope.company.save()
        JobFactory.create_batch(5, company=scope.company)

        with pytest.raises(PlanLimitExceeded):
            JobService.create(scope, {'title': 'One too many'})

    def test_create_locks_company_before_counting(self, scope, company_row_locks):
        JobService.create(scope, {'title': 'Backend Engineer'})

        assert company_row_locks == [scope.company.pk]

    def test_closed_jobs_do_not_count(self, scope):
        scope.company.plan = 'starter'
        scope.company.save()
        JobFactory.create_batch(5, company=scope.company, status='closed')

        assert JobService.create(scope, {'title': 'Fits'}).status == Job.Status.DRAFT

    def test_change_status(self, scope, job):
        job = JobService.change_status(scope, job.pk, 'paused')
        assert job.status == 'paused'

        with pytest.raises(ValueError):
            JobService.change_status(scope, job.pk, 'archived')

    def test_member_cannot_delete(self, member_scope, company):
        job = JobFactory(company=company)

        with pytest.raises(PermissionDenied):
            JobService.delete(member_scope, job.pk)


@pytest.mark.django_db
class TestStageMoves:

    def test_move_writes_stage_and_audit_together(self, scope):
        application = ApplicationFactory(company=scope.company)

        ApplicationService.move_stage(scope, application.pk, 'interview', from_stage='new')

        application.refresh_from_db()
        assert application.stage == 'interview'
        entry = ActivityLog.objects.get(action=ActivityLog.Action.APPLICATION_STAGE_CHANGED)
        assert entry.metadata['from_stage'] == 'new'
        assert entry.metadata['to_stage'] == 'interview'
        assert entry.user == scope.user

    def test_reject_and_back_keeps_associations(self, scope):
        application = ApplicationFactory(company=scope.company, stage='technical')
        candidate_id, job_id = application.candidate_id, application.job_id

        ApplicationService.reject(scope, application.pk, reason='Not a fit')
        application.refresh_from_db()
        assert application.stage == 'rejected'
        assert application.rejected_reason == 'Not a fit'

        ApplicationService.move_stage(scope, application.pk, 'technical', from_stage='rejected')
        application.refresh_from_db()
        assert application.stage == 'technical'
        assert application.rejected_reason == ''
        assert (application.candidate_id, application.job_id) == (candidate_id, job_id)

    def test_rejecting_twice_logs_once(self, scope, django_capture_on_commit_callbacks, mailoutbox):
        CompanyUserFactory(company=scope.company, role='manager', user__email='lead@acme.example.com')
        application = ApplicationFactory(company=scope.company, stage='interview')

        ApplicationService.reject(scope, application.pk, reason='Not a fit')
        application.refresh_from_db()
        rejected_at = application.updated_at

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            ApplicationService.reject(scope, application.pk, reason='Still not a fit')

        application.refresh_from_db()
        assert application.updated_at == rejected_at
        assert application.rejected_reason == 'Not a fit'
        assert ActivityLog.objects.filter(action=ActivityLog.Action.APPLICATION_STAGE_CHANGED).count() == 1
        assert callbacks == []
        assert mailoutbox == []

    def test_stale_from_stage_conflicts(self, scope):
        application = ApplicationFactory(company=scope.company, stage='offer')

        with pytest.raises(StageConflictError):
            ApplicationService.move_stage(scope, application.pk, 'hired', from_stage='new')

        application.refresh_from_db()
        assert application.stage == 'offer'
        assert not ActivityLog.objects.exists()

    def test_unknown_stage(self, scope):
        application = ApplicationFactory(company=scope.company)

        with pytest.raises(InvalidStage):
            ApplicationService.move_stage(scope, application.pk, 'limbo')

    def test_stage_change_email_goes_to_other_managers(self, scope, django_capture_on_commit_callbacks, mailoutbox):
        CompanyUserFactory(company=scope.company, role='manager', user__email='lead@acme.example.com')
        application = ApplicationFactory(company=scope.company)

        with django_capture_on_commit_callbacks(execute=True):
            ApplicationService.move_stage(scope, application.pk, 'interview')

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ['lead@acme.example.com']
        assert 'Interview' in mailoutbox[0].subject

    def test_rate_and_note(self, scope):
        application = ApplicationFactory(company=scope.company)

        ApplicationService.rate(scope, application.pk, 4)
        ApplicationService.add_note(scope, application.pk, 'Strong portfolio')

        application.refresh_from_db()
        assert application.rating == 4
        assert application.notes[-1]['content'] == 'Strong portfolio'
        assert application.notes[-1]['type'] == 'comment'

        with pytest.raises(ValueError):
            ApplicationService.rate(scope, application.pk, 6)


@pytest.mark.django_db
class TestBoardService:

    def test_move_persists_and_keeps_order_in_session(self, scope, job):
        first = ApplicationFactory(company=scope.company, job=job)
        second = ApplicationFactory(company=scope.company, job=job)
        session = {}

        board = BoardService.load(scope, job, session)
        board = BoardService.move(scope, job, session, first.pk, 'new', 0, 'interview')

        assert board.columns['interview'] == [first.pk]
        assert Application.objects.get(pk=first.pk).stage == 'interview'
        assert BoardService.load(scope, job, session).columns['new'] == [second.pk]

    def test_failed_persistence_restores_board(self, scope, job, monkeypatch):
        first = ApplicationFactory(company=scope.company, job=job)
        second = ApplicationFactory(company=scope.company, job=job)
        session = {}
        before = BoardService.load(scope, job, session).snapshot()

        def broken(*args, **kwargs):
            raise RuntimeError('database unavailable')

        monkeypatch.setattr(ApplicationService, 'move_stage', broken)

        with pytest.raises(RuntimeError):
            BoardService.move(scope, job, session, first.pk, 'new', 0, 'offer')

        assert BoardService.load(scope, job, session).columns == before
        assert Application.objects.get(pk=second.pk).stage == 'new'

    def test_reorder_does_not_touch_database(self, scope, job):
        first = ApplicationFactory(company=scope.company, job=job)
        ApplicationFactory(company=scope.company, job=job)
        session = {}
        board = BoardService.load(scope, job, session)
        index = board.columns['new'].index(first.pk)

        BoardService.move(scope, job, session, first.pk, 'new', 1 - index, 'new')

        assert not ActivityLog.objects.filter(action=ActivityLog.Action.APPLICATION_STAGE_CHANGED).exists()

    def test_board_reconciles_with_other_sessions(self, scope, job):
        application = ApplicationFactory(company=scope.company, job=job)
        session = {}
        BoardService.load(scope, job, session)

        ApplicationService.move_stage(scope, application.pk, 'hired')

        assert BoardService.load(scope, job, session).columns['hired'] == [application.pk]

    def test_serialize(self, scope, job):
        application = ApplicationFactory(company=scope.company, job=job, stage='archived')
        board = BoardService.load(scope, job, {})

        data = BoardService.serialize(scope, job, board)

        new_column = data['stages'][0]
        assert new_column['stage'] == 'new'
        assert new_column['applications'][0]['candidate_id'] == application.candidate_id


@pytest.mark.django_db
class TestCandidatesAndTalentPool:

    def test_search(self, scope):
        ApplicationFactory(company=scope.company, candidate__name='Grace Hopper')
        ApplicationFactory(company=scope.company, candidate__name='Alan Turing')

        names = [c.name for c in CandidateService.queryset(scope, search='grace')]

        assert names == ['Grace Hopper']

    def test_add_to_pool_is_idempotent(self, scope):
        candidate = ApplicationFactory(company=scope.company).candidate

        TalentPoolService.add(scope, candidate.pk, notes='Great', tags=['go'])
        entry = TalentPoolService.add(scope, candidate.pk, tags=['go', 'rust'])

        assert entry.notes == 'Great'
        assert entry.tags == ['go', 'rust']
        assert TalentPoolService.queryset(scope).count() == 1

    def test_cannot_bookmark_unknown_candidate(self, scope):
        stranger = CandidateFactory()

        with pytest.raises(stranger.DoesNotExist):
            TalentPoolService.add(scope, stranger.pk)

    def test_remove(self, scope):
        candidate = ApplicationFactory(company=scope.company).candidate
        entry = TalentPoolService.add(scope, candidate.pk)

        TalentPoolService.remove(scope, entry.pk)

        assert not TalentPoolService.queryset(scope).exists()


@pytest.mark.django_db
class TestDashboardService:

    def test_stats(self, scope, job):
        JobFactory(company=scope.company, status='draft')
        ApplicationFactory(company=scope.company, job=job)
        ApplicationFactory(company=scope.company, job=job, stage='hired')

        assert DashboardService.stats(scope) == {
            'total_jobs': 2,
            'published_jobs': 1,
            'total_applications': 2,
            'hired': 1,
        }

    def test_jobs_overview_counts_applications(self, scope, job):
        ApplicationFactory(company=scope.company, job=job)

        overview = DashboardService.jobs_overview(scope)

        assert overview[0].application_count == 1
