"""
ATS Services - job, application, candidate and talent pool operations.

Every function takes the caller's TenantScope and reads through
`for_company(scope.company)`, so a company can only ever touch its own rows.
Multi-row writes run in a single transaction.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from tenants.context import TenantScope
from tenants.exceptions import PermissionDenied, PlanLimitExceeded
from tenants.models import ActivityLog, Company, Plan
from tenants.services import AuditService

from .exceptions import InvalidStage, StageConflictError
from .models import Application, Candidate, Job, TalentPoolEntry
from .pipeline import STAGE_VALUES, BoardSessionStore, PipelineBoard

logger = logging.getLogger(__name__)


def _actor_name(scope: TenantScope) -> str:
    user = scope.user
    if user is None:
        return ''
    return user.get_full_name() or user.email


class JobService:
    """
    Service class for job postings.
    """

    @classmethod
    def queryset(cls, scope: TenantScope):
        return Job.objects.for_company(scope.company)

    @classmethod
    def get(cls, scope: TenantScope, job_id) -> Job:
        return cls.queryset(scope).get(pk=job_id)

    @classmethod
    def _apply_data(cls, job: Job, data: Dict[str, Any], locale: str):
        for field_name in Job.LOCALIZED_FIELDS:
            if field_name in data:
                values = dict(getattr(job, field_name) or {})
                values[locale] = data[field_name]
                setattr(job, field_name, values)
        for field_name in (
            'location', 'remote_type', 'employment_type', 'department',
            'salary_min', 'salary_max', 'salary_currency',
        ):
            if field_name in data:
                setattr(job, field_name, data[field_name])

    @classmethod
    @transaction.atomic
    def create(cls, scope: TenantScope, data: Dict[str, Any], locale: Optional[str] = None) -> Job:
        """
        Create a job in the scope's company.

        Raises:
            PlanLimitExceeded: The plan's open job limit is reached.
        """
        # Held until commit so concurrent creates count each other's jobs.
        Company.objects.select_for_update().get(pk=scope.company.pk)
        plan = scope.company.get_plan()
        open_jobs = cls.queryset(scope).exclude(status=Job.Status.CLOSED).count()
        if plan is not None and not Plan.within_limit(plan.max_jobs, open_jobs):
            raise PlanLimitExceeded(f'The {plan.name} plan allows {plan.max_jobs} open job(s).')

        job = Job(company=scope.company, created_by=scope.user)
        cls._apply_data(job, data, locale or settings.LANGUAGE_CODE)
        job.set_status(data.get('status') or Job.Status.DRAFT)
        job.save()

        AuditService.log(
            scope,
            ActivityLog.Action.JOB_PUBLISHED if job.is_published else ActivityLog.Action.JOB_CREATED,
            entity_type='job',
            entity_id=job.pk,
            metadata={'title': job.display_title, 'status': job.status},
        )
        logger.info(f"Job {job.pk} created with status {job.status}")
        return job

    @classmethod
    @transaction.atomic
    def update(cls, scope: TenantScope, job_id, data: Dict[str, Any], locale: Optional[str] = None) -> Job:
        job = cls.queryset(scope).select_for_update().get(pk=job_id)
        cls._apply_data(job, data, locale or settings.LANGUAGE_CODE)
        if data.get('status') and data['status'] != job.status:
            job.set_status(data['status'])
        job.save()

        AuditService.log(
            scope,
            ActivityLog.Action.JOB_UPDATED,
            entity_type='job',
            entity_id=job.pk,
            metadata={'title': job.display_title},
        )
        return job

    @classmethod
    @transaction.atomic
    def change_status(cls, scope: TenantScope, job_id, status: str) -> Job:
        if status not in Job.Status.values:
            raise ValueError(f"Unknown job status: {status}")

        job = cls.queryset(scope).select_for_update().get(pk=job_id)
        old_status = job.status
        job.set_status(status)
        job.save(update_fields=['status', 'published_at', 'updated_at'])

        AuditService.log(
            scope,
            ActivityLog.Action.JOB_PUBLISHED if job.is_published else ActivityLog.Action.JOB_STATUS_CHANGED,
            entity_type='job',
            entity_id=job.pk,
            metadata={'title': job.display_title, 'from_status': old_status, 'to_status': status},
        )
        return job

    @classmethod
    @transaction.atomic
    def delete(cls, scope: TenantScope, job_id) -> None:
        if not scope.can_manage:
            raise PermissionDenied()

        job = cls.queryset(scope).get(pk=job_id)
        AuditService.log(
            scope,
            ActivityLog.Action.JOB_DELETED,
            entity_type='job',
            entity_id=job.pk,
            metadata={'title': job.display_title},
        )
        job.delete()

    @classmethod
    def published_for_company(cls, company):
        return Job.objects.for_company(company).filter(status=Job.Status.PUBLISHED).order_by('department', '-published_at')


class ApplicationService:
    """
    Service class for applications and stage transitions.
    """

    @classmethod
    def queryset(cls, scope: TenantScope):
        return Application.objects.for_company(scope.company).select_related('candidate', 'job')

    @classmethod
    def get(cls, scope: TenantScope, application_id) -> Application:
        return cls.queryset(scope).get(pk=application_id)

    @classmethod
    def for_job(cls, scope: TenantScope, job: Job):
        return cls.queryset(scope).filter(job=job).order_by('-updated_at')

    @classmethod
    @transaction.atomic
    def move_stage(
        cls,
        scope: TenantScope,
        application_id,
        to_stage: str,
        from_stage: Optional[str] = None,
        rejected_reason: str = '',
    ) -> Application:
        """
        Persist a stage change together with its audit entry.

        When `from_stage` is given, the write only happens if the stored
        stage still matches it. Moving to the current stage changes nothing and
        writes no audit entry.

        Raises:
            InvalidStage: `to_stage` is not a pipeline stage.
            StageConflictError: Someone else moved the application first.
            Application.DoesNotExist: Not an application of this company.
        """
        if to_stage not in STAGE_VALUES:
            raise InvalidStage(to_stage)

        application = (
            Application.objects.for_company(scope.company)
            .select_for_update()
            .select_related('candidate', 'job')
            .get(pk=application_id)
        )
        current = PipelineBoard.column_for(application.stage)
        if from_stage is not None and current != from_stage:
            raise StageConflictError(application.pk, expected=from_stage, actual=application.stage)

        old_stage = application.stage
        if old_stage == to_stage:
            return application

        application.stage = to_stage
        if to_stage == Application.Stage.REJECTED:
            application.rejected_reason = rejected_reason or application.rejected_reason
        else:
            application.rejected_reason = ''
        application.updated_at = timezone.now()
        application.save(update_fields=['stage', 'rejected_reason', 'updated_at'])

        AuditService.log(
            scope,
            ActivityLog.Action.APPLICATION_STAGE_CHANGED,
            entity_type='application',
            entity_id=application.pk,
            metadata={
                'from_stage': old_stage,
                'to_stage': to_stage,
                'candidate_name': application.candidate.name,
                'job_id': application.job_id,
            },
        )

        from notifications.tasks import send_stage_changed_email

        transaction.on_commit(
            lambda: send_stage_changed_email.delay(application.pk, old_stage, to_stage, scope.user.pk if scope.user else None)
        )

        logger.info(f"Application {application.pk} moved {old_stage} -> {to_stage}")
        return application

    @classmethod
    def reject(cls, scope: TenantScope, application_id, reason: str = '') -> Application:
        return cls.move_stage(scope, application_id, Application.Stage.REJECTED, rejected_reason=reason)

    @classmethod
    @transaction.atomic
    def rate(cls, scope: TenantScope, application_id, rating: Optional[int]) -> Application:
        if rating is not None and not 0 <= rating <= 5:
            raise ValueError('Rating must be between 0 and 5.')

        application = cls.queryset(scope).select_for_update().get(pk=application_id)
        application.rating = rating
        application.save(update_fields=['rating', 'updated_at'])
        AuditService.log(
            scope,
            ActivityLog.Action.APPLICATION_RATED,
            entity_type='application',
            entity_id=application.pk,
            metadata={'rating': rating},
        )
        return application

    @classmethod
    @transaction.atomic
    def add_note(cls, scope: TenantScope, application_id, content: str) -> Application:
        application = cls.queryset(scope).select_for_update().get(pk=application_id)
        application.add_note(content, Application.NoteType.COMMENT, author=_actor_name(scope))
        application.save(update_fields=['notes', 'updated_at'])
        AuditService.log(
            scope,
            ActivityLog.Action.APPLICATION_NOTE_ADDED,
            entity_type='application',
            entity_id=application.pk,
        )
        return application


class BoardService:
    """
    Loads the session's pipeline board for a job and applies moves to it.
    """

    @classmethod
    def load(cls, scope: TenantScope, job: Job, session) -> PipelineBoard:
        """Return the session board reconciled against the database."""
        store = BoardSessionStore(session)
        applications = list(ApplicationService.for_job(scope, job))
        board = store.get(job.pk)
        if board is None:
            board = PipelineBoard.load(job.pk, applications)
        else:
            board.reconcile(applications)
        store.save(board)
        return board

    @classmethod
    def move(cls, scope: TenantScope, job: Job, session, application_id: int,
             from_stage: str, to_index: int, to_stage: str) -> PipelineBoard:
        """
        Apply a move to the board, then persist it.

        On any persistence failure the board is restored to its pre-move
        state and the error re-raised.
        """
        store = BoardSessionStore(session)
        board = cls.load(scope, job, session)
        move = board.move(application_id, from_stage, to_index, to_stage)
        if move is None:
            return board

        if move.changes_stage:
            try:
                ApplicationService.move_stage(scope, application_id, to_stage, from_stage=from_stage)
            except Exception:
                logger.exception(f"Persisting board move for application {application_id} failed")
                board.rollback(move)
                store.save(board)
                raise

        store.save(board)
        return board

    @classmethod
    def serialize(cls, scope: TenantScope, job: Job, board: PipelineBoard) -> dict:
        applications = {app.pk: app for app in ApplicationService.for_job(scope, job)}
        return {
            'job_id': job.pk,
            'stages': [
                {
                    'stage': stage,
                    'label': str(Application.Stage(stage).label),
                    'applications': [
                        {
                            'id': app_id,
                            'candidate_id': applications[app_id].candidate_id,
                            'candidate_name': applications[app_id].candidate.name,
                            'candidate_email': applications[app_id].candidate.email,
                            'rating': applications[app_id].rating,
                            'updated_at': applications[app_id].updated_at.isoformat(),
                        }
                        for app_id in ids
                        if app_id in applications
                    ],
                }
                for stage, ids in board.columns.items()
            ],
        }


class CandidateService:
    """
    Candidates as seen by one company.
    """

    @classmethod
    def queryset(cls, scope: TenantScope, search: str = ''):
        qs = Candidate.objects.visible_to(scope.company)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search))
        return qs.order_by('name')

    @classmethod
    def detail(cls, scope: TenantScope, candidate_id) -> Dict[str, Any]:
        """
        Candidate with this company's applications and talent pool entry.

        Raises:
            Candidate.DoesNotExist: Unknown to this company.
        """
        candidate = cls.queryset(scope).get(pk=candidate_id)
        return {
            'candidate': candidate,
            'applications': list(
                ApplicationService.queryset(scope).filter(candidate=candidate).order_by('-created_at')
            ),
            'talent_pool_entry': TalentPoolEntry.objects.for_company(scope.company).filter(candidate=candidate).first(),
        }


class TalentPoolService:
    """
    Service class for the company talent pool.
    """

    @classmethod
    def queryset(cls, scope: TenantScope, search: str = ''):
        qs = TalentPoolEntry.objects.for_company(scope.company).select_related('candidate', 'added_by')
        if search:
            qs = qs.filter(
                Q(candidate__name__icontains=search)
                | Q(candidate__email__icontains=search)
                | Q(notes__icontains=search)
            )
        return qs

    @classmethod
    @transaction.atomic
    def add(cls, scope: TenantScope, candidate_id, notes: str = '', tags=None) -> TalentPoolEntry:
        candidate = CandidateService.queryset(scope).get(pk=candidate_id)
        entry, created = TalentPoolEntry.objects.get_or_create(
            company=scope.company,
            candidate=candidate,
            defaults={'notes': notes, 'tags': list(tags or []), 'added_by': scope.user},
        )
        if not created:
            entry.notes = notes or entry.notes
            entry.tags = list(tags) if tags is not None else entry.tags
            entry.save(update_fields=['notes', 'tags', 'updated_at'])
        else:
            AuditService.log(
                scope,
                ActivityLog.Action.TALENT_POOL_ADDED,
                entity_type='candidate',
                entity_id=candidate.pk,
                metadata={'candidate_name': candidate.name},
            )
        return entry

    @classmethod
    @transaction.atomic
    def remove(cls, scope: TenantScope, entry_id) -> None:
        entry = cls.queryset(scope).get(pk=entry_id)
        AuditService.log(
            scope,
            ActivityLog.Action.TALENT_POOL_REMOVED,
            entity_type='candidate',
            entity_id=entry.candidate_id,
            metadata={'candidate_name': entry.candidate.name},
        )
        entry.delete()


class DashboardService:
    """
    Numbers and feeds for the company dashboard.
    """

    @classmethod
    def stats(cls, scope: TenantScope) -> Dict[str, int]:
        jobs = Job.objects.for_company(scope.company).aggregate(
            total=Count('id'),
            published=Count('id', filter=Q(status=Job.Status.PUBLISHED)),
        )
        applications = Application.objects.for_company(scope.company).aggregate(
            total=Count('id'),
            hired=Count('id', filter=Q(stage=Application.Stage.HIRED)),
        )
        return {
            'total_jobs': jobs['total'],
            'published_jobs': jobs['published'],
            'total_applications': applications['total'],
            'hired': applications['hired'],
        }

    @classmethod
    def recent_applications(cls, scope: TenantScope, limit: int = 5):
        try:
            return list(ApplicationService.queryset(scope).order_by('-created_at')[:limit])
        except Exception as e:
            logger.error(f"Failed to load recent applications: {e}")
            return []

    @classmethod
    def jobs_overview(cls, scope: TenantScope, limit: int = 5):
        try:
            return list(
                Job.objects.for_company(scope.company)
                .annotate(application_count=Count('applications'))
                .order_by('-created_at')[:limit]
            )
        except Exception as e:
            logger.error(f"Failed to load jobs overview: {e}")
            return []
