"""
ATS Forms - input validation for the recruiter panel.
"""

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from .models import Job
from .pipeline import STAGE_VALUES

STAGE_CHOICES = [(stage, stage) for stage in STAGE_VALUES]


def locale_choices():
    return [(code, code) for code in getattr(settings, 'JOB_LOCALES', (settings.LANGUAGE_CODE,))]


class JobForm(forms.Form):
    """Create/edit a job; text fields are saved under `locale`."""

    locale = forms.ChoiceField(choices=locale_choices, required=False)
    title = forms.CharField(max_length=200)
    description = forms.CharField(widget=forms.Textarea(attrs={'rows': 6}), required=False)
    requirements = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}), required=False)
    benefits = forms.CharField(widget=forms.Textarea(attrs={'rows': 4}), required=False)
    location = forms.CharField(max_length=200, required=False)
    remote_type = forms.ChoiceField(choices=Job.RemoteType.choices, initial=Job.RemoteType.ONSITE)
    employment_type = forms.ChoiceField(choices=Job.EmploymentType.choices, initial=Job.EmploymentType.FULL_TIME)
    department = forms.CharField(max_length=100, required=False)
    salary_min = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    salary_max = forms.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    salary_currency = forms.CharField(max_length=3, initial='BRL', required=False)
    status = forms.ChoiceField(
        choices=[(Job.Status.DRAFT, _('Save as draft')), (Job.Status.PUBLISHED, _('Publish'))],
        initial=Job.Status.DRAFT,
    )

    @classmethod
    def initial_for(cls, job: Job, locale=None):
        initial = {field: job.localized(field, locale) for field in Job.LOCALIZED_FIELDS}
        initial.update({
            'locale': locale or settings.LANGUAGE_CODE,
            'location': job.location,
            'remote_type': job.remote_type,
            'employment_type': job.employment_type,
            'department': job.department,
            'salary_min': job.salary_min,
            'salary_max': job.salary_max,
            'salary_currency': job.salary_currency,
            'status': job.status if job.status in (Job.Status.DRAFT, Job.Status.PUBLISHED) else Job.Status.DRAFT,
        })
        return initial

    def clean_title(self):
        title = self.cleaned_data.get('title', '').strip()
        if len(title) < 3:
            raise ValidationError(_('Title must be at least 3 characters.'))
        return title

    def clean_salary_currency(self):
        return (self.cleaned_data.get('salary_currency') or 'BRL').upper()

    def clean(self):
        cleaned_data = super().clean()
        salary_min = cleaned_data.get('salary_min')
        salary_max = cleaned_data.get('salary_max')

        if salary_min is not None and salary_max is not None and salary_min > salary_max:
            raise ValidationError({
                'salary_max': _('Maximum salary must be greater than minimum salary.')
            })
        return cleaned_data


class JobStatusForm(forms.Form):
    status = forms.ChoiceField(choices=Job.Status.choices)


class BoardMoveForm(forms.Form):
    application_id = forms.IntegerField(min_value=1)
    from_stage = forms.ChoiceField(choices=STAGE_CHOICES)
    to_stage = forms.ChoiceField(choices=STAGE_CHOICES)
    to_index = forms.IntegerField(min_value=0)


class RatingForm(forms.Form):
    rating = forms.IntegerField(min_value=0, max_value=5, required=False)


class NoteForm(forms.Form):
    content = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}), max_length=5000)


class RejectForm(forms.Form):
    reason = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}), required=False, max_length=2000)


class TalentPoolForm(forms.Form):
    candidate_id = forms.IntegerField(min_value=1)
    notes = forms.CharField(widget=forms.Textarea(attrs={'rows': 3}), required=False)
    tags = forms.CharField(required=False, help_text=_('Comma separated'))

    def clean_tags(self):
        raw = self.cleaned_data.get('tags', '')
        return [tag.strip() for tag in raw.split(',') if tag.strip()]
