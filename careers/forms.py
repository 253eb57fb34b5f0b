"""
Careers Forms - the public application form.
"""

from django import forms
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from core.validators import FileValidator


class PublicApplicationForm(forms.Form):
    """
    Public-facing job application form.
    Used by candidates applying through a company's career page.
    """

    name = forms.CharField(max_length=200, min_length=2)
    email = forms.EmailField()
    phone = forms.CharField(max_length=30, required=False)
    linkedin_url = forms.URLField(required=False)
    portfolio_url = forms.URLField(required=False)
    location = forms.CharField(max_length=200, required=False)
    message = forms.CharField(widget=forms.Textarea(attrs={'rows': 6}), required=False, max_length=5000)
    resume = forms.FileField(
        validators=[FileValidator('resume')],
        help_text=_('Accepted formats: PDF, DOC, DOCX. Max 5MB.'),
        error_messages={'required': _('Please attach your resume.')},
        widget=forms.ClearableFileInput(attrs={'accept': '.pdf,.doc,.docx'}),
    )

    # Hidden honeypot field for spam detection
    website = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={
            'style': 'display: none;',
            'tabindex': '-1',
            'autocomplete': 'off',
        }),
    )

    def clean_name(self):
        return self.cleaned_data['name'].strip()

    def clean_email(self):
        return self.cleaned_data['email'].strip().lower()

    def clean_website(self):
        """Detect honeypot spam."""
        website = self.cleaned_data.get('website')
        if website:
            raise ValidationError(_('Invalid submission.'))
        return website
