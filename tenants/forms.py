"""
Tenants Forms - signup, onboarding, company settings and team invites.
"""

from django import forms
from django.contrib.auth import get_user_model, password_validation
from django.contrib.auth.forms import AuthenticationForm
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from core.validators import FileValidator

from .models import Company, CompanyUser, slug_validator

User = get_user_model()

RESERVED_SLUGS = {'app', 'admin', 'www', 'api', 'static', 'media', 'auth'}


class EmailAuthenticationForm(AuthenticationForm):
    """Login form; accounts use their email address as username."""

    username = forms.EmailField(label=_('Email'), widget=forms.EmailInput(attrs={'autofocus': True}))

    def clean_username(self):
        return self.cleaned_data['username'].strip().lower()


class SignupForm(forms.Form):
    name = forms.CharField(max_length=150, min_length=2)
    email = forms.EmailField()
    password = forms.CharField(widget=forms.PasswordInput, min_length=8)

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError(_('An account with this email already exists.'))
        return email

    def clean_password(self):
        password = self.cleaned_data['password']
        password_validation.validate_password(password)
        return password

    def save(self):
        first_name, _sep, last_name = self.cleaned_data['name'].strip().partition(' ')
        return User.objects.create_user(
            username=self.cleaned_data['email'],
            email=self.cleaned_data['email'],
            password=self.cleaned_data['password'],
            first_name=first_name,
            last_name=last_name,
        )


class InviteAcceptForm(SignupForm):
    """Signup for an invited email; the address comes from the invitation."""

    def __init__(self, *args, **kwargs):
        self.invited_email = kwargs.pop('email')
        super().__init__(*args, **kwargs)
        del self.fields['email']

    def clean(self):
        cleaned_data = super().clean()
        if User.objects.filter(email__iexact=self.invited_email).exists():
            raise ValidationError(_('An account with this email already exists. Log in to accept.'))
        cleaned_data['email'] = self.invited_email
        return cleaned_data


class CompanyOnboardingForm(forms.ModelForm):
    """First onboarding step: the company itself."""

    class Meta:
        model = Company
        fields = ['name', 'slug', 'industry', 'size', 'website']

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if len(name) < 2:
            raise ValidationError(_('Company name must be at least 2 characters.'))
        return name

    def clean_slug(self):
        slug = self.cleaned_data.get('slug', '').strip().lower()
        slug_validator(slug)
        if slug in RESERVED_SLUGS:
            raise ValidationError(_('This address is reserved.'))
        if Company.objects.filter(slug=slug).exists():
            raise ValidationError(_('This address is already taken.'))
        return slug


class CompanySettingsForm(forms.ModelForm):
    logo = forms.FileField(required=False, validators=[FileValidator('logo')])

    class Meta:
        model = Company
        fields = ['name', 'website', 'industry', 'size', 'description']
        widgets = {
            'description': forms.Textarea(attrs={'rows': 4}),
        }


class CareerPageForm(forms.Form):
    headline = forms.CharField(max_length=200, required=False)
    description = forms.CharField(widget=forms.Textarea, required=False)
    custom_css = forms.CharField(widget=forms.Textarea, required=False)
    show_salary = forms.BooleanField(required=False)
    show_company_info = forms.BooleanField(required=False)

    def clean_custom_css(self):
        css = self.cleaned_data.get('custom_css', '')
        # Rendered inside a <style> tag on the public page.
        if '</style' in css.lower() or '<script' in css.lower():
            raise ValidationError(_('Custom CSS may not contain HTML tags.'))
        return css


class TeamInviteForm(forms.Form):
    email = forms.EmailField()
    role = forms.ChoiceField(choices=CompanyUser.Role.choices, initial=CompanyUser.Role.MEMBER)
