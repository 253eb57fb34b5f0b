"""
Tenants URL configuration.

`urlpatterns` is mounted under /app/settings/ (namespace 'tenants');
`auth_urlpatterns` and `onboarding_urlpatterns` are included at the root.
"""

from django.urls import path

from . import views

app_name = 'tenants'

urlpatterns = [
    path('', views.CompanySettingsView.as_view(), name='settings'),
    path('career-page/', views.CareerPageSettingsView.as_view(), name='career_page'),
    path('team/', views.TeamView.as_view(), name='team'),
    path('team/<int:pk>/resend/', views.TeamMemberActionView.as_view(action='resend'), name='team_resend'),
    path('team/<int:pk>/remove/', views.TeamMemberActionView.as_view(action='remove'), name='team_remove'),
]

auth_urlpatterns = [
    path('auth/login', views.MiniatsLoginView.as_view(), name='login'),
    path('auth/logout', views.MiniatsLogoutView.as_view(), name='logout'),
    path('auth/signup', views.SignupView.as_view(), name='signup'),
    path('auth/invite/<str:token>/', views.InviteAcceptView.as_view(), name='invite_accept'),
]

onboarding_urlpatterns = [
    path('onboarding/', views.OnboardingCompanyView.as_view(), name='onboarding'),
    path('onboarding/job/', views.OnboardingJobView.as_view(), name='onboarding_job'),
    path('onboarding/career-page/', views.OnboardingCareerPageView.as_view(), name='onboarding_career_page'),
]
