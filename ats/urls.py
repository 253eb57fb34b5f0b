"""
ATS URL configuration, mounted under /app/.
"""

from django.urls import path
from django.views.generic import RedirectView

from . import views

app_name = 'ats'

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='ats:dashboard'), name='home'),
    path('dashboard/', views.DashboardView.as_view(), name='dashboard'),

    path('jobs/', views.JobListView.as_view(), name='job_list'),
    path('jobs/new/', views.JobCreateView.as_view(), name='job_create'),
    path('jobs/<int:pk>/', views.JobDetailView.as_view(), name='job_detail'),
    path('jobs/<int:pk>/edit/', views.JobUpdateView.as_view(), name='job_update'),
    path('jobs/<int:pk>/status/', views.JobStatusView.as_view(), name='job_status'),
    path('jobs/<int:pk>/delete/', views.JobDeleteView.as_view(), name='job_delete'),
    path('jobs/<int:pk>/board/', views.BoardView.as_view(), name='job_board'),
    path('jobs/<int:pk>/board/move/', views.BoardMoveView.as_view(), name='job_board_move'),

    path('candidates/', views.CandidateListView.as_view(), name='candidate_list'),
    path('candidates/<int:pk>/', views.CandidateDetailView.as_view(), name='candidate_detail'),
    path('applications/<int:pk>/rating/', views.ApplicationRateView.as_view(), name='application_rate'),
    path('applications/<int:pk>/notes/', views.ApplicationNoteView.as_view(), name='application_note'),
    path('applications/<int:pk>/reject/', views.ApplicationRejectView.as_view(), name='application_reject'),

    path('talent-pool/', views.TalentPoolView.as_view(), name='talent_pool'),
    path('talent-pool/add/', views.TalentPoolAddView.as_view(), name='talent_pool_add'),
    path('talent-pool/<int:pk>/remove/', views.TalentPoolRemoveView.as_view(), name='talent_pool_remove'),
]
