"""
Careers URL configuration, mounted under /careers/.
"""

from django.urls import path, re_path

from . import views

app_name = 'careers'

urlpatterns = [
    re_path(r'^(?P<slug>[a-z0-9-]+)/?$', views.CareerPageView.as_view(), name='index'),
    path('<slug:slug>/jobs/<int:job_id>/', views.JobPublicDetailView.as_view(), name='job_detail'),
    path('<slug:slug>/jobs/<int:job_id>/apply/', views.ApplyView.as_view(), name='apply'),
    path('<slug:slug>/jobs/<int:job_id>/success/', views.ApplySuccessView.as_view(), name='apply_success'),
]
