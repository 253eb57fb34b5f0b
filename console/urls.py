from django.urls import path

from . import views

app_name = 'console'

urlpatterns = [
    path('', views.ConsoleDashboardView.as_view(), name='dashboard'),
    path('companies/', views.CompanyListView.as_view(), name='companies'),
]
