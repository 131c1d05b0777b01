from django.urls import include, path
from . import views

urlpatterns = [
    path('health', views.health, name='health'),
    path('api', views.api_index, name='api_index'),
    path('api/appointments/', include('appointments.urls')),
]
