from django.urls import path
from . import views

app_name = 'appointments'

urlpatterns = [
    path('', views.appointment_collection, name='list'),
    path('availability/<str:counselor_id>', views.availability, name='availability'),
    path('<str:appointment_id>', views.appointment_detail, name='detail'),
]
