#api/users/urls.py
from django.urls import path
from .views import PerfilOdontologoView

app_name = 'users'
urlpatterns = [
    path('perfil-odontologo/', PerfilOdontologoView.as_view(), name='perfil-odontologo'),
]
