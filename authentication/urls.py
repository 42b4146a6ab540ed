from django.urls import path

from . import views

urlpatterns = [
    # =============== AUTHENTICATION ===============
    path('login/', views.signin, name='login'),
    path('logout/', views.signout, name='logout'),

    # =============== SYSTEM ===============
    path('health/', views.health_check, name='health_check'),
]
