from django.urls import path

from . import views

urlpatterns = [
    path('', views.language_select, name='language_select'),
    path('location/', views.location_select, name='location_select'),
    path('menu/', views.menu_page, name='menu_page'),
    path('rating/', views.rating, name='rating'),
]
