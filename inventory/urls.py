from django.urls import path

from . import views

urlpatterns = [
    path('menu-api', views.menu_api, name='menu_api'),
    path('api/languages/', views.LanguageListView.as_view(), name='language_list'),
    path('api/admin/missing-images/', views.missing_images, name='missing_images_api'),
]
