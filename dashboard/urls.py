from django.urls import path

from . import views

urlpatterns = [
    path('', views.dashboard, name='dashboard'),

    path('menu-types/', views.manage_menu_types, name='manage_menu_types'),
    path('categories/', views.manage_categories, name='manage_categories'),
    path('translations/<str:entity>/<int:pk>/<str:language_code>/delete/',
         views.delete_translation, name='delete_translation'),

    path('items/add/', views.add_item, name='add_item'),
    path('items/<int:pk>/edit/', views.edit_item, name='edit_item'),
    path('items/<int:pk>/delete/', views.delete_item, name='delete_item'),
    path('images/cleanup/', views.cleanup_images, name='cleanup_images'),

    path('orders/', views.orders, name='orders'),
    path('orders/export/', views.orders_export, name='orders_export'),
    path('ratings/', views.ratings, name='ratings'),
]
