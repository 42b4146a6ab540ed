from django.urls import path

from . import views

urlpatterns = [
    path('submit/', views.submit_order_view, name='submit_order'),
    path('api/orders/', views.OrderListView.as_view(), name='order_list_api'),
    path('api/ratings/', views.RatingListView.as_view(), name='rating_list_api'),
]
