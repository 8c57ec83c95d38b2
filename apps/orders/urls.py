from django.urls import path
from . import views

urlpatterns = [
    path('', views.OrderListCreateView.as_view(), name='orders'),
    path('quote/', views.OrderQuoteView.as_view(), name='order-quote'),
    path('<int:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<int:pk>/complete/', views.CompleteOrderView.as_view(), name='order-complete'),
]
