from django.urls import path
from . import views

app_name = 'points'

urlpatterns = [
    path('settings/', views.loyalty_settings, name='settings'),
    path('redeem/validate/', views.validate_points_redemption, name='validate_redemption'),
    path('max-redeemable/', views.get_max_redeemable_points, name='max_redeemable'),
    path('transactions/', views.get_points_transactions, name='transactions'),
]
