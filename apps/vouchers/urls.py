from django.urls import path
from . import views

urlpatterns = [
    path('check/', views.VoucherCheckView.as_view(), name='voucher-check'),
    path('rewards/', views.RewardListView.as_view(), name='voucher-rewards'),
    path('rewards/claim/', views.RewardClaimView.as_view(), name='voucher-reward-claim'),
    path('mine/', views.MyVoucherListView.as_view(), name='my-vouchers'),
]
