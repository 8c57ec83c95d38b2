from django.urls import path
from . import views

urlpatterns = [
    path('status/', views.MembershipStatusView.as_view(), name='membership-status'),
    path('tiers/', views.TierListView.as_view(), name='membership-tiers'),
    path('tier-history/', views.TierChangeHistoryView.as_view(), name='tier-history'),
]
