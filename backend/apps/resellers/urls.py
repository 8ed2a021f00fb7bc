from django.urls import path

from .views import ResellerDashboardView, ResellerProfileView

urlpatterns = [
    path("me/", ResellerProfileView.as_view(), name="reseller-profile"),
    path("me/dashboard/", ResellerDashboardView.as_view(), name="reseller-dashboard"),
]
