from django.urls import path

from .views import (
    AvailableCouponListView,
    CouponDetailView,
    CouponListView,
    ReferralInviteView,
)

urlpatterns = [
    path("", CouponListView.as_view(), name="coupons-list"),
    path("available/", AvailableCouponListView.as_view(), name="coupons-available"),
    path("referral/", ReferralInviteView.as_view(), name="coupons-referral"),
    path("<int:coupon_id>/", CouponDetailView.as_view(), name="coupons-detail"),
]
