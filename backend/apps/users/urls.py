from django.urls import path

from .views import (
    UserAddressDetailView,
    UserAddressListView,
    UserDefaultAddressView,
    UserProfileView,
)

urlpatterns = [
    path("me/", UserProfileView.as_view(), name="users-me"),
    path("me/addresses/", UserAddressListView.as_view(), name="users-addresses"),
    path(
        "me/addresses/<int:address_id>/",
        UserAddressDetailView.as_view(),
        name="users-address-detail",
    ),
    path(
        "me/addresses/<int:address_id>/default/",
        UserDefaultAddressView.as_view(),
        name="users-address-default",
    ),
]
