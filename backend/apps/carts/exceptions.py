from apps.api.exceptions import ApplicationError


class CartNotAllowedError(ApplicationError):
    """Staff and admin accounts cannot own carts."""

    default_code = "FORBIDDEN"


class ResellerPriceError(ApplicationError):
    """Reseller price must be above the base selling price."""

    default_code = "VALIDATION_ERROR"
