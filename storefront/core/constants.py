"""Shared constants for Storefront."""

# Role sentinels stored on the user document
CUSTOMER_ROLE = 0
ADMIN_ROLE = 1

# Default order status for freshly placed orders
DEFAULT_ORDER_STATUS = "Not Process"

# Projection used wherever product listings must not carry the photo bytes
WITHOUT_PHOTO = "-photo"

# Fields that never leave the service in a user payload
PRIVATE_USER_FIELDS = frozenset({"password", "answer"})

# Auth gate messages
SIGN_IN_REQUIRED = "Sign in required"
UNAUTHORIZED_ACCESS = "UnAuthorized Access"
ADMIN_CHECK_FAILED = "Error in admin middleware"

PHOTO_TOO_LARGE = "photo is Required and should be less then 1mb"
