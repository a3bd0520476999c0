class CouponError(Exception):
    """Base class for coupon domain errors.

    Each subclass maps to one HTTP status in ``main.py``; anything that is not
    a ``CouponError`` is reported as an unexpected server error.
    """
    status_code = 500
    title = "Coupon Error"


class CouponNotFound(CouponError):
    """Raised when no coupon of any type has the requested id."""
    status_code = 404
    title = "Coupon Not Found"


class CouponNotApplicable(CouponError):
    """Raised when a coupon is inactive, expired, or yields no discount for the cart."""
    status_code = 400
    title = "Coupon Not Applicable"


class DuplicateCouponCode(CouponError):
    """Raised when saving a coupon whose code is already taken by another coupon."""
    status_code = 409
    title = "Duplicate Coupon Code"
