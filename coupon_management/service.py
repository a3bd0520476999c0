"""Coupon catalog, discovery and application.

A BxGy coupon whose discount cannot be priced is listed by
``find_applicable_coupons`` with a discount of 0, but ``apply_coupon`` rejects it.
"""
import logging
from datetime import date
from typing import List, Optional

from .errors import CouponNotApplicable, CouponNotFound
from .logic import (
    bxgy_is_applicable,
    cart_quantities,
    compute_cart_value,
    compute_discount,
    is_available,
)
from .models import (
    ApplicableCoupon,
    Cart,
    Coupon,
    CouponApplicationResult,
    CouponResponse,
    CouponType,
    CreateRequest,
)
from .storage import CouponStore

logger = logging.getLogger(__name__)


def create_coupon(request: CreateRequest, store: CouponStore) -> Coupon:
    coupon = request.to_coupon()
    logger.info("Creating %s coupon with code: %s", coupon.type, coupon.code)
    return store.save(coupon)


def to_response(coupon: Coupon) -> CouponResponse:
    # Variant fields not declared on the coupon stay None.
    return CouponResponse(**coupon.model_dump())


def list_coupons(store: CouponStore) -> List[CouponResponse]:
    return [
        to_response(coupon)
        for coupon_type in CouponType
        for coupon in store.find_all(coupon_type)
    ]


def get_coupon(coupon_id: int, store: CouponStore) -> Coupon:
    coupon = store.find_any(coupon_id)
    if coupon is None:
        raise CouponNotFound(f"Coupon not found with id: {coupon_id}")
    return coupon


def find_applicable_coupons(
    cart: Cart,
    store: CouponStore,
    today: Optional[date] = None,
) -> List[ApplicableCoupon]:
    if today is None:
        today = date.today()
    logger.info("Finding applicable coupons for cart with %d items", len(cart.items))

    quantities = cart_quantities(cart)
    applicable: List[ApplicableCoupon] = []

    for coupon_type in CouponType:
        for coupon in store.find_all_active(coupon_type, today):
            discount = compute_discount(coupon, cart)

            if coupon_type == CouponType.BXGY:
                # listed even when the discount cannot be priced
                eligible = bxgy_is_applicable(coupon, quantities)
            else:
                eligible = discount > 0

            if eligible:
                applicable.append(ApplicableCoupon(
                    couponId=coupon.id,
                    code=coupon.code,
                    type=coupon_type,
                    description=coupon.description,
                    discountAmount=discount,
                ))

    logger.info("Found %d applicable coupons", len(applicable))
    return applicable


def apply_coupon(
    coupon_id: int,
    cart: Cart,
    store: CouponStore,
    today: Optional[date] = None,
) -> CouponApplicationResult:
    if today is None:
        today = date.today()
    logger.info("Applying coupon with id: %s to cart", coupon_id)

    coupon = get_coupon(coupon_id, store)

    if not is_available(coupon, today):
        raise CouponNotApplicable("Coupon is inactive or expired")

    discount = compute_discount(coupon, cart)
    if discount == 0:
        raise CouponNotApplicable("Coupon is not applicable to this cart")

    original_total = compute_cart_value(cart)
    final_total = max(0.0, original_total - discount)

    logger.info(
        "Coupon applied. Original: %s, Discount: %s, Final: %s",
        original_total, discount, final_total,
    )
    return CouponApplicationResult(
        updatedItems=list(cart.items),
        originalTotal=original_total,
        discountAmount=discount,
        finalTotal=final_total,
        appliedCouponCode=coupon.code,
        message="Coupon applied successfully",
    )
