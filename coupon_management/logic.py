import math
from datetime import date
from typing import Dict, Optional

from .models import BxGyCoupon, Cart, CartWiseCoupon, Coupon, CouponType, ProductWiseCoupon


# ---------------------------
# Cart helpers
# ---------------------------

def compute_cart_value(cart: Cart) -> float:
    return sum(item.price * item.quantity for item in cart.items)


def cart_quantities(cart: Cart) -> Dict[int, int]:
    quantities: Dict[int, int] = {}
    for item in cart.items:
        quantities[item.productId] = quantities.get(item.productId, 0) + item.quantity
    return quantities


def cart_prices(cart: Cart) -> Dict[int, float]:
    # first occurrence of a product wins
    prices: Dict[int, float] = {}
    for item in cart.items:
        prices.setdefault(item.productId, item.price)
    return prices


def is_available(coupon: Coupon, today: Optional[date] = None) -> bool:
    if today is None:
        today = date.today()
    return coupon.isActive and not coupon.expirationDate < today


# ---------------------------
# Discount rules
# ---------------------------

def cart_wise_discount(coupon: CartWiseCoupon, cart_total: float) -> float:
    if cart_total >= coupon.threshold:
        return cart_total * (coupon.discountPercentage / 100.0)
    return 0.0


def product_wise_discount(
    coupon: ProductWiseCoupon,
    product_id: Optional[int],
    quantity: int,
    unit_price: float,
) -> float:
    if product_id is None:
        raise ValueError("Product id is required")
    if product_id == coupon.productId:
        return quantity * unit_price * (coupon.discountPercentage / 100.0)
    return 0.0


def bxgy_is_applicable(coupon: BxGyCoupon, cart_items: Optional[Dict[int, int]]) -> bool:
    """Every buy product must be in the cart in at least the required quantity."""
    if cart_items is None or coupon.buyProducts is None or coupon.getProducts is None:
        return False

    for product_id, required_qty in coupon.buyProducts.items():
        if cart_items.get(product_id, 0) < required_qty:
            return False
    return True


def bxgy_applicable_times(coupon: BxGyCoupon, cart_items: Optional[Dict[int, int]]) -> int:
    if not bxgy_is_applicable(coupon, cart_items):
        return 0

    times = math.inf
    for product_id, required_qty in coupon.buyProducts.items():
        times = min(times, cart_items.get(product_id, 0) // required_qty)

    return int(min(times, coupon.repetitionLimit))


def bxgy_discount(
    coupon: BxGyCoupon,
    cart_items: Optional[Dict[int, int]],
    product_prices: Optional[Dict[int, float]],
) -> float:
    """
    The price of the free products is not known here, so each free unit is
    valued at the cheapest priced buy product. Buy products that are missing
    from product_prices or priced at 0 are ignored; if none is left the
    discount is 0.
    """
    if not bxgy_is_applicable(coupon, cart_items):
        return 0.0

    product_prices = product_prices or {}
    buy_prices = [
        product_prices.get(product_id, 0.0)
        for product_id in coupon.buyProducts
        if product_prices.get(product_id, 0.0) > 0.0
    ]
    if not buy_prices:
        return 0.0

    applicable_times = bxgy_applicable_times(coupon, cart_items)
    total_free_qty = sum(coupon.getProducts.values())
    return min(buy_prices) * total_free_qty * applicable_times


def compute_discount(coupon: Coupon, cart: Cart) -> float:
    coupon_type = CouponType(coupon.type)
    if coupon_type == CouponType.CART_WISE:
        return cart_wise_discount(coupon, compute_cart_value(cart))
    elif coupon_type == CouponType.PRODUCT_WISE:
        return sum(
            product_wise_discount(coupon, item.productId, item.quantity, item.price)
            for item in cart.items
            if item.productId == coupon.productId
        )
    elif coupon_type == CouponType.BXGY:
        return bxgy_discount(coupon, cart_quantities(cart), cart_prices(cart))
    raise ValueError(f"Unknown coupon type: {coupon.type}")
