import itertools
import logging
import threading
from datetime import date
from typing import Dict, List, Optional

from .errors import DuplicateCouponCode
from .models import Coupon, CouponType

logger = logging.getLogger(__name__)


class CouponStore:
    """In-memory coupon storage.

    Keeps one collection per coupon type. All collections draw ids from a
    single sequence, so an id identifies at most one coupon across the store.
    Codes are unique across all collections.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        # type -> id -> Coupon
        self._coupons: Dict[CouponType, Dict[int, Coupon]] = {t: {} for t in CouponType}

    def save(self, coupon: Coupon) -> Coupon:
        """Insert or update a coupon.

        An id counts as an update only when this store issued it to a coupon
        of the same type; any other id is replaced by a fresh one.
        """
        coupon_type = CouponType(coupon.type)
        with self._lock:
            if coupon.id is None or coupon.id not in self._coupons[coupon_type]:
                coupon = coupon.model_copy(update={"id": next(self._ids)})

            existing = self._find_by_code(coupon.code)
            if existing is not None and existing.id != coupon.id:
                raise DuplicateCouponCode(f"Coupon code already exists: {coupon.code}")

            self._coupons[coupon_type][coupon.id] = coupon.model_copy(deep=True)

        logger.debug("Saved %s coupon %s with id %s", coupon_type.value, coupon.code, coupon.id)
        return coupon.model_copy(deep=True)

    def find_by_id(self, coupon_type: CouponType, coupon_id: int) -> Optional[Coupon]:
        coupon = self._coupons[coupon_type].get(coupon_id)
        return coupon.model_copy(deep=True) if coupon is not None else None

    def find_any(self, coupon_id: int) -> Optional[Coupon]:
        for coupon_type in CouponType:
            coupon = self.find_by_id(coupon_type, coupon_id)
            if coupon is not None:
                return coupon
        return None

    def find_by_code(self, code: str) -> Optional[Coupon]:
        with self._lock:
            coupon = self._find_by_code(code)
        return coupon.model_copy(deep=True) if coupon is not None else None

    def find_all(self, coupon_type: CouponType) -> List[Coupon]:
        with self._lock:
            coupons = list(self._coupons[coupon_type].values())
        return [coupon.model_copy(deep=True) for coupon in coupons]

    def find_all_active(self, coupon_type: CouponType, as_of: date) -> List[Coupon]:
        return [
            coupon for coupon in self.find_all(coupon_type)
            if coupon.isActive and coupon.expirationDate > as_of
        ]

    def clear(self) -> None:
        with self._lock:
            for coupons in self._coupons.values():
                coupons.clear()
            self._ids = itertools.count(1)

    def _find_by_code(self, code: str) -> Optional[Coupon]:
        for coupons in self._coupons.values():
            for coupon in coupons.values():
                if coupon.code == code:
                    return coupon
        return None


COUPON_STORE = CouponStore()


def get_store() -> CouponStore:
    return COUPON_STORE
