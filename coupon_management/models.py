from datetime import date, datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, PositiveInt, field_validator


class CouponType(str, Enum):
    CART_WISE = "CART_WISE"
    PRODUCT_WISE = "PRODUCT_WISE"
    BXGY = "BXGY"


ProductId = Annotated[int, Field(ge=1)]
Percentage = Annotated[float, Field(gt=0, le=100)]


# ---------------------------
# Stored coupons
# ---------------------------

class CouponBase(BaseModel):
    id: Optional[int] = None
    code: str = Field(min_length=1, max_length=255)
    expirationDate: date
    isActive: bool = True
    description: Optional[str] = None


class CartWiseCoupon(CouponBase):
    type: Literal["CART_WISE"] = "CART_WISE"
    threshold: float = Field(gt=0, allow_inf_nan=False)
    discountPercentage: Percentage


class ProductWiseCoupon(CouponBase):
    type: Literal["PRODUCT_WISE"] = "PRODUCT_WISE"
    productId: ProductId
    discountPercentage: Percentage


class BxGyCoupon(CouponBase):
    type: Literal["BXGY"] = "BXGY"
    buyProducts: Optional[Dict[int, PositiveInt]] = None   # productId -> required quantity
    getProducts: Optional[Dict[int, PositiveInt]] = None   # productId -> free quantity
    repetitionLimit: int = Field(ge=0)


Coupon = Annotated[
    Union[CartWiseCoupon, ProductWiseCoupon, BxGyCoupon],
    Field(discriminator="type"),
]


# ---------------------------
# Creation requests
# ---------------------------

class CreateCouponRequest(BaseModel):
    code: str = Field(max_length=255)
    expirationDate: date
    description: Optional[str] = None

    @field_validator("code")
    @classmethod
    def code_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Coupon code cannot be blank")
        return value

    @field_validator("expirationDate")
    @classmethod
    def expiration_in_future(cls, value: date) -> date:
        if value <= date.today():
            raise ValueError("Expiration date must be in the future")
        return value


class CreateCartWiseCouponRequest(CreateCouponRequest):
    threshold: float = Field(gt=0, allow_inf_nan=False)
    discountPercentage: Percentage

    def to_coupon(self) -> CartWiseCoupon:
        return CartWiseCoupon(**self.model_dump(), isActive=True)


class CreateProductWiseCouponRequest(CreateCouponRequest):
    productId: ProductId
    discountPercentage: Percentage

    def to_coupon(self) -> ProductWiseCoupon:
        return ProductWiseCoupon(**self.model_dump(), isActive=True)


class CreateBxGyCouponRequest(CreateCouponRequest):
    buyProducts: Dict[ProductId, PositiveInt] = Field(min_length=1)
    getProducts: Dict[ProductId, PositiveInt] = Field(min_length=1)
    repetitionLimit: PositiveInt

    def to_coupon(self) -> BxGyCoupon:
        return BxGyCoupon(**self.model_dump(), isActive=True)


CreateRequest = Union[
    CreateCartWiseCouponRequest,
    CreateProductWiseCouponRequest,
    CreateBxGyCouponRequest,
]


# ---------------------------
# Cart
# ---------------------------

class CartItem(BaseModel):
    productId: int
    quantity: PositiveInt
    price: float = Field(ge=0, allow_inf_nan=False)  # unit price


class Cart(BaseModel):
    items: List[CartItem]


# ---------------------------
# Responses
# ---------------------------

class CouponResponse(BaseModel):
    id: int
    code: str
    expirationDate: date
    isActive: bool
    description: Optional[str] = None
    type: CouponType

    # cart-wise
    threshold: Optional[float] = None
    discountPercentage: Optional[float] = None
    # product-wise
    productId: Optional[int] = None
    # bxgy
    repetitionLimit: Optional[int] = None
    buyProducts: Optional[Dict[int, int]] = None
    getProducts: Optional[Dict[int, int]] = None


class ApplicableCoupon(BaseModel):
    couponId: int
    code: str
    type: CouponType
    description: Optional[str] = None
    discountAmount: float


class CouponApplicationResult(BaseModel):
    updatedItems: List[CartItem]
    originalTotal: float
    discountAmount: float
    finalTotal: float
    appliedCouponCode: str
    message: str


class ErrorResponse(BaseModel):
    status: int
    error: str
    message: str
    timestamp: datetime
    path: str


class ValidationErrorResponse(ErrorResponse):
    validationErrors: Dict[str, str]
