import logging
from datetime import datetime
from typing import Dict, List

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import service
from .config import configure_logging, settings
from .errors import CouponError
from .models import (
    ApplicableCoupon,
    BxGyCoupon,
    Cart,
    CartWiseCoupon,
    CouponApplicationResult,
    CouponResponse,
    CreateBxGyCouponRequest,
    CreateCartWiseCouponRequest,
    CreateProductWiseCouponRequest,
    ErrorResponse,
    ProductWiseCoupon,
    ValidationErrorResponse,
)
from .storage import CouponStore, get_store

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------
# Error handling
# ---------------------------

def _error_body(request: Request, status_code: int, error: str, message: str) -> Dict:
    return ErrorResponse(
        status=status_code,
        error=error,
        message=message,
        timestamp=datetime.now(),
        path=request.url.path,
    ).model_dump(mode="json")


@app.exception_handler(CouponError)
def handle_coupon_error(request: Request, exc: CouponError):
    logger.error("%s: %s", exc.title, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.status_code, exc.title, str(exc)),
    )


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        errors[field] = error["msg"]
    logger.error("Validation error: %s", errors)

    body = ValidationErrorResponse(
        status=status.HTTP_400_BAD_REQUEST,
        error="Validation Failed",
        message="Request validation failed",
        timestamp=datetime.now(),
        path=request.url.path,
        validationErrors=errors,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json"))


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unexpected error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "An unexpected error occurred",
        ),
    )


# ---------------------------
# Routes
# ---------------------------

@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.post("/coupons/cart-wise", response_model=CartWiseCoupon, status_code=status.HTTP_201_CREATED)
def create_cart_wise_coupon(request: CreateCartWiseCouponRequest, store: CouponStore = Depends(get_store)):
    return service.create_coupon(request, store)


@app.post("/coupons/product-wise", response_model=ProductWiseCoupon, status_code=status.HTTP_201_CREATED)
def create_product_wise_coupon(request: CreateProductWiseCouponRequest, store: CouponStore = Depends(get_store)):
    return service.create_coupon(request, store)


@app.post("/coupons/bxgy", response_model=BxGyCoupon, status_code=status.HTTP_201_CREATED)
def create_bxgy_coupon(request: CreateBxGyCouponRequest, store: CouponStore = Depends(get_store)):
    return service.create_coupon(request, store)


@app.get("/coupons", response_model=List[CouponResponse])
def list_coupons(store: CouponStore = Depends(get_store)):
    logger.info("Retrieving all coupons")
    return service.list_coupons(store)


@app.get("/coupons/{coupon_id}", response_model=CouponResponse)
def get_coupon(coupon_id: int, store: CouponStore = Depends(get_store)):
    logger.info("Retrieving coupon with id: %s", coupon_id)
    return service.to_response(service.get_coupon(coupon_id, store))


@app.post("/coupons/applicable-coupons", response_model=List[ApplicableCoupon])
def get_applicable_coupons(cart: Cart, store: CouponStore = Depends(get_store)):
    return service.find_applicable_coupons(cart, store)


@app.post("/coupons/apply-coupon/{coupon_id}", response_model=CouponApplicationResult)
def apply_coupon(coupon_id: int, cart: Cart, store: CouponStore = Depends(get_store)):
    return service.apply_coupon(coupon_id, cart, store)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "coupon_management.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
    )
