"""Reference coupon validation service.

Business Rules:
1. Codes are matched upper-cased against active coupons only
2. Expired coupons and coupons at their usage cap are rejected
3. Orders below a coupon's minimum amount are rejected
4. A user may redeem a coupon at most ``per_user_limit`` times
. Applying a coupon to an order records one redemption, which is what
   later validations count against the usage caps
"""

import json
import threading
from collections import defaultdict
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Optional

import grpc
import structlog
from google.protobuf.struct_pb2 import Struct
from google.protobuf.timestamp_pb2 import Timestamp

from ..errors import errmsg
from ..helpers import from_struct, now, parse_timestamp, round_cents, to_struct
from .validation import (
    COUPON_FIXED,
    COUPON_FREE_SHIPPING,
    COUPON_PERCENTAGE,
    SERVICE_NAME,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class Coupon:
    id: str
    code: str
    coupon_type: str
    value: float
    is_active: bool = True
    expires_at: Optional[Timestamp] = None
    max_uses: Optional[int] = None
    current_uses: int = 0
    min_order_amount: Optional[float] = None
    max_discount_amount: Optional[float] = None
    per_user_limit: Optional[int] = None
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coupon":
        expires_at = data.get("expires_at")
        return cls(
            id=str(data["id"]),
            code=str(data["code"]).upper(),
            coupon_type=str(data["type"]),
            value=float(data["value"]),
            is_active=bool(data.get("is_active", True)),
            expires_at=parse_timestamp(expires_at) if expires_at else None,
            max_uses=data.get("max_uses"),
            current_uses=int(data.get("current_uses", 0)),
            min_order_amount=data.get("min_order_amount"),
            max_discount_amount=data.get("max_discount_amount"),
            per_user_limit=data.get("per_user_limit"),
            description=str(data.get("description") or ""),
        )

    def summary(self) -> dict[str, Any]:
        fields = {
            "id": self.id,
            "code": self.code,
            "type": self.coupon_type,
            "value": self.value,
            "description": self.description,
            "min_order_amount": self.min_order_amount,
            "max_discount_amount": self.max_discount_amount,
        }
        return {k: v for k, v in fields.items() if v is not None}


@dataclass(frozen=True)
class Redemption:
    coupon_id: str
    code: str
    user_id: Optional[str]
    order_id: Optional[str]
    discount_applied: float


class CouponBook:
    """In-memory coupon store keyed by upper-cased code."""

    def __init__(self, coupons: Optional[list[Coupon]] = None):
        self._lock = threading.Lock()
        self._coupons: dict[str, Coupon] = {}
        self._uses_by_user: dict[tuple[str, str], int] = defaultdict(int)
        self._redemptions: list[Redemption] = []
        for coupon in coupons or []:
            self.add(coupon)

    @classmethod
    def from_json(cls, path: Path) -> "CouponBook":
        """Load coupons from a JSON list of coupon objects."""
        data = json.loads(Path(path).read_text())
        return cls([Coupon.from_dict(item) for item in data])

    def add(self, coupon: Coupon) -> None:
        with self._lock:
            self._coupons[coupon.code.upper()] = coupon

    def get(self, code: str) -> Optional[Coupon]:
        with self._lock:
            return self._coupons.get(code.upper())

    def record_use(
        self,
        code: str,
        user_id: Optional[str] = None,
        order_id: Optional[str] = None,
        discount_applied: float = 0.0,
    ) -> Optional[Redemption]:
        """Count one redemption of a coupon.

        Returns None when no coupon has the code.
        """
        key = code.upper()
        with self._lock:
            coupon = self._coupons.get(key)
            if coupon is None:
                return None
            self._coupons[key] = replace(coupon, current_uses=coupon.current_uses + 1)
            if user_id:
                self._uses_by_user[(key, user_id)] += 1
            redemption = Redemption(coupon.id, key, user_id, order_id, discount_applied)
            self._redemptions.append(redemption)
            return redemption

    def redemptions(self, code: str) -> list[Redemption]:
        key = code.upper()
        with self._lock:
            return [r for r in self._redemptions if r.code == key]

    def uses_by(self, code: str, user_id: str) -> int:
        with self._lock:
            return self._uses_by_user.get((code.upper(), user_id), 0)


def _invalid(message: str) -> dict[str, Any]:
    return {"valid": False, "error": message}


def _failed(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}


class CouponService:
    """Validates and redeems coupon codes against a CouponBook."""

    def __init__(self, book: CouponBook, clock: Callable[[], Timestamp] = now):
        self._book = book
        self._clock = clock

    def validate(self, request: dict[str, Any]) -> dict[str, Any]:
        """Validate a request of the form ``{code, orderTotal, userId?}``."""
        code = request.get("code")
        if not code:
            return _invalid(errmsg.COUPON_CODE_REQUIRED)

        code = str(code).upper()
        coupon = self._book.get(code)
        rejection = self._check(coupon, request)
        if rejection is not None:
            logger.info("coupon_invalid", code=code, reason=rejection)
            return _invalid(rejection)

        total = float(request.get("orderTotal") or 0)
        discount = self._discount(coupon, total)
        logger.info("coupon_validated", code=code, discount=discount)

        return {
            "valid": True,
            "coupon": coupon.summary(),
            "discountAmount": discount,
            "freeShipping": coupon.coupon_type == COUPON_FREE_SHIPPING,
        }

    def apply(self, request: dict[str, Any]) -> dict[str, Any]:
        """Record a redemption for ``{code, userId?, orderId?, discountApplied?}``."""
        code = request.get("code")
        if not code:
            return _failed(errmsg.COUPON_CODE_REQUIRED)

        code = str(code).upper()
        redemption = self._book.record_use(
            code,
            user_id=request.get("userId"),
            order_id=request.get("orderId"),
            discount_applied=float(request.get("discountApplied") or 0),
        )
        if redemption is None:
            logger.info("coupon_apply_rejected", code=code)
            return _failed(errmsg.INVALID_COUPON)

        logger.info("coupon_redeemed", code=code, order_id=redemption.order_id)
        return {"success": True}

    def _check(self, coupon: Optional[Coupon], request: dict[str, Any]) -> Optional[str]:
        if coupon is None or not coupon.is_active:
            return errmsg.INVALID_COUPON

        if coupon.expires_at is not None:
            if coupon.expires_at.ToNanoseconds() < self._clock().ToNanoseconds():
                return errmsg.COUPON_EXPIRED

        if coupon.max_uses and coupon.current_uses >= coupon.max_uses:
            return errmsg.COUPON_USAGE_LIMIT

        order_total = request.get("orderTotal")
        if order_total and coupon.min_order_amount and float(order_total) < coupon.min_order_amount:
            return errmsg.MIN_ORDER_AMOUNT.format(amount=coupon.min_order_amount)

        user_id = request.get("userId")
        if user_id and coupon.per_user_limit:
            if self._book.uses_by(coupon.code, user_id) >= coupon.per_user_limit:
                return errmsg.COUPON_ALREADY_USED

        return None

    def _discount(self, coupon: Coupon, total: float) -> float:
        if coupon.coupon_type == COUPON_PERCENTAGE:
            discount = total * coupon.value / 100
            if coupon.max_discount_amount and discount > coupon.max_discount_amount:
                discount = coupon.max_discount_amount
        elif coupon.coupon_type == COUPON_FIXED:
            discount = coupon.value
        else:
            discount = 0.0
        return round_cents(discount)


def add_coupon_service_to_server(service: CouponService, server: grpc.Server) -> None:
    """Register the coupon service's Validate and Apply methods on a gRPC server."""

    def _validate(request: Struct, context: grpc.ServicerContext) -> Struct:
        return to_struct(service.validate(from_struct(request)))

    def _apply(request: Struct, context: grpc.ServicerContext) -> Struct:
        return to_struct(service.apply(from_struct(request)))

    handler = grpc.method_handlers_generic_handler(
        SERVICE_NAME,
        {
            "Validate": grpc.unary_unary_rpc_method_handler(
                _validate,
                request_deserializer=Struct.FromString,
                response_serializer=Struct.SerializeToString,
            ),
            "Apply": grpc.unary_unary_rpc_method_handler(
                _apply,
                request_deserializer=Struct.FromString,
                response_serializer=Struct.SerializeToString,
            ),
        },
    )
    server.add_generic_rpc_handlers((handler,))
