"""gRPC client for the coupon validation service."""

import os
from typing import Optional

import grpc
from google.protobuf.struct_pb2 import Struct

from ..errors import CouponRejectedError, TransportError, errmsg
from ..helpers import from_struct, to_struct
from .validation import APPLY_METHOD, VALIDATE_METHOD, CouponValidation

DEFAULT_TIMEOUT = 10.0


def _create_channel(endpoint: str) -> grpc.Channel:
    """Create a gRPC channel for the given endpoint.

    Supports both TCP (host:port) and Unix Domain Sockets (file paths).
    UDS paths are detected by leading '/' or './' and converted to unix: URIs.
    """
    if endpoint.startswith("./"):
        return grpc.insecure_channel(f"unix:{endpoint}")
    elif endpoint.startswith("/"):
        return grpc.insecure_channel(f"unix://{endpoint}")
    return grpc.insecure_channel(endpoint)


class CouponClient:
    """Client for the coupon validation service."""

    def __init__(self, channel: grpc.Channel, timeout: float = DEFAULT_TIMEOUT):
        self._channel = channel
        self._timeout = timeout
        self._validate = channel.unary_unary(
            VALIDATE_METHOD,
            request_serializer=Struct.SerializeToString,
            response_deserializer=Struct.FromString,
        )
        self._apply = channel.unary_unary(
            APPLY_METHOD,
            request_serializer=Struct.SerializeToString,
            response_deserializer=Struct.FromString,
        )

    @classmethod
    def connect(cls, endpoint: str, timeout: float = DEFAULT_TIMEOUT) -> "CouponClient":
        """Connect to a coupon service at the given endpoint."""
        return cls(_create_channel(endpoint), timeout)

    @classmethod
    def from_env(cls, env_var: str, default: str) -> "CouponClient":
        """Connect using an environment variable with fallback."""
        endpoint = os.environ.get(env_var, default)
        return cls.connect(endpoint)

    def validate(
        self, code: str, order_total: float, user_id: Optional[str] = None
    ) -> CouponValidation:
        """Validate a coupon code.

        Raises:
            CouponRejectedError: the service rejected the code; the message
                is the service's own.
            TransportError: the service could not be reached.
        """
        request = to_struct({"code": code, "orderTotal": order_total, "userId": user_id})
        try:
            response = from_struct(self._validate(request, timeout=self._timeout))
        except grpc.RpcError as e:
            raise TransportError(e) from e

        if not response.get("valid"):
            raise CouponRejectedError(response.get("error") or errmsg.VALIDATION_FAILED)
        return CouponValidation.from_response(response)

    def apply(
        self,
        code: str,
        user_id: Optional[str] = None,
        order_id: Optional[str] = None,
        discount_applied: float = 0.0,
    ) -> None:
        """Record that a coupon was redeemed on an order.

        Raises:
            CouponRejectedError: the service refused to record the redemption.
            TransportError: the service could not be reached.
        """
        request = to_struct(
            {
                "code": code,
                "userId": user_id,
                "orderId": order_id,
                "discountApplied": discount_applied,
            }
        )
        try:
            response = from_struct(self._apply(request, timeout=self._timeout))
        except grpc.RpcError as e:
            raise TransportError(e) from e

        if not response.get("success"):
            raise CouponRejectedError(response.get("error") or errmsg.VALIDATION_FAILED)

    def close(self) -> None:
        """Close the underlying channel."""
        self._channel.close()
