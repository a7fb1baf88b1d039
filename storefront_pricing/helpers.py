"""Helper functions for timestamps and Struct payloads."""

from typing import Any

from google.protobuf import json_format
from google.protobuf.struct_pb2 import Struct
from google.protobuf.timestamp_pb2 import Timestamp


def now() -> Timestamp:
    """Return the current time as a protobuf Timestamp."""
    ts = Timestamp()
    ts.GetCurrentTime()
    return ts


def parse_timestamp(rfc3339: str) -> Timestamp:
    """Parse an RFC3339 timestamp string."""
    ts = Timestamp()
    ts.FromJsonString(rfc3339)
    return ts


def to_struct(payload: dict[str, Any]) -> Struct:
    """Pack a plain dict into a Struct, dropping None values."""
    struct = Struct()
    struct.update({k: v for k, v in payload.items() if v is not None})
    return struct


def from_struct(struct: Struct) -> dict[str, Any]:
    """Unpack a Struct into a plain dict.

    Struct carries every number as a double, so integers come back as
    floats.
    """
    return json_format.MessageToDict(struct)


def round_cents(amount: float) -> float:
    """Round a currency amount to whole cents."""
    return round(amount * 100) / 100
