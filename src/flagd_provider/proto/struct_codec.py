"""Conversions between evaluation contexts and protobuf structured values."""

from collections.abc import Mapping
from typing import Any

from google.protobuf import json_format, struct_pb2
from google.protobuf.message import Message

from flagd_provider.utils import to_plain_data


def encode_context(context: Mapping[str, Any] | None) -> struct_pb2.Struct:
    """Convert an evaluation context into a `google.protobuf.Struct`.

    Raises:
        ValueError, TypeError: If a value has no Struct representation.
    """
    struct = struct_pb2.Struct()
    struct.update(to_plain_data(context or {}))
    return struct


def decode_value(value: Any) -> Any:
    """Convert protobuf structured values into native Python values."""
    if isinstance(value, Message):
        return json_format.MessageToDict(value)
    return value
