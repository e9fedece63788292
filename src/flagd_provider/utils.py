from collections.abc import Mapping
from typing import Any


def to_plain_data(value: Any) -> Any:
    """Copy nested mappings and sequences into dicts with str keys and lists."""
    if isinstance(value, Mapping):
        return {str(k): to_plain_data(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain_data(v) for v in value]
    return value
