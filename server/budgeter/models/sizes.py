"""
Byte totals that keep "unknown" distinct from zero.

A sum over resource sizes is either ``Known(n)`` or ``Unknown``.
Once a single contributing size is unknown the whole sum is
``Unknown`` and stays that way, so a missing ``Content-Length``
can never be mistaken for an empty resource.
"""

from __future__ import annotations

import dataclasses
from typing import Annotated, Any

import pydantic


@dataclasses.dataclass(frozen=True)
class Known:
    """A byte sum where every contributing size was reported."""

    value: int

    def __add__(self, other: ByteTotal) -> ByteTotal:
        if isinstance(other, Known):
            return Known(self.value + other.value)
        return UNKNOWN


@dataclasses.dataclass(frozen=True)
class Unknown:
    """A byte sum poisoned by at least one unreported size."""

    def __add__(self, other: ByteTotal) -> ByteTotal:
        return self


UNKNOWN = Unknown()
ZERO = Known(0)

ByteTotal = Known | Unknown


def of_size(size: int | None) -> ByteTotal:
    """Lift a single resource size into a ``ByteTotal``."""
    return UNKNOWN if size is None else Known(size)


def as_int(total: ByteTotal) -> int | None:
    """Return the known value, or ``None`` for an unknown total."""
    return total.value if isinstance(total, Known) else None


def sort_key(total: ByteTotal) -> int:
    """Ordering key where unknown sorts as zero."""
    return total.value if isinstance(total, Known) else 0


def _coerce(value: Any) -> ByteTotal:
    if isinstance(value, (Known, Unknown)):
        return value
    if value is None:
        return UNKNOWN
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"invalid byte total: {value!r}")
    return Known(value)


# Field type for pydantic models: accepts ``int | None`` or a ByteTotal,
# serialises to ``int | None``.
Bytes = Annotated[
    ByteTotal,
    pydantic.PlainValidator(_coerce),
    pydantic.PlainSerializer(as_int, return_type=int | None),
]
