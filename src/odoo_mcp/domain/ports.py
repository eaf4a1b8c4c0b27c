from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from .models import Domain, ReadFailed, ReadOk


@runtime_checkable
class RecordSourcePort(Protocol):
    """
    What the dispatcher needs from a connector: one non-raising read.

    Implementations return ReadOk with the raw records, or ReadFailed with a
    code ("not_connected", "transport") and a human-readable message.
    """

    def read(
        self,
        model: str,
        domain: Domain = (),
        fields: Sequence[str] = (),
        limit: Optional[int] = None,
    ) -> ReadOk | ReadFailed:
        ...
