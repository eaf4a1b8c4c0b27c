from .models import Condition, Domain, QuerySpec, ReadFailed, ReadOk, ReadResult, Record, Session
from .ports import RecordSourcePort

__all__ = [
    "Condition",
    "Domain",
    "QuerySpec",
    "ReadFailed",
    "ReadOk",
    "ReadResult",
    "Record",
    "RecordSourcePort",
    "Session",
]
