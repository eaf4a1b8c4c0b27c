from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

# Shape is defined by the remote model; nothing is validated locally.
Record = Dict[str, Any]

# Odoo domain: conjunction of (field, operator, value) conditions
Condition = Tuple[str, str, Any]
Domain = Sequence[Condition]


@dataclass
class Session:
    url: str
    db: str
    username: str
    password: str = field(repr=False)
    uid: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.uid)


@dataclass(frozen=True)
class QuerySpec:
    model: str
    domain: Tuple[Condition, ...]
    fields: Tuple[str, ...]
    default_limit: int


class ReadOk(BaseModel):
    status: Literal["ok"] = "ok"
    records: List[Record] = Field(default_factory=list)


class ReadFailed(BaseModel):
    status: Literal["error"] = "error"
    code: str
    message: str


ReadResult = Annotated[Union[ReadOk, ReadFailed], Field(discriminator="status")]
