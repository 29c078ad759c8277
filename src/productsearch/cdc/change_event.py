"""Debezium change event envelope.

Messages arrive either as the bare event (``{"before": ..., "after": ...,
"op": ...}``) or wrapped with the schema as ``{"schema": ..., "payload":
{...}}``; both decode to the same ``ChangeEvent``.
"""

import json
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from productsearch.errors import ChangeEventDecodeError

RowT = TypeVar("RowT", bound=BaseModel)


class Operation(str, Enum):
    CREATE = "c"
    UPDATE = "u"
    DELETE = "d"
    READ = "r"


class SourceInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    table: str | None = None
    ts_ms: int | None = None
    tx_id: int | None = Field(default=None, alias="txId")


class ChangeEvent(BaseModel, Generic[RowT]):
    model_config = ConfigDict(extra="ignore")

    before: RowT | None = None
    after: RowT | None = None
    op: Operation
    source: SourceInfo | None = None
    ts_ms: int | None = None

    @model_validator(mode="after")
    def require_row_image(self):
        if self.op is Operation.DELETE:
            if self.before is None:
                raise ValueError("delete event has no before image")
        elif self.after is None:
            raise ValueError(f"{self.op.value} event has no after image")
        return self

    @property
    def record(self) -> RowT:
        """The row the event is about: ``before`` for deletes, ``after`` otherwise."""
        return self.before if self.op is Operation.DELETE else self.after

    @property
    def is_delete(self) -> bool:
        return self.op is Operation.DELETE


def decode_change_event(raw: bytes | str | dict, row_type: type[RowT], topic: str | None = None) -> ChangeEvent[RowT]:
    """Decode one CDC message into a validated ``ChangeEvent``.

    Raises:
        ChangeEventDecodeError: malformed JSON, unknown operation, a row that
            fails validation, or a missing before/after image.
    """
    try:
        data: Any = raw
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        if isinstance(data, str):
            data = json.loads(data)
    except ValueError as e:
        raise ChangeEventDecodeError(f"Malformed change event: {e}", topic=topic) from e

    if not isinstance(data, dict):
        raise ChangeEventDecodeError("Change event is not a JSON object", topic=topic)
    if isinstance(data.get("payload"), dict):
        data = data["payload"]

    try:
        return ChangeEvent[row_type].model_validate(data)
    except ValidationError as e:
        raise ChangeEventDecodeError(f"Invalid change event: {e}", topic=topic) from e
