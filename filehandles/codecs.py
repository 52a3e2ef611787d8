"""Record codecs used by encoded files.

A codec turns one record into bytes and back and keeps no state about the
file it is applied to.
"""
import json
from typing import Any, Generic, Protocol, Type, TypeVar, Union, runtime_checkable

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class Codec(Protocol):
    def encode(self, record: Any) -> bytes:
        ...

    def decode(self, data: Union[bytes, str]) -> Any:
        ...


class JsonCodec:
    """Compact JSON, one document per record (never spans lines)."""

    def __init__(self, sort_keys: bool = False):
        self.sort_keys = sort_keys

    def encode(self, record: Any) -> bytes:
        return json.dumps(record, separators=(",", ":"), sort_keys=self.sort_keys, default=str).encode("utf-8")

    def decode(self, data: Union[bytes, str]) -> Any:
        return json.loads(data)


class PydanticCodec(Generic[ModelT]):
    """Records are instances of a pydantic model, stored as JSON."""

    def __init__(self, model: Type[ModelT]):
        self.model = model

    def encode(self, record: ModelT) -> bytes:
        return record.model_dump_json().encode("utf-8")

    def decode(self, data: Union[bytes, str]) -> ModelT:
        return self.model.model_validate_json(data)
