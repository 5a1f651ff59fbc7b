import typing

from .types import JSONValue
from .utils import JSONPointer


class JSONAPISerdeError(Exception):
    pass


class DeserializationErrorItem(typing.Protocol):
    pointer: JSONPointer
    message: str


class DeserializationError(JSONAPISerdeError):
    payload: JSONValue
    errors: typing.Sequence[DeserializationErrorItem]

    def __str__(self):
        return "; ".join(f"{e.pointer}: {e.message}" for e in self.errors)

    def __init__(self, payload: JSONValue, errors: typing.Sequence[DeserializationErrorItem]):
        super().__init__(payload, errors)
        self.payload = payload
        self.errors = errors
