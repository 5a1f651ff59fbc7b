import abc
import typing

from .serde.models import Source
from .serde.utils import english_enumerate


class JSONAPICodecException(Exception, metaclass=abc.ABCMeta):
    pass


class InvalidDeclarationError(JSONAPICodecException):
    message: str

    def __str__(self):
        return self.message

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class CodecError(JSONAPICodecException, metaclass=abc.ABCMeta):
    """
    The base of the errors raised while handling an inbound document.
    """

    title: typing.ClassVar[str] = "Invalid document"

    @property
    @abc.abstractmethod
    def sources(self) -> typing.Sequence[Source]:
        ...  # pragma: nocover

    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class MalformedPayloadErrorItem(typing.NamedTuple):
    pointer: Source
    message: str


class MalformedPayloadError(CodecError):
    title = "Malformed payload"

    items: typing.Sequence[MalformedPayloadErrorItem]

    @property
    def sources(self) -> typing.Sequence[Source]:
        return [item.pointer for item in self.items]

    @property
    def message(self) -> str:
        if not self.items:
            return "malformed payload"
        return english_enumerate(f"{item.pointer}: {item.message}" for item in self.items)

    def __init__(self, items: typing.Iterable[MalformedPayloadErrorItem]):
        self.items = tuple(items)
        super().__init__(self.items)


class MissingRelationshipError(CodecError):
    title = "Missing relationship"

    type: str
    name: str
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    def message(self):
        return f'relationship ({self.name}) not supplied for "{self.type}"'

    def __init__(self, type: str, name: str, source: typing.Optional[Source] = None):
        super().__init__(type, name)
        self.type = type
        self.name = name
        self._source = source


class TypeMismatchError(CodecError):
    title = "Resource type mismatch"

    expected: str
    actual: str
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    def message(self):
        return f'resource type "{self.actual}" given where "{self.expected}" expected'

    def __init__(self, expected: str, actual: str, source: typing.Optional[Source] = None):
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual
        self._source = source


class StoreError(JSONAPICodecException):
    pass


class RecordNotFoundError(StoreError):
    type: str
    id: typing.Any

    @property
    def message(self):
        return f'no record of "{self.type}" found for {self.id}'

    def __str__(self):
        return self.message

    def __init__(self, type: str, id: typing.Any):
        super().__init__(type, id)
        self.type = type
        self.id = id


class InvalidIdentifierError(StoreError):
    message: str

    def __str__(self):
        return self.message

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
