import abc
import base64
import binascii
import collections.abc
import datetime
import decimal
import json
import math
import typing

from .jsonpointer import JSONPointer

JsonicScalar = typing.Union[bool, int, float, str, None]
JsonicValue = typing.Any
JsonicType = typing.Any


class JsonicDataValidationError(Exception):
    pointer: JSONPointer
    message: str

    def __str__(self):
        return f"{self.pointer}: {self.message}"

    def __init__(self, pointer: JSONPointer, message: str):
        super().__init__(pointer, message)
        self.pointer = pointer
        self.message = message


class ConverterContext(metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def stopped(self) -> bool:
        ...  # pragma: nocover

    @abc.abstractmethod
    def validation_error_occurred(self, error: JsonicDataValidationError) -> None:
        ...  # pragma: nocover


class DefaultConverterContext(ConverterContext):
    @property
    def stopped(self) -> bool:
        return False

    def validation_error_occurred(self, error: JsonicDataValidationError) -> None:
        raise error


class ErrorCollectingConverterContext(ConverterContext):
    errors: typing.List[JsonicDataValidationError]

    @property
    def stopped(self) -> bool:
        return False

    def validation_error_occurred(self, error: JsonicDataValidationError) -> None:
        self.errors.append(error)

    def __init__(self):
        self.errors = []


def unwrap_optional(typ: JsonicType) -> typing.Tuple[JsonicType, bool]:
    """
    Splits ``Optional[T]`` into ``(T, True)``; any other type comes back as ``(typ, False)``.
    """
    if typing.get_origin(typ) is typing.Union:
        args = typing.get_args(typ)
        if type(None) in args:
            rest = tuple(a for a in args if a is not type(None))
            return (rest[0] if len(rest) == 1 else typing.Union[rest]), True
    return typ, False


class AttributeConverter:
    """
    Converts JSON values into the python types declared for resource attributes.

    Supported types are ``str``, ``int``, ``float``, ``bool``, ``datetime.datetime``,
    ``datetime.date``, ``decimal.Decimal``, ``bytes``, ``typing.Any``, ``Optional[T]``,
    ``Sequence[T]`` and ``Mapping[str, T]`` of those.  A conversion returns a pair of the
    converted value and its cost, the latter being ``math.inf`` when the value was rejected.
    """

    def type_repr(self, typ: JsonicType) -> str:
        typ, optional = unwrap_optional(typ)
        origin = typing.get_origin(typ)
        if origin is not None:
            args = typing.get_args(typ)
            r = f"{getattr(origin, '__name__', str(origin))}[{', '.join(self.type_repr(a) for a in args)}]"
        else:
            r = getattr(typ, "__name__", str(typ))
        return f"Optional[{r}]" if optional else r

    def py_type_repr(self, typ: type) -> str:
        return "null" if typ is type(None) else typ.__name__

    def _reject(
        self, ctx: ConverterContext, pointer: JSONPointer, typ: JsonicType, value: JsonicValue
    ) -> typing.Tuple[JsonicValue, float]:
        try:
            literal = json.dumps(value)
        except (TypeError, ValueError):
            literal = repr(value)
        ctx.validation_error_occurred(
            JsonicDataValidationError(
                pointer,
                f"value has type {self.py_type_repr(type(value))} ({literal}) where {self.type_repr(typ)} expected",
            )
        )
        return (None, math.inf)

    def _convert_scalar(
        self, ctx: ConverterContext, pointer: JSONPointer, typ: type, value: JsonicValue
    ) -> typing.Tuple[JsonicValue, float]:
        if typ is bool:
            if isinstance(value, bool):
                return (value, 1.0)
        elif typ is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return (value, 1.0)
        elif typ is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return (float(value), 1.0)
        elif typ is str:
            if isinstance(value, str):
                return (value, 1.0)
        elif typ is decimal.Decimal:
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                try:
                    return (decimal.Decimal(str(value)), 1.0)
                except decimal.InvalidOperation:
                    pass
        elif typ is datetime.datetime:
            if isinstance(value, str):
                try:
                    return (datetime.datetime.fromisoformat(value.replace("Z", "+00:00")), 1.0)
                except ValueError:
                    pass
        elif typ is datetime.date:
            if isinstance(value, str):
                try:
                    return (datetime.date.fromisoformat(value), 1.0)
                except ValueError:
                    pass
        elif typ is bytes:
            if isinstance(value, str):
                try:
                    return (base64.b64decode(value, validate=True), 1.0)
                except (binascii.Error, ValueError):
                    pass
        elif isinstance(typ, type):
            # no JSON form known; only values already of the type pass
            if isinstance(value, typ):
                return (value, 1.0)
        else:
            raise TypeError(f"unsupported type: {typ!r}")
        return self._reject(ctx, pointer, typ, value)

    def _convert(
        self, ctx: ConverterContext, pointer: JSONPointer, typ: JsonicType, value: JsonicValue
    ) -> typing.Tuple[JsonicValue, float]:
        if typ is typing.Any:
            return (value, 1.0)

        typ, optional = unwrap_optional(typ)
        if value is None:
            if optional:
                return (None, 1.0)
            return self._reject(ctx, pointer, typ, value)

        origin = typing.get_origin(typ)
        if origin is None:
            return self._convert_scalar(ctx, pointer, typ, value)

        args = typing.get_args(typ)
        if origin in (list, tuple, collections.abc.Sequence):
            if isinstance(value, list):
                items: typing.List[JsonicValue] = []
                cost = 1.0
                for i, item in enumerate(value):
                    v, c = self._convert(ctx, pointer[i], args[0] if args else typing.Any, item)
                    items.append(v)
                    cost = max(cost, c)
                    if ctx.stopped:
                        break
                return (items, cost)
        elif origin in (dict, collections.abc.Mapping):
            if isinstance(value, collections.abc.Mapping):
                members: typing.Dict[str, JsonicValue] = {}
                cost = 1.0
                for k, item in value.items():
                    v, c = self._convert(
                        ctx, pointer / k, args[1] if len(args) > 1 else typing.Any, item
                    )
                    members[k] = v
                    cost = max(cost, c)
                    if ctx.stopped:
                        break
                return (members, cost)
        elif origin is typing.Union:
            for alt in args:
                trial_ctx = ErrorCollectingConverterContext()
                v, c = self._convert(trial_ctx, pointer, alt, value)
                if not trial_ctx.errors:
                    return (v, c)
        else:
            raise TypeError(f"unsupported type: {typ!r}")

        return self._reject(ctx, pointer, typ, value)

    def convert(
        self, ctx: ConverterContext, pointer: JSONPointer, typ: JsonicType, value: JsonicValue
    ) -> JsonicValue:
        return self._convert(ctx, pointer, typ, value)[0]
