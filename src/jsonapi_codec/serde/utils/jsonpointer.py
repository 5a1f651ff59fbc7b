import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


def _unescape(component: str) -> str:
    return component.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """
    An immutable `JSON Pointer <https://tools.ietf.org/html/rfc6901>`_.

    ``""`` denotes the document root; ``"/"`` is the member named ``""``.  New pointers
    are derived with ``/`` (object member) and ``[]`` (array index).

    .. code-block:: python

       JSONPointer() / "data" / "attributes" / "title"  # => /data/attributes/title
       (JSONPointer() / "data")[0]                       # => /data/0
    """

    components: typing.Tuple[str, ...]

    def __truediv__(self, component: str) -> "JSONPointer":
        return JSONPointer.from_components(self.components + (str(component),))

    def __getitem__(self, index: int) -> "JSONPointer":
        return JSONPointer.from_components(self.components + (str(index),))

    def __eq__(self, other: typing.Any) -> bool:
        if isinstance(other, str):
            other = JSONPointer(other)
        if not isinstance(other, JSONPointer):
            return NotImplemented
        return self.components == other.components

    def __hash__(self) -> int:
        return hash(self.components)

    def __str__(self) -> str:
        return "".join("/" + _escape(c) for c in self.components)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    @classmethod
    def from_components(cls, components: typing.Iterable[str]) -> "JSONPointer":
        retval = object.__new__(cls)
        retval.components = tuple(components)
        return retval

    def __init__(self, path: str = ""):
        if path == "":
            self.components = ()
        elif not path.startswith("/"):
            raise ValueError(f"invalid JSON pointer: {path!r}")
        else:
            self.components = tuple(_unescape(c) for c in path[1:].split("/"))
