import typing


class ResourceAttributeDescriptor(typing.Protocol):
    name: str
    type: typing.Any
    allow_null: bool
    required_on_creation: bool
    read_only: bool


class ResourceDescriptor(typing.Protocol):
    @property
    def type_tag(self) -> str:
        ...  # pragma: nocover

    @property
    def attributes(self) -> typing.Mapping[str, ResourceAttributeDescriptor]:
        ...  # pragma: nocover
