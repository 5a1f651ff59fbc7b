import typing
from collections import OrderedDict

from .models import (
    AttributeValue,
    CollectionDocumentRepr,
    LinkageRepr,
    LinksRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)


class ResourceReprBuilder:
    """
    Accumulates the members of a resource object.  Calling the builder yields the
    :py:class:`ResourceRepr`; both the type and the identity must have been set by then.
    """

    type: typing.Optional[str]
    id: typing.Optional[str]
    attributes: "OrderedDict[str, AttributeValue]"
    relationships: "OrderedDict[str, LinkageRepr]"

    def set_type(self, type: str) -> None:
        self.type = type

    def set_id(self, id: str) -> None:
        self.id = id

    def add_attribute(self, name: str, value: AttributeValue) -> None:
        self.attributes[name] = value

    def add_relationship(self, name: str, linkage: LinkageRepr) -> None:
        self.relationships[name] = linkage

    def __call__(self) -> ResourceRepr:
        if self.type is None or self.id is None:
            raise ValueError("both type and id must be set before building a resource")
        return ResourceRepr(
            type=self.type,
            id=self.id,
            attributes=self.attributes,
            relationships=self.relationships,
        )

    def __init__(self):
        self.type = None
        self.id = None
        self.attributes = OrderedDict()
        self.relationships = OrderedDict()


class SingletonDocumentBuilder:
    links: typing.Optional[LinksRepr]
    data: ResourceReprBuilder

    def __call__(self) -> SingletonDocumentRepr:
        return SingletonDocumentRepr(data=self.data(), links=self.links)

    def __init__(self):
        self.links = None
        self.data = ResourceReprBuilder()


class CollectionDocumentBuilder:
    """
    Resources are emitted in the order :py:meth:`next` was called.
    """

    links: typing.Optional[LinksRepr]
    data: typing.List[ResourceReprBuilder]

    def next(self) -> ResourceReprBuilder:
        builder = ResourceReprBuilder()
        self.data.append(builder)
        return builder

    def __call__(self) -> CollectionDocumentRepr:
        return CollectionDocumentRepr(data=[b() for b in self.data], links=self.links)

    def __init__(self):
        self.links = None
        self.data = []
