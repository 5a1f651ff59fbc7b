from .builders import (  # noqa
    CollectionDocumentBuilder,
    ResourceReprBuilder,
    SingletonDocumentBuilder,
)
from .deserializer import ReprDeserializer  # noqa
from .exceptions import DeserializationError, JSONAPISerdeError  # noqa
from .models import (  # noqa
    AttributeValue,
    CollectionDocumentRepr,
    ErrorDocumentRepr,
    ErrorRepr,
    LinkageRepr,
    LinksRepr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
    SourceRepr,
)
from .renderer import ReprRenderer  # noqa
