from .codec import AttributeDescriptor, ResourceCodec  # noqa
from .declarative import Attr, codec_for_dataclass  # noqa
from .exceptions import (  # noqa
    CodecError,
    InvalidDeclarationError,
    JSONAPICodecException,
    MalformedPayloadError,
    MissingRelationshipError,
    RecordNotFoundError,
    TypeMismatchError,
)
from .interfaces import EntityStore  # noqa
from .links import PLACEHOLDER, resolve_related_link  # noqa
from .parser import (  # noqa
    DocumentParser,
    ParsedInput,
    ensure_type,
    get_relationship_identity,
    get_relationship_reference,
    parse,
)
from .serializer import (  # noqa
    DocumentSerializer,
    build_document,
    build_relationships,
    serialize_error,
    serialize_many,
    serialize_one,
)
from .service import RelationBinding, ResourceService  # noqa
