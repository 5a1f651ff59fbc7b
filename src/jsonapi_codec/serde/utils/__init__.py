from .jsonpointer import JSONPointer  # noqa
from .formatting import english_enumerate  # noqa

from .converter import (  # noqa
    AttributeConverter,
    ConverterContext,
    DefaultConverterContext,
    ErrorCollectingConverterContext,
    JsonicDataValidationError,
    unwrap_optional,
)
