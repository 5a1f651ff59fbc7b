from .core import SQLAEntityStore  # noqa
from .declarative import codec_for_mapped_class  # noqa
