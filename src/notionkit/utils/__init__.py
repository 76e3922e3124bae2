from .chunk import chunked
from .redact import redact
from .text_split import split_string

__all__ = [
    "chunked",
    "redact",
    "split_string",
]
