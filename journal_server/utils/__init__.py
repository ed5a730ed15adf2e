from .responses import error_response
from .text import is_blank, truncate_words, word_count

__all__ = [
    "error_response",
    "is_blank",
    "truncate_words",
    "word_count",
]
