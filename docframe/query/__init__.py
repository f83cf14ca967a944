"""Query text sanitizing and decoding."""

from docframe.query.sanitizer import remove_comments
from docframe.query.decoder import QueryModel, decode_query_model, decode_filter

__all__ = ["remove_comments", "QueryModel", "decode_query_model", "decode_filter"]
