"""
Decoding of inbound query models and filter text.
"""

from collections.abc import Mapping
from typing import Any, Dict, Optional, Union

from bson import json_util
from bson.errors import BSONError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from docframe.core.errors import MalformedFilter, MalformedQuery
from docframe.core.models import QueryDescriptor
from docframe.query.sanitizer import remove_comments


class QueryModel(BaseModel):
    """Wire shape of a query as sent by the query editor."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    query_text: Optional[str] = Field(None, alias="queryText")
    database: Optional[str] = None
    collection: Optional[str] = None


def decode_query_model(
    payload: Union[Dict[str, Any], str, bytes],
    default_database: str = "",
) -> QueryDescriptor:
    """
    Decode a query payload into a QueryDescriptor.

    The query text is sanitized here; it is decoded as a filter only at
    execution time.

    Args:
        payload: JSON object, as a dict or as JSON text
        default_database: Database used when the payload names none

    Returns:
        Immutable query descriptor

    Raises:
        MalformedQuery: If the payload is not a JSON object of strings
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            model = QueryModel.model_validate_json(payload)
        else:
            model = QueryModel.model_validate(payload)
    except ValidationError as e:
        raise MalformedQuery(f"json unmarshal: {_first_error(e)}") from e

    return QueryDescriptor(
        filter_text=remove_comments(model.query_text or ""),
        database=model.database or default_database,
        collection=model.collection or "",
    )


def decode_filter(filter_text: str) -> Dict[str, Any]:
    """
    Decode sanitized filter text as a MongoDB Extended JSON object.

    Extended JSON lets filters reference store-native values, e.g.
    ``{"_id": {"$oid": "..."}}`` or ``{"ts": {"$gt": {"$date": "..."}}}``.

    Raises:
        MalformedFilter: If the text is not a JSON object
    """
    try:
        decoded = json_util.loads(filter_text)
    except (ValueError, TypeError, KeyError, IndexError, BSONError) as e:
        raise MalformedFilter(f"query unmarshal: {e}") from e
    except RecursionError as e:
        raise MalformedFilter("query unmarshal: filter is nested too deeply") from e

    if not isinstance(decoded, Mapping):
        raise MalformedFilter(
            f"query unmarshal: expected a JSON object, got {type(decoded).__name__}"
        )
    return dict(decoded)


def _first_error(error: ValidationError) -> str:
    details = error.errors()
    if not details:
        return str(error)
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    if location:
        return f"{location}: {first.get('msg')}"
    return first.get("msg", str(error))
