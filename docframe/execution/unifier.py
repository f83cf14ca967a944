"""
Schema unification for heterogeneous result sets.

Documents returned by a schema-less store rarely share the same keys. The
unifier computes the union of keys over a result set and produces one
string-valued copy of every document containing all of them.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Sequence, Set, Tuple

from bson import Decimal128, ObjectId
from bson.datetime_ms import DatetimeMS
from bson.timestamp import Timestamp

FieldSet = Set[str]
NormalizedDocument = Dict[str, str]


class ValueKind(str, Enum):
    """Variants a document value can take."""

    ABSENT = "absent"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    IDENTIFIER = "identifier"
    NESTED = "nested"
    OTHER = "other"


def classify(value: Any) -> ValueKind:
    """Map a decoded BSON value to its ValueKind."""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, ObjectId):
        return ValueKind.IDENTIFIER
    # bool is a subclass of int
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float, Decimal, Decimal128)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (datetime, date, DatetimeMS, Timestamp)):
        return ValueKind.DATE
    if isinstance(value, (Mapping, list, tuple)):
        return ValueKind.NESTED
    return ValueKind.OTHER


_RENDERERS: Dict[ValueKind, Callable[[Any], str]] = {
    ValueKind.ABSENT: lambda value: "",
    ValueKind.IDENTIFIER: lambda value: value.binary.hex(),
    ValueKind.STRING: lambda value: value,
    ValueKind.NUMBER: str,
    ValueKind.BOOLEAN: str,
    ValueKind.DATE: str,
    ValueKind.NESTED: str,
    ValueKind.OTHER: str,
}


def to_text(value: Any) -> str:
    """
    Render a value as text.

    Identifiers become their 24-character hex form, null becomes the empty
    string, and everything else uses ``str()``. Applying it to its own
    output returns the same string.
    """
    return _RENDERERS[classify(value)](value)


def collect_field_set(documents: Iterable[Mapping[str, Any]]) -> FieldSet:
    """Union of keys over all documents."""
    field_set: FieldSet = set()
    for document in documents:
        field_set.update(document.keys())
    return field_set


def normalize(
    documents: Sequence[Mapping[str, Any]], field_set: FieldSet
) -> List[NormalizedDocument]:
    """
    Build a string-valued copy of every document covering ``field_set``.

    Fields missing from a document map to the empty string. Input documents
    are not modified and their order is kept.
    """
    normalized: List[NormalizedDocument] = []
    for document in documents:
        normalized.append(
            {
                key: to_text(document[key]) if key in document else ""
                for key in field_set
            }
        )
    return normalized


class SchemaUnifier:
    """
    Normalizes a result set to the union of its fields.
    """

    def unify(
        self, documents: Sequence[Mapping[str, Any]]
    ) -> Tuple[FieldSet, List[NormalizedDocument]]:
        """
        Args:
            documents: Documents of one query, in store order

        Returns:
            Field set and the normalized documents
        """
        field_set = collect_field_set(documents)
        return field_set, normalize(documents, field_set)
