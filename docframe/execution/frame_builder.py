"""
Frame assembly from normalized documents.
"""

from typing import List, Sequence

from docframe.core.models import Frame, FrameField
from docframe.execution.unifier import FieldSet, NormalizedDocument


def build_frame(
    field_set: FieldSet,
    documents: Sequence[NormalizedDocument],
    name: str = "response",
) -> Frame:
    """
    Build a column-oriented frame.

    Columns follow the lexicographic order of the field names, so the layout
    does not depend on document order or on key order within documents.
    Values of each column follow document order.

    Args:
        field_set: Union of field names of the result set
        documents: Normalized documents covering ``field_set``
        name: Frame name

    Returns:
        Frame with one string column per field
    """
    fields: List[FrameField] = []
    for key in sorted(field_set):
        fields.append(FrameField(name=key, values=[document[key] for document in documents]))
    return Frame(name=name, fields=fields)
