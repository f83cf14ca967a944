"""Result normalization, frame building and the per-query boundary."""

from docframe.execution.unifier import SchemaUnifier, ValueKind, classify, to_text
from docframe.execution.frame_builder import build_frame
from docframe.execution.runner import QueryRunner

__all__ = ["SchemaUnifier", "ValueKind", "classify", "to_text", "build_frame", "QueryRunner"]
