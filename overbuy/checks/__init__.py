"""Duplicate check orchestration for Overbuy."""

from .service import DuplicateCheckReport, DuplicateCheckService

__all__ = [
    "DuplicateCheckReport",
    "DuplicateCheckService",
]
