# report_builder/core/__init__.py
"""Shared settings and error types."""

from .exceptions import (
    ReportBuilderError,
    ShapeError,
    FieldAlreadyUsedError,
    FieldNotAllowedError,
    CannotRemovePredefinedError,
    ConditionNotFoundError,
    MissingFieldError,
    FixedFieldError,
    ConfigValidationError,
    ReportExportError,
)

__all__ = [
    "ReportBuilderError",
    "ShapeError",
    "FieldAlreadyUsedError",
    "FieldNotAllowedError",
    "CannotRemovePredefinedError",
    "ConditionNotFoundError",
    "MissingFieldError",
    "FixedFieldError",
    "ConfigValidationError",
    "ReportExportError",
]
