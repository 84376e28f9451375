# report_builder/core/exceptions.py
"""Error types raised by the report configuration model."""


class ReportBuilderError(Exception):
    """Base class for all report builder errors."""
    pass


class ShapeError(ReportBuilderError, ValueError):
    """A condition value does not match its component type's shape."""
    pass


class FieldAlreadyUsedError(ReportBuilderError):
    """A custom condition already references this dimension field."""

    def __init__(self, field_id: str, field_name: str = None):
        self.field_id = field_id
        self.field_name = field_name or field_id
        super().__init__(f"A query condition for field '{self.field_name}' already exists")


class FieldNotAllowedError(ReportBuilderError):
    """The field type is not accepted by the target condition group."""
    pass


class CannotRemovePredefinedError(ReportBuilderError):
    """Predefined conditions cannot be removed by the user."""

    def __init__(self, condition_id: str):
        self.condition_id = condition_id
        super().__init__(f"Predefined condition '{condition_id}' cannot be removed")


class ConditionNotFoundError(ReportBuilderError, LookupError):
    """No condition with the given id exists in the condition set."""
    pass


class MissingFieldError(ReportBuilderError, LookupError):
    """The field catalog has no entry for the given id."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Field '{field_id}' not found in catalog")


class FixedFieldError(ReportBuilderError):
    """Fixed row fields cannot be moved or removed."""
    pass


class ConfigValidationError(ReportBuilderError, ValueError):
    """A configuration transition was rejected; the prior configuration stands."""
    pass


class ReportExportError(ReportBuilderError):
    """The pivot result cannot be exported."""
    pass
