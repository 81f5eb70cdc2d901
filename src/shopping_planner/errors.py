"""Exceptions raised by Shopping Planner services."""

from typing import Any
from uuid import UUID


class ShoppingPlannerError(Exception):
    """Base class for all rejected operations."""

    error_code = "ERROR"


class DuplicateNameError(ShoppingPlannerError):
    """Raised when an ingredient name collides with an existing one."""

    error_code = "DUPLICATE_NAME"

    def __init__(self, existing: Any):
        self.existing = existing
        super().__init__(f"Ingredient \"{existing.name}\" already exists")


class NotFoundError(ShoppingPlannerError):
    """Raised when a referenced entity does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, kind: str, entity_id: UUID | str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} with ID '{entity_id}' not found")


class ValidationError(ShoppingPlannerError):
    """Raised for malformed input before anything is written."""

    error_code = "VALIDATION_ERROR"
