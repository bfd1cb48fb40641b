"""nested_attributes exception hierarchy.

Errors raised by a Resource's own save() are never wrapped: they reach the
caller of assign() unchanged.
"""

from __future__ import annotations


class NestedAttributesError(Exception):
    """Base exception for all nested_attributes errors."""


# --- Assignment ---


class AssignmentError(NestedAttributesError):
    """Base for nested assignment errors."""


class InvalidAttributesError(AssignmentError, TypeError):
    """Raised when the attributes passed to assign() have the wrong shape."""

    def __init__(self, param_name: str, detail: str) -> None:
        self.param_name = param_name
        super().__init__(f"+{param_name}+ {detail}")


class UpdateConflictError(AssignmentError):
    """Raised when a nested update targets a new or dirty resource."""

    def __init__(self, model_name: str, state: str) -> None:
        self.model_name = model_name
        self.state = state
        super().__init__(f"{model_name}#update cannot be called on a {state} nested resource")


# --- Configuration ---


class ConfigurationError(NestedAttributesError):
    """Base for association configuration errors."""


class InvalidOptionsError(ConfigurationError):
    """Raised when nested attribute options fail validation."""

    def __init__(self, relationship_name: str, detail: str) -> None:
        self.relationship_name = relationship_name
        super().__init__(f"Invalid nested attribute options for '{relationship_name}': {detail}")


# --- Persistence ---


class PersistenceError(NestedAttributesError):
    """Base for persistence errors of the in-memory backend."""


class SaveFailureError(PersistenceError):
    """Raised when a resource refuses to save and raise_on_save_failure is set."""

    def __init__(self, model_name: str) -> None:
        self.model_name = model_name
        super().__init__(f"{model_name}#save returned false, {model_name} was not saved")


class StoreError(PersistenceError):
    """Raised on store misuse, e.g. saving a resource that has no store."""
