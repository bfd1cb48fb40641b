"""Nested attribute options.

NestedAttributesOptions is a Pydantic model for the options accepted when a
relationship is declared as accepting nested attributes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DELETE_KEY = "_delete"


class NestedAttributesOptions(BaseModel):
    """Options for one association's nested attribute behavior.

    Args:
        allow_destroy: Whether a truthy delete flag marks a matched record
            for destruction. When False the flag is ignored and the record
            is updated.
        reject_if: Name of a method on the parent, or a callable taking
            ``(parent, attributes)``. A truthy result prevents a new record
            from being built.
        delete_key: Attribute name carrying the delete flag.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    allow_destroy: bool = False
    reject_if: str | Callable[..., Any] | None = None
    delete_key: str = Field(default=DEFAULT_DELETE_KEY, min_length=1)
