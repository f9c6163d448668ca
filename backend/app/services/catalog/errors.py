
"""
   Catalog pipeline exceptions that are not tied to one integration.
   Generation errors live with the OpenAI client, persistence errors with app.db.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.catalog.product_validator import ValidationResult


class ProductValidationError(Exception):
    """Submitted products failed validation; no job was created."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        super().__init__(f"{len(result.errors)} validation error(s) in submitted products")


class JobStateError(Exception):
    """Illegal job transition, e.g. mutating a job that already reached a terminal state."""
