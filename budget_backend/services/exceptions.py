from __future__ import annotations

from decimal import Decimal
from typing import Dict


class BudgetRequestError(ValueError):
    """Base class for failures the caller can act on."""

    status_code = 400

    @property
    def detail(self) -> str:
        return str(self)


class BudgetRequestValidationError(BudgetRequestError):
    status_code = 422

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Budget request validation failed: {fields}")


class ReferenceNotFound(BudgetRequestError):
    status_code = 404
    entity_label = "Reference"

    def __init__(self, entity_id: int) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity_label} not found: {entity_id}")


class DepartmentNotFound(ReferenceNotFound):
    entity_label = "Department"


class CategoryNotFound(ReferenceNotFound):
    entity_label = "Budget category"


class AmountMismatch(BudgetRequestError):
    def __init__(self, expected: Decimal, actual: Decimal) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Requested amount does not match line items total: "
            f"requested {actual}, line items total {expected}"
        )


class InvalidTransition(BudgetRequestError):
    status_code = 409

    def __init__(self, message: str, current_status: str, target_status: str) -> None:
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(message)


class IncompleteRequest(BudgetRequestError):
    def __init__(self, missing: str) -> None:
        self.missing = missing
        super().__init__(f"Budget request is incomplete: missing {missing}")
