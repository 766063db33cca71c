"""Salary computation output models."""

from decimal import Decimal

from pydantic import BaseModel


class SalaryBreakdown(BaseModel):
    # Inputs
    gross: Decimal
    is_head_of_household: bool
    dependents: int
    # Deductions from gross
    contribution: Decimal
    deduction: Decimal
    taxable_base: Decimal
    tax: Decimal
    solidarity: Decimal
    # Result
    net: Decimal

    @property
    def total_withheld(self) -> Decimal:
        return self.contribution + self.tax + self.solidarity


class GrossSolution(BaseModel):
    """Gross found by the solver, with the forward breakdown that verifies it."""

    net_target: Decimal
    gross: Decimal
    breakdown: SalaryBreakdown
    doublings: int
    iterations: int
