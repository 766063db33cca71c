"""Data models for paycore."""

from paycore.models.config import (
    FamilyDeductionTable,
    SalaryConfig,
    TaxBracket,
    from_api_payload,
    load_config,
    validate,
)
from paycore.models.results import GrossSolution, SalaryBreakdown

__all__ = [
    "FamilyDeductionTable",
    "GrossSolution",
    "SalaryBreakdown",
    "SalaryConfig",
    "TaxBracket",
    "from_api_payload",
    "load_config",
    "validate",
]
