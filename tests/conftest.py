"""Shared test fixtures for paycore."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from paycore.models.config import FamilyDeductionTable, SalaryConfig, TaxBracket


@pytest.fixture
def sample_config() -> SalaryConfig:
    """CNSS-style 9.68% contribution, no ceiling, no deductions, four brackets."""
    return SalaryConfig(
        label="fixture",
        contribution_rate=Decimal("0.0968"),
        brackets=(
            TaxBracket(upper_bound=Decimal("200"), rate=Decimal("0")),
            TaxBracket(upper_bound=Decimal("500"), rate=Decimal("0.15")),
            TaxBracket(upper_bound=Decimal("1000"), rate=Decimal("0.25")),
            TaxBracket(upper_bound=None, rate=Decimal("0.30")),
        ),
    )


@pytest.fixture
def family_config(sample_config: SalaryConfig) -> SalaryConfig:
    """The sample config with head-of-household and per-child deductions."""
    return sample_config.model_copy(
        update={
            "family_deduction": FamilyDeductionTable(
                head_of_household=Decimal("150"),
                per_dependent=Decimal("100"),
                max_dependents=4,
            )
        }
    )


@pytest.fixture
def raw_config() -> dict:
    return {
        "label": "raw",
        "contribution_rate": "0.0968",
        "brackets": [
            {"upper_bound": "200", "rate": "0"},
            {"upper_bound": "500", "rate": "0.15"},
            {"upper_bound": "1000", "rate": "0.25"},
            {"upper_bound": None, "rate": "0.30"},
        ],
    }


@pytest.fixture
def api_payload() -> dict:
    """Response of the salary configuration endpoint (`?type=full`)."""
    return {
        "success": True,
        "data": {
            "config": [
                {"id": 1, "config_key": "cnss_rate", "config_value": "0.0968", "updated_at": "2025-01-01"},
                {"id": 2, "config_key": "css_rate", "config_value": "0.005", "updated_at": "2025-01-01"},
                {"id": 3, "config_key": "deduction_chef_famille", "config_value": "300", "updated_at": "2025-01-01"},
                {"id": 4, "config_key": "deduction_per_child", "config_value": "100", "updated_at": "2025-01-01"},
            ],
            "tax_brackets": [
                {"id": 12, "bracket_order": 2, "min_amount": "200.01", "max_amount": "500",
                 "tax_rate": "0.15", "active": 1},
                {"id": 11, "bracket_order": 1, "min_amount": "0", "max_amount": "200",
                 "tax_rate": "0", "active": 1},
                {"id": 13, "bracket_order": 3, "min_amount": "500.01", "max_amount": "1000",
                 "tax_rate": "0.25", "active": "1"},
                {"id": 15, "bracket_order": 4, "min_amount": "700", "max_amount": "900",
                 "tax_rate": "0.99", "active": 0},
                {"id": 14, "bracket_order": 5, "min_amount": "1000.01", "max_amount": None,
                 "tax_rate": "0.30", "active": True},
            ],
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, raw_config: dict) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(raw_config))
    return path
