"""Tax and contribution configuration models.

A configuration is an immutable snapshot: progressive brackets applied to the
taxable base, a contribution rate on gross, an optional solidarity rate and a
family deduction table. A changed configuration is a new instance, never an
edit of an existing one.
"""

import json
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from paycore.exceptions import ConfigError, ValidationError

ZERO = Decimal("0")
ONE = Decimal("1")

# Keys of the key/value rows served by the salary configuration endpoint.
API_CONFIG_KEYS = {
    "cnss_rate": "contribution_rate",
    "cnss_ceiling": "contribution_ceiling",
    "css_rate": "solidarity_rate",
}
API_DEDUCTION_KEYS = {
    "deduction_chef_famille": "head_of_household",
    "deduction_per_child": "per_dependent",
    "max_children": "max_dependents",
}


class TaxBracket(BaseModel):
    """One slice of the progressive scale. ``upper_bound=None`` is unbounded."""

    model_config = ConfigDict(frozen=True)

    upper_bound: Decimal | None = None
    rate: Decimal
    description: str | None = None

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None


class FamilyDeductionTable(BaseModel):
    """Deduction from the taxable base for head-of-household status and dependents."""

    model_config = ConfigDict(frozen=True)

    head_of_household: Decimal = ZERO
    per_dependent: Decimal = ZERO
    max_dependents: int | None = None

    def deduction(self, is_head_of_household: bool, dependents: int) -> Decimal:
        if dependents < 0:
            raise ValidationError("dependents", f"must be >= 0, got {dependents}")
        counted = dependents
        if self.max_dependents is not None:
            counted = min(dependents, self.max_dependents)
        amount = self.per_dependent * counted
        if is_head_of_household:
            amount += self.head_of_household
        return amount


class SalaryConfig(BaseModel):
    """Validated, immutable payroll configuration snapshot."""

    model_config = ConfigDict(frozen=True)

    brackets: tuple[TaxBracket, ...]
    contribution_rate: Decimal
    contribution_ceiling: Decimal | None = None
    solidarity_rate: Decimal = ZERO
    family_deduction: FamilyDeductionTable = FamilyDeductionTable()
    label: str | None = None

    def deduction_for(self, is_head_of_household: bool, dependents: int) -> Decimal:
        return self.family_deduction.deduction(is_head_of_household, dependents)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON-safe mapping accepted by :func:`validate`."""
        return self.model_dump(mode="json")


def _check_rate(field: str, rate: Decimal) -> None:
    if not rate.is_finite() or rate < ZERO or rate > ONE:
        raise ConfigError(field, f"rate must be within [0, 1], got {rate}")


def _check_amount(field: str, amount: Decimal) -> None:
    if not amount.is_finite() or amount < ZERO:
        raise ConfigError(field, f"must be a finite amount >= 0, got {amount}")


def _check_brackets(brackets: tuple[TaxBracket, ...]) -> None:
    if not brackets:
        raise ConfigError("brackets", "at least one bracket is required")

    prev: Decimal | None = None
    last = len(brackets) - 1
    for i, bracket in enumerate(brackets):
        field = f"brackets[{i}]"
        _check_rate(f"{field}.rate", bracket.rate)
        if bracket.is_unbounded:
            if i != last:
                raise ConfigError(field, "only the last bracket may be unbounded")
            continue
        bound = bracket.upper_bound
        if not bound.is_finite():
            raise ConfigError(f"{field}.upper_bound", f"must be a finite amount, got {bound}")
        if prev is None and bound < ZERO:
            raise ConfigError(f"{field}.upper_bound", f"first bound must be >= 0, got {bound}")
        if prev is not None and bound <= prev:
            raise ConfigError(
                f"{field}.upper_bound",
                f"bounds must be strictly increasing: {bound} <= {prev}",
            )
        prev = bound

    if not brackets[last].is_unbounded:
        raise ConfigError(f"brackets[{last}]", "last bracket must be unbounded")


def _check(config: SalaryConfig) -> SalaryConfig:
    _check_brackets(config.brackets)
    _check_rate("contribution_rate", config.contribution_rate)
    _check_rate("solidarity_rate", config.solidarity_rate)
    if config.contribution_ceiling is not None:
        _check_amount("contribution_ceiling", config.contribution_ceiling)

    table = config.family_deduction
    _check_amount("family_deduction.head_of_household", table.head_of_household)
    _check_amount("family_deduction.per_dependent", table.per_dependent)
    if table.max_dependents is not None and table.max_dependents < 0:
        raise ConfigError(
            "family_deduction.max_dependents",
            f"must be >= 0, got {table.max_dependents}",
        )
    return config


def validate(raw: Mapping[str, Any] | SalaryConfig) -> SalaryConfig:
    """Validate a raw configuration mapping and return an immutable config.

    Brackets are checked in the order given and never reordered.
    """
    if isinstance(raw, SalaryConfig):
        return _check(raw)
    if not isinstance(raw, Mapping):
        raise ConfigError("config", f"expected a mapping, got {type(raw).__name__}")
    try:
        config = SalaryConfig.model_validate(dict(raw))
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "config"
        raise ConfigError(field, error["msg"]) from exc
    return _check(config)


def _is_active(row: Mapping[str, Any]) -> bool:
    active = row.get("active", True)
    if isinstance(active, str):
        return active.strip().lower() not in ("0", "false", "")
    return bool(active)


def from_api_payload(payload: Mapping[str, Any]) -> SalaryConfig:
    """Build a config from the salary configuration endpoint's response.

    Accepts the full envelope (``{"success": ..., "data": {...}}``) or its
    ``data`` member: ``config`` key/value rows plus ``tax_brackets`` rows.
    Inactive brackets are dropped and rows follow ``bracket_order``.
    """
    if not isinstance(payload, Mapping):
        raise ConfigError("payload", f"expected a mapping, got {type(payload).__name__}")
    data = payload.get("data", payload)
    if not isinstance(data, Mapping):
        raise ConfigError("data", "expected a mapping")

    values: dict[str, Any] = {}
    for row in data.get("config") or []:
        try:
            values[row["config_key"]] = row["config_value"]
        except (KeyError, TypeError):
            raise ConfigError("config", f"malformed config row: {row!r}") from None

    if "cnss_rate" not in values:
        raise ConfigError("cnss_rate", "missing from configuration rows")

    raw: dict[str, Any] = {"brackets": []}
    for key, target in API_CONFIG_KEYS.items():
        if values.get(key) is not None:
            raw[target] = values[key]
    raw["family_deduction"] = {
        target: values[key] for key, target in API_DEDUCTION_KEYS.items() if values.get(key) is not None
    }
    if "label" in data:
        raw["label"] = data["label"]

    bracket_rows = data.get("tax_brackets") or []
    if not isinstance(bracket_rows, list):
        raise ConfigError("tax_brackets", f"expected a list, got {type(bracket_rows).__name__}")
    ordered: list[tuple[int, Mapping[str, Any]]] = []
    for i, row in enumerate(bracket_rows):
        if not isinstance(row, Mapping):
            raise ConfigError(f"tax_brackets[{i}]", f"expected a mapping, got {type(row).__name__}")
        try:
            order = int(row.get("bracket_order", 0))
        except (TypeError, ValueError):
            raise ConfigError(
                f"tax_brackets[{i}].bracket_order",
                f"not an integer: {row.get('bracket_order')!r}",
            ) from None
        if _is_active(row):
            ordered.append((order, row))
    ordered.sort(key=lambda item: item[0])
    rows = [row for _, row in ordered]

    if rows:
        try:
            first_min = Decimal(str(rows[0].get("min_amount") or 0))
        except InvalidOperation:
            raise ConfigError("tax_brackets[0].min_amount", "not a number") from None
        if first_min < ZERO:
            raise ConfigError("tax_brackets[0].min_amount", "first bracket must start at or above 0")
    for row in rows:
        max_amount = row.get("max_amount")
        raw["brackets"].append(
            {
                "upper_bound": None if max_amount in (None, "") else max_amount,
                "rate": row.get("tax_rate"),
                "description": row.get("description"),
            }
        )

    return validate(raw)


def load_config(path: Path) -> SalaryConfig:
    """Load a JSON configuration file in either the native or the endpoint shape."""
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(str(path), f"cannot read configuration: {exc}") from exc
    if isinstance(data, Mapping) and ("data" in data or "tax_brackets" in data):
        return from_api_payload(data)
    return validate(data)
