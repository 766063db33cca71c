"""Forward salary calculator: gross pay to net pay.

Pipeline, for a fixed family status and configuration:
  1. contribution  = quantize(min(gross, ceiling) * contribution_rate)
  2. deduction     = family deduction (head of household, dependents)
  3. taxable_base  = max(0, gross - contribution - deduction)
  4. tax           = progressive brackets applied cumulatively to taxable_base,
                     quantized once the brackets are summed
  5. solidarity    = quantize((gross - contribution) * solidarity_rate)
  6. net           = gross - contribution - tax - solidarity

Each withheld amount is rounded to the millime before it is subtracted, so the
reported breakdown always adds up to the reported net.
"""

from decimal import Decimal
from typing import NamedTuple

from paycore.engines.rounding import ZERO, quantize, to_decimal
from paycore.exceptions import ValidationError
from paycore.models.config import SalaryConfig, TaxBracket, validate
from paycore.models.results import SalaryBreakdown


class _Components(NamedTuple):
    contribution: Decimal
    taxable_base: Decimal
    tax: Decimal
    solidarity: Decimal
    net: Decimal


def apply_brackets(income: Decimal, brackets: tuple[TaxBracket, ...]) -> Decimal:
    """Apply progressive tax brackets to income."""
    tax = ZERO
    prev_bound = ZERO

    for bracket in brackets:
        if bracket.is_unbounded:
            taxable_in_bracket = max(income - prev_bound, ZERO)
        else:
            taxable_in_bracket = max(min(income, bracket.upper_bound) - prev_bound, ZERO)
        tax += taxable_in_bracket * bracket.rate
        if bracket.is_unbounded or income <= bracket.upper_bound:
            break
        prev_bound = bracket.upper_bound

    return tax


def check_dependents(dependents: object) -> int:
    if isinstance(dependents, bool) or not isinstance(dependents, int):
        raise ValidationError("dependents", f"expected an integer, got {dependents!r}")
    if dependents < 0:
        raise ValidationError("dependents", f"must be >= 0, got {dependents}")
    return dependents


def _components(gross: Decimal, deduction: Decimal, config: SalaryConfig) -> _Components:
    if gross <= ZERO:
        return _Components(ZERO, ZERO, ZERO, ZERO, ZERO)

    contributable = gross
    if config.contribution_ceiling is not None:
        contributable = min(gross, config.contribution_ceiling)
    contribution = quantize(contributable * config.contribution_rate)

    after_contribution = gross - contribution
    taxable_base = max(after_contribution - deduction, ZERO)
    tax = quantize(apply_brackets(taxable_base, config.brackets))
    solidarity = quantize(after_contribution * config.solidarity_rate)
    net = after_contribution - tax - solidarity
    return _Components(contribution, taxable_base, tax, solidarity, net)


def exact_net(gross: Decimal, deduction: Decimal, config: SalaryConfig) -> Decimal:
    """Net before the gross itself is rounded, for an already-validated config."""
    return _components(gross, deduction, config).net


def compute_net(
    gross: Decimal | int | float | str,
    is_head_of_household: bool,
    dependents: int,
    config: SalaryConfig,
) -> SalaryBreakdown:
    """Compute the contribution, tax and net breakdown for a gross salary.

    A gross at or below zero yields an all-zero breakdown.

    Raises:
        ValidationError: dependents is negative or gross is not a finite number.
        ConfigError: config is malformed.
    """
    amount = to_decimal(gross, "gross")
    dependents = check_dependents(dependents)
    config = validate(config)

    if amount <= ZERO:
        return SalaryBreakdown(
            gross=quantize(ZERO),
            is_head_of_household=is_head_of_household,
            dependents=dependents,
            contribution=quantize(ZERO),
            deduction=quantize(ZERO),
            taxable_base=quantize(ZERO),
            tax=quantize(ZERO),
            solidarity=quantize(ZERO),
            net=quantize(ZERO),
        )

    deduction = config.deduction_for(is_head_of_household, dependents)
    parts = _components(amount, deduction, config)
    return SalaryBreakdown(
        gross=quantize(amount),
        is_head_of_household=is_head_of_household,
        dependents=dependents,
        contribution=quantize(parts.contribution),
        deduction=quantize(deduction),
        taxable_base=quantize(parts.taxable_base),
        tax=quantize(parts.tax),
        solidarity=quantize(parts.solidarity),
        net=quantize(parts.net),
    )
