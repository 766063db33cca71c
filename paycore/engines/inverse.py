"""Gross-from-net solver.

Inverts the forward calculator by bracketing and bisection. The forward model
is only used as an oracle, so any bracket count or shape is supported as long
as net keeps growing with gross.
"""

import logging
from decimal import Decimal, localcontext

from paycore.engines.forward import check_dependents, compute_net, exact_net
from paycore.engines.rounding import MINOR_UNIT, ZERO, quantize, to_decimal
from paycore.exceptions import NumericalError
from paycore.models.config import SalaryConfig, validate
from paycore.models.results import GrossSolution

logger = logging.getLogger(__name__)

MAX_DOUBLINGS = 60
MAX_ITERATIONS = 200
# Bisect below the minor unit; quantizing hi then lands on the exact millime.
TOLERANCE = MINOR_UNIT / 10
TWO = Decimal("2")
# Digits kept beyond the target's magnitude: 60 doublings add 19 integer
# digits and TOLERANCE needs 4 decimals.
EXTRA_PRECISION = 30


def _solve(
    target: Decimal,
    is_head_of_household: bool,
    dependents: int,
    config: SalaryConfig,
) -> GrossSolution:
    deduction = config.deduction_for(is_head_of_household, dependents)

    # Gross is never below net: contributions and tax are non-negative.
    lo = target
    hi = target
    doublings = 0
    while exact_net(hi, deduction, config) < target:
        if doublings >= MAX_DOUBLINGS:
            raise NumericalError(
                target,
                f"net never reaches the target after {MAX_DOUBLINGS} doublings "
                f"(gross up to {hi}); effective rate may be >= 100%",
            )
        lo = hi
        hi = hi * TWO
        doublings += 1
    logger.debug("Bracketed net %s in gross [%s, %s] after %d doublings", target, lo, hi, doublings)

    iterations = 0
    while hi - lo > TOLERANCE:
        if iterations >= MAX_ITERATIONS:
            raise NumericalError(
                target,
                f"bisection did not converge in {MAX_ITERATIONS} iterations "
                f"(interval [{lo}, {hi}])",
            )
        mid = (lo + hi) / TWO
        if exact_net(mid, deduction, config) < target:
            lo = mid
        else:
            hi = mid
        iterations += 1

    gross = quantize(hi)
    logger.debug("Solved net %s -> gross %s in %d iterations", target, gross, iterations)
    return GrossSolution(
        net_target=quantize(target),
        gross=gross,
        breakdown=compute_net(gross, is_head_of_household, dependents, config),
        doublings=doublings,
        iterations=iterations,
    )


def solve_gross_from_net(
    net_target: Decimal | int | float | str,
    is_head_of_household: bool,
    dependents: int,
    config: SalaryConfig,
) -> GrossSolution:
    """Find the gross salary whose net pay is ``net_target``.

    Returns the quantized gross together with the forward breakdown that
    verifies it and the number of doublings/bisection steps used. The search
    runs with enough Decimal precision to resolve a millime at the target's
    magnitude, however large.

    Raises:
        ValidationError: dependents is negative or net_target is not a number.
        ConfigError: config is malformed.
        NumericalError: no gross reaches the target, or bisection did not converge.
    """
    target = to_decimal(net_target, "net_target")
    dependents = check_dependents(dependents)
    config = validate(config)

    if target <= ZERO:
        return GrossSolution(
            net_target=quantize(max(target, ZERO)),
            gross=quantize(ZERO),
            breakdown=compute_net(ZERO, is_head_of_household, dependents, config),
            doublings=0,
            iterations=0,
        )

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, target.adjusted() + EXTRA_PRECISION)
        return _solve(target, is_head_of_household, dependents, config)


def compute_gross_from_net(
    net_target: Decimal | int | float | str,
    is_head_of_household: bool,
    dependents: int,
    config: SalaryConfig,
) -> Decimal:
    """Gross salary, quantized to the minor unit, that yields ``net_target``."""
    solution = solve_gross_from_net(net_target, is_head_of_household, dependents, config)
    return solution.gross
