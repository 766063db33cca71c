"""Salary computation engines."""

from paycore.engines.forward import apply_brackets, compute_net
from paycore.engines.inverse import compute_gross_from_net, solve_gross_from_net
from paycore.engines.rounding import MINOR_UNIT, format_amount, quantize
from paycore.engines.tables import DEFAULT_CONFIGS, get_default_config

__all__ = [
    "DEFAULT_CONFIGS",
    "MINOR_UNIT",
    "apply_brackets",
    "compute_gross_from_net",
    "compute_net",
    "format_amount",
    "get_default_config",
    "quantize",
    "solve_gross_from_net",
]
