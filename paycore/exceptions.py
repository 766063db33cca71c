"""Custom exceptions for the paycore salary engine."""

from decimal import Decimal


class PayrollError(Exception):
    """Base exception for payroll computation errors."""


class ConfigError(PayrollError):
    """Raised when a tax/contribution configuration is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid configuration '{field}': {message}")


class ValidationError(PayrollError):
    """Raised when caller input fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error on '{field}': {message}")


class NumericalError(PayrollError):
    """Raised when the gross-from-net solver cannot bracket or converge."""

    def __init__(self, net_target: Decimal, message: str):
        self.net_target = net_target
        super().__init__(f"Cannot solve gross for net {net_target}: {message}")
