"""Gross/net salary engine for payroll."""

__version__ = "0.1.0"
