"""Report generation for paycore."""

from paycore.reports.payslip import PayslipGenerator

__all__ = ["PayslipGenerator"]
