"""Payslip text report generator."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from paycore.engines.rounding import format_amount
from paycore.models.results import SalaryBreakdown

TEMPLATE_DIR = Path(__file__).parent / "templates"


class PayslipGenerator:
    """Renders a salary breakdown as a plain-text payslip."""

    def __init__(self) -> None:
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)))
        self.env.filters["amount"] = format_amount

    def render(
        self,
        breakdown: SalaryBreakdown,
        employee_name: str | None = None,
        period: str | None = None,
        currency: str = "TND",
    ) -> str:
        template = self.env.get_template("payslip.txt")
        return template.render(
            b=breakdown,
            employee_name=employee_name,
            period=period,
            currency=currency,
        )
