"""Reference payroll configurations.

Monthly Tunisian payroll tables, keyed by year. Never hardcode rates or
brackets in computation functions; they are data passed in with the config.

Sources:
  - 2024: Loi de Finances 2024 monthly barème, CNSS 9.18% + 0.5% FOPROLOS, CSS 1%
  - 2025: Loi de Finances 2025 annual barème (8 brackets) divided by 12, CSS 0.5%,
          head-of-household deduction raised from 150 to 300
"""

from decimal import Decimal

from paycore.exceptions import ConfigError
from paycore.models.config import FamilyDeductionTable, SalaryConfig, TaxBracket, validate

CNSS_RATE = Decimal("0.0968")
MAX_CHILDREN = 4

DEFAULT_CONFIGS: dict[int, SalaryConfig] = {
    2024: SalaryConfig(
        label="TN-2024",
        contribution_rate=CNSS_RATE,
        solidarity_rate=Decimal("0.01"),
        family_deduction=FamilyDeductionTable(
            head_of_household=Decimal("150"),
            per_dependent=Decimal("100"),
            max_dependents=MAX_CHILDREN,
        ),
        brackets=(
            TaxBracket(upper_bound=Decimal("416.66"), rate=Decimal("0")),
            TaxBracket(upper_bound=Decimal("1666.66"), rate=Decimal("0.26")),
            TaxBracket(upper_bound=Decimal("2500.00"), rate=Decimal("0.28")),
            TaxBracket(upper_bound=Decimal("4166.66"), rate=Decimal("0.32")),
            TaxBracket(upper_bound=None, rate=Decimal("0.35")),
        ),
    ),
    2025: SalaryConfig(
        label="TN-2025",
        contribution_rate=CNSS_RATE,
        solidarity_rate=Decimal("0.005"),
        family_deduction=FamilyDeductionTable(
            head_of_household=Decimal("300"),
            per_dependent=Decimal("100"),
            max_dependents=MAX_CHILDREN,
        ),
        brackets=(
            TaxBracket(upper_bound=Decimal("416.667"), rate=Decimal("0"), description="0 - 5 000"),
            TaxBracket(upper_bound=Decimal("833.333"), rate=Decimal("0.15"), description="5 000 - 10 000"),
            TaxBracket(upper_bound=Decimal("1666.667"), rate=Decimal("0.25"), description="10 000 - 20 000"),
            TaxBracket(upper_bound=Decimal("2500.000"), rate=Decimal("0.30"), description="20 000 - 30 000"),
            TaxBracket(upper_bound=Decimal("3333.333"), rate=Decimal("0.33"), description="30 000 - 40 000"),
            TaxBracket(upper_bound=Decimal("4166.667"), rate=Decimal("0.36"), description="40 000 - 50 000"),
            TaxBracket(upper_bound=Decimal("5833.333"), rate=Decimal("0.38"), description="50 000 - 70 000"),
            TaxBracket(upper_bound=None, rate=Decimal("0.40"), description="> 70 000"),
        ),
    ),
}

LATEST_YEAR = max(DEFAULT_CONFIGS)


def get_default_config(year: int = LATEST_YEAR) -> SalaryConfig:
    """Return the validated built-in configuration for a year."""
    config = DEFAULT_CONFIGS.get(year)
    if config is None:
        known = ", ".join(str(y) for y in sorted(DEFAULT_CONFIGS))
        raise ConfigError("year", f"no built-in configuration for {year} (known: {known})")
    return validate(config)
