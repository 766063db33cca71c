"""Data access layer for configuration versions and salary records."""

import json
import sqlite3
from datetime import date
from decimal import Decimal
from uuid import uuid4

from paycore.engines.forward import compute_net
from paycore.exceptions import ConfigError, ValidationError
from paycore.models.config import SalaryConfig, validate
from paycore.models.results import SalaryBreakdown


class PayrollRepository:
    """Stores configuration versions and the salary records pinned to them."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _rows(self, cursor: sqlite3.Cursor) -> list[dict]:
        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    # --- Configuration versions ---

    def save_config_version(self, config: SalaryConfig, effective_from: date) -> str:
        """Store a validated configuration snapshot. Returns the version ID."""
        config = validate(config)
        version_id = str(uuid4())
        self.conn.execute(
            """INSERT INTO config_versions (id, label, effective_from, payload)
               VALUES (?, ?, ?, ?)""",
            (
                version_id,
                config.label,
                effective_from.isoformat(),
                json.dumps(config.to_payload()),
            ),
        )
        self.conn.commit()
        return version_id

    def get_config_version(self, version_id: str) -> SalaryConfig:
        row = self.conn.execute(
            "SELECT payload FROM config_versions WHERE id = ?", (version_id,)
        ).fetchone()
        if row is None:
            raise ConfigError("config_version_id", f"unknown configuration version {version_id}")
        return validate(json.loads(row[0]))

    def get_config_for_date(self, day: date) -> tuple[str, SalaryConfig]:
        """Return the configuration version in effect on ``day``.

        The latest version whose ``effective_from`` is on or before the day
        wins; ties go to the most recently stored version.
        """
        row = self.conn.execute(
            """SELECT id, payload FROM config_versions
               WHERE effective_from <= ?
               ORDER BY effective_from DESC, created_at DESC, rowid DESC
               LIMIT 1""",
            (day.isoformat(),),
        ).fetchone()
        if row is None:
            raise ConfigError("effective_from", f"no configuration in effect on {day.isoformat()}")
        return row[0], validate(json.loads(row[1]))

    def list_config_versions(self) -> list[dict]:
        cursor = self.conn.execute(
            "SELECT id, label, effective_from, created_at FROM config_versions "
            "ORDER BY effective_from, rowid"
        )
        return self._rows(cursor)

    # --- Salary records ---

    def save_salary_record(
        self,
        employee_id: str,
        effective_date: date,
        gross: Decimal,
        net: Decimal,
        is_head_of_household: bool,
        dependents: int,
        config_version_id: str,
    ) -> str:
        """Insert a salary record pinned to a configuration version. Returns the record ID."""
        if dependents < 0:
            raise ValidationError("dependents", f"must be >= 0, got {dependents}")
        # Raises ConfigError for an unknown version before anything is written.
        self.get_config_version(config_version_id)
        record_id = str(uuid4())
        self.conn.execute(
            """INSERT INTO salary_records
               (id, employee_id, effective_date, gross, net,
                is_head_of_household, dependents, config_version_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                record_id,
                employee_id,
                effective_date.isoformat(),
                str(gross),
                str(net),
                int(is_head_of_household),
                dependents,
                config_version_id,
            ),
        )
        self.conn.commit()
        return record_id

    def _deserialize_record(self, record: dict) -> dict:
        record["gross"] = Decimal(record["gross"])
        record["net"] = Decimal(record["net"])
        record["is_head_of_household"] = bool(record["is_head_of_household"])
        record["effective_date"] = date.fromisoformat(record["effective_date"])
        return record

    def get_salary_record(self, record_id: str) -> dict | None:
        cursor = self.conn.execute("SELECT * FROM salary_records WHERE id = ?", (record_id,))
        rows = self._rows(cursor)
        return self._deserialize_record(rows[0]) if rows else None

    def get_salary_records(self, employee_id: str) -> list[dict]:
        """Salary records for an employee, oldest effective date first."""
        cursor = self.conn.execute(
            "SELECT * FROM salary_records WHERE employee_id = ? ORDER BY effective_date, rowid",
            (employee_id,),
        )
        return [self._deserialize_record(r) for r in self._rows(cursor)]

    def recompute_salary_record(self, record_id: str) -> SalaryBreakdown:
        """Recompute a stored record against the configuration it was pinned to."""
        record = self.get_salary_record(record_id)
        if record is None:
            raise ValidationError("record_id", f"unknown salary record {record_id}")
        config = self.get_config_version(record["config_version_id"])
        return compute_net(
            record["gross"],
            record["is_head_of_household"],
            record["dependents"],
            config,
        )
