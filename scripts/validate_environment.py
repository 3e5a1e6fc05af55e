#!/usr/bin/env python3
"""Validate local studio API environment readiness.

Runs the availability and booking workflows against a throwaway SQLite file,
so it never touches the configured database.
"""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from inkbook.domain.models import BookingStatus, TimeSlot
from inkbook.repository.data_repository import DataRepository
from inkbook.services.availability_service import AvailabilityService
from inkbook.services.booking_service import BookingService
from inkbook.utils.config import get_settings

SEPARATOR_LINE = "=" * 44

PACKAGE_SPECS = [
    ("fastapi", "fastapi"),
    ("uvicorn", "uvicorn"),
    ("pydantic", "pydantic"),
    ("email_validator", "email-validator"),
    ("dotenv", "python-dotenv"),
    ("requests", "requests"),
    ("pandas", "pandas"),
    ("streamlit", "streamlit"),
    ("httpx", "httpx"),
    ("pytest", "pytest"),
]


class CheckFailed(Exception):
    pass


def _run_check(name: str, check: Callable[[], Optional[str]]) -> tuple[bool, str]:
    """Run one check; a returned string is appended to the PASS line."""
    try:
        detail = check() or ""
    except Exception as exc:
        return False, f"[FAIL] {name}: {exc}"
    return True, f"[PASS] {name}{detail}"


def _check_python() -> str:
    found = sys.version.split()[0]
    if sys.version_info < (3, 10):
        raise CheckFailed(f"need >= 3.10, found {found}")
    return f" {found}"


def _check_packages() -> None:
    missing = []
    for module_name, dist_name in PACKAGE_SPECS:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            missing.append(f"{module_name} ({exc})")
    if missing:
        raise CheckFailed("missing/unimportable -> " + "; ".join(missing))


def _workflow_checks(database_path: Path) -> list[tuple[str, Callable[[], Optional[str]]]]:
    settings = replace(get_settings(), database_path=database_path)
    repository = DataRepository(settings)
    availability = AvailabilityService(repository=repository, settings=settings)
    bookings = BookingService(repository=repository, settings=settings)

    def upsert() -> None:
        availability.set_availability("2025-06-01", "morning", True)
        availability.set_availability("2025-06-01", "morning", False)
        rows = availability.get_availability()
        if len(rows) != 1 or rows[0].is_available:
            raise CheckFailed(f"expected one unavailable row, got {rows}")

    def bulk_replace() -> None:
        availability.replace_availability_for_date("2025-06-01", ["afternoon", "evening"])
        slots = availability.get_available_slots("2025-06-01")
        if slots != [TimeSlot.AFTERNOON, TimeSlot.EVENING]:
            raise CheckFailed(f"unexpected available slots {slots}")

    def lifecycle() -> str:
        booking = bookings.create_booking_request(
            name="Validation",
            email="validation@inkstudio.com",
            body_part="Arm",
            size="4x6",
            description="Environment check",
            requested_date="2025-06-01",
        )
        approved = bookings.update_booking_status(booking.booking_id, "approved")
        if approved.status is not BookingStatus.APPROVED:
            raise CheckFailed(f"status stayed {approved.status.value}")
        return f": {booking.status.value} -> {approved.status.value}"

    return [
        ("Database initialization", repository.initialize_database),
        ("Availability upsert", upsert),
        ("Availability replace", bulk_replace),
        ("Booking lifecycle", lifecycle),
    ]


def main() -> int:
    outcomes = [
        _run_check("Python version", _check_python),
        _run_check("Required packages", _check_packages),
    ]

    temp_dir = tempfile.mkdtemp(prefix="inkbook-env-")
    try:
        for name, check in _workflow_checks(Path(temp_dir) / "inkbook_validation.db"):
            outcomes.append(_run_check(name, check))
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Studio API Environment Validation")
    print(SEPARATOR_LINE)
    for _, line in outcomes:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all(ok for ok, _ in outcomes):
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
