"""
Demo seed script — load sample procedures, practices and prices.

Usage (local or hosted shell):
    python scripts/seed_demo.py                  # built-in sample data
    python scripts/seed_demo.py prices.csv       # any .csv/.tsv/.json import file

Runs through the same BulkImporter as POST /import, so it is idempotent for
procedures and practices; re-running only refreshes the prices.
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
from app.schemas.imports import BulkImportRequest
from app.services.errors import StoreError
from app.services.ingestion.base import ParseError
from app.services.ingestion.bulk_importer import BulkImporter
from app.services.ingestion.dispatcher import parse_import_file

# ── Demo data ──────────────────────────────────────────────────────────────────

SAMPLE_DATA = {
    "procedures": [
        {
            "name": "MRI Scan - Brain",
            "description": "Magnetic resonance imaging of the brain with contrast",
            "category": "Imaging",
            "practices": [
                {
                    "practice_name": "City Medical Center",
                    "address": "123 Main Street, Downtown",
                    "phone": "555-0123",
                    "email": "appointments@citymedical.com",
                    "cost": 1200.00,
                    "currency": "USD",
                    "notes": "Includes radiologist consultation and CD with images",
                },
                {
                    "practice_name": "General Hospital",
                    "address": "456 Oak Avenue, Midtown",
                    "phone": "555-0456",
                    "email": "scheduling@generalhospital.org",
                    "cost": 950.00,
                    "currency": "USD",
                    "notes": "Weekend appointments available",
                },
            ],
        },
        {
            "name": "Knee Replacement Surgery",
            "description": "Total knee arthroplasty",
            "category": "Orthopedic",
            "practices": [
                {
                    "practice_name": "General Hospital",
                    "cost": 32000.00,
                    "notes": "Includes 3-night stay",
                },
                {
                    "practice_name": "Lakeside Orthopedics",
                    "address": "9 Shore Road",
                    "phone": "555-0999",
                    "cost": 28500.00,
                },
            ],
        },
        {
            "name": "Dental Cleaning",
            "description": "Routine cleaning and checkup",
            "category": "Dental",
            "practices": [
                {
                    "practice_name": "Smile Dental Clinic",
                    "address": "123 Main St",
                    "phone": "555-0123",
                    "email": "contact@smileclinic.com",
                    "cost": 150.00,
                    "notes": "Includes fluoride treatment",
                },
                {
                    "practice_name": "City Dental Care",
                    "address": "456 Oak Ave",
                    "cost": 120.00,
                },
            ],
        },
    ]
}


def load_request(argv: list[str]) -> BulkImportRequest:
    if len(argv) < 2:
        return BulkImportRequest.model_validate(SAMPLE_DATA)
    path = argv[1]
    with open(path, "rb") as f:
        return parse_import_file(f.read(), os.path.basename(path))


def main() -> None:
    print("\n=== Medical Price Compare — Demo Seed ===\n")

    try:
        request = load_request(sys.argv)
    except (OSError, ParseError) as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)

    db = SessionLocal()
    try:
        summary = BulkImporter(db).run(request)
    except StoreError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    finally:
        db.close()

    print(f"✓ Procedures created:    {summary.imported_procedures}")
    print(f"✓ Practices created:     {summary.imported_practices}")
    print(f"✓ Pricing entries saved: {summary.imported_pricing_entries}")
    print("\nDone.")


if __name__ == "__main__":
    main()
