"""
Bulk importer tests — resolve-or-create counting, last-write-wins pricing,
and all-or-nothing batches. All tests use the DB fixtures from conftest.
"""

import pytest
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from app.models.catalog import MedicalPractice, MedicalProcedure
from app.models.pricing import ProcedurePricing
from app.schemas.imports import BulkImportRequest
from app.services.errors import StoreError
from app.services.ingestion import bulk_importer
from app.services.ingestion.bulk_importer import BulkImporter, resolve_or_create


DENTAL_BATCH = {
    "procedures": [
        {
            "name": "Dental Cleaning",
            "description": "Regular dental cleaning and checkup",
            "category": "Dental",
            "practices": [
                {
                    "practice_name": "Smile Dental Clinic",
                    "practice_address": "123 Main St",
                    "practice_phone": "555-0123",
                    "practice_email": "contact@smileclinic.com",
                    "cost": 150.00,
                    "currency": "USD",
                    "notes": "Includes fluoride treatment",
                },
                {
                    "practice_name": "City Dental Care",
                    "address": "456 Oak Ave",
                    "cost": 120.00,
                },
            ],
        },
        {
            "name": "Root Canal",
            "description": "Root canal treatment",
            "category": "Dental",
            "practices": [
                # Same practice as above — must not create a second row
                {"practice_name": "Smile Dental Clinic", "cost": 800.00},
            ],
        },
    ]
}


def _batch(data: dict) -> BulkImportRequest:
    return BulkImportRequest.model_validate(data)


@pytest.fixture
def importer(db):
    return BulkImporter(db)


class TestResolveOrCreate:
    def test_creates_on_miss(self, db):
        row, created = resolve_or_create(
            db, MedicalProcedure, {"name": "X-Ray"}, {"category": "Imaging"}
        )
        assert created is True
        assert row.id is not None
        assert row.category == "Imaging"

    def test_returns_existing_without_applying_values(self, db):
        first, _ = resolve_or_create(
            db, MedicalProcedure, {"name": "X-Ray"}, {"category": "Imaging"}
        )
        second, created = resolve_or_create(
            db, MedicalProcedure, {"name": "X-Ray"}, {"category": "Radiology"}
        )
        assert created is False
        assert second.id == first.id
        assert second.category == "Imaging"

    def test_lowest_id_wins_among_duplicates(self, db):
        db.add_all([MedicalPractice(name="Twin Clinic"), MedicalPractice(name="Twin Clinic")])
        db.commit()
        lowest = db.query(MedicalPractice).order_by(MedicalPractice.id).first()

        row, created = resolve_or_create(db, MedicalPractice, {"name": "Twin Clinic"})
        assert created is False
        assert row.id == lowest.id

    def test_match_is_case_sensitive(self, db):
        resolve_or_create(db, MedicalPractice, {"name": "Smile Dental"})
        _, created = resolve_or_create(db, MedicalPractice, {"name": "smile dental"})
        assert created is True


class TestBulkImportCounts:
    def test_fresh_import_counts(self, importer, db):
        summary = importer.run(_batch(DENTAL_BATCH))

        assert summary.imported_procedures == 2
        assert summary.imported_practices == 2  # Smile Dental Clinic counted once
        assert summary.imported_pricing_entries == 3

        assert db.query(MedicalProcedure).count() == 2
        assert db.query(MedicalPractice).count() == 2
        assert db.query(ProcedurePricing).count() == 3

    def test_rerun_is_idempotent_for_entities(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))
        summary = importer.run(_batch(DENTAL_BATCH))

        assert summary.imported_procedures == 0
        assert summary.imported_practices == 0
        # Every (procedure, practice) record is counted, created or updated
        assert summary.imported_pricing_entries == 3
        assert db.query(ProcedurePricing).count() == 3

    def test_shared_practice_across_procedures(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))

        smile = db.query(MedicalPractice).filter_by(name="Smile Dental Clinic").all()
        assert len(smile) == 1
        assert db.query(ProcedurePricing).filter_by(practice_id=smile[0].id).count() == 2

    def test_second_batch_with_new_procedure(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))
        extended = {
            "procedures": DENTAL_BATCH["procedures"]
            + [
                {
                    "name": "Teeth Whitening",
                    "category": "Cosmetic",
                    "practices": [{"practice_name": "Smile Dental Clinic", "cost": 300}],
                }
            ]
        }
        summary = importer.run(_batch(extended))

        assert summary.imported_procedures == 1
        assert summary.imported_practices == 0
        assert summary.imported_pricing_entries == 4
        assert db.query(ProcedurePricing).count() == 4

    def test_empty_batch(self, importer, db):
        summary = importer.run(_batch({"procedures": []}))
        assert summary.imported_procedures == 0
        assert summary.imported_practices == 0
        assert summary.imported_pricing_entries == 0

    def test_procedure_without_practices_is_still_created(self, importer, db):
        summary = importer.run(_batch({"procedures": [{"name": "Allergy Test"}]}))
        assert summary.imported_procedures == 1
        assert summary.imported_pricing_entries == 0


class TestBulkImportPricing:
    def test_repeated_practice_in_batch_last_write_wins(self, importer, db):
        """X-Ray with P1 at 50 then P1 at 75 → one row at 75, counted twice."""
        summary = importer.run(
            _batch(
                {
                    "procedures": [
                        {
                            "name": "X-Ray",
                            "practices": [
                                {"practice_name": "P1", "cost": 50},
                                {"practice_name": "P1", "cost": 75},
                            ],
                        }
                    ]
                }
            )
        )

        assert summary.imported_practices == 1
        assert summary.imported_pricing_entries == 2
        entries = db.query(ProcedurePricing).all()
        assert len(entries) == 1
        assert entries[0].cost == Decimal("75.00")

    def test_update_overwrites_cost_currency_notes(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))
        original = (
            db.query(ProcedurePricing)
            .join(MedicalPractice, ProcedurePricing.practice_id == MedicalPractice.id)
            .filter(MedicalPractice.name == "City Dental Care")
            .one()
        )
        original_id = original.id
        original_created_at = original.created_at

        importer.run(
            _batch(
                {
                    "procedures": [
                        {
                            "name": "Dental Cleaning",
                            "practices": [
                                {
                                    "practice_name": "City Dental Care",
                                    "cost": 135.5,
                                    "currency": "eur",
                                    "notes": "New price list",
                                }
                            ],
                        }
                    ]
                }
            )
        )

        db.expire_all()
        updated = db.get(ProcedurePricing, original_id)
        assert updated.cost == Decimal("135.50")
        assert updated.currency == "eur"
        assert updated.notes == "New price list"
        assert updated.created_at == original_created_at
        assert updated.updated_at >= original_created_at

    def test_existing_entities_are_not_overwritten(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))
        importer.run(
            _batch(
                {
                    "procedures": [
                        {
                            "name": "Dental Cleaning",
                            "description": "Changed description",
                            "category": "Changed",
                            "practices": [
                                {
                                    "practice_name": "Smile Dental Clinic",
                                    "address": "999 Elsewhere",
                                    "email": "new@smileclinic.com",
                                    "cost": 160,
                                }
                            ],
                        }
                    ]
                }
            )
        )

        db.expire_all()
        procedure = db.query(MedicalProcedure).filter_by(name="Dental Cleaning").one()
        assert procedure.description == "Regular dental cleaning and checkup"
        assert procedure.category == "Dental"

        practice = db.query(MedicalPractice).filter_by(name="Smile Dental Clinic").one()
        assert practice.address == "123 Main St"
        assert practice.email == "contact@smileclinic.com"

    def test_new_practice_gets_contact_details(self, importer, db):
        importer.run(_batch(DENTAL_BATCH))
        practice = db.query(MedicalPractice).filter_by(name="Smile Dental Clinic").one()
        assert practice.address == "123 Main St"
        assert practice.phone == "555-0123"
        assert practice.email == "contact@smileclinic.com"

    def test_currency_defaults_to_usd(self, importer, db):
        importer.run(
            _batch({"procedures": [{"name": "X-Ray", "practices": [{"practice_name": "P1", "cost": 50}]}]})
        )
        assert db.query(ProcedurePricing).one().currency == "USD"


class TestBulkImportAtomicity:
    def test_store_failure_rolls_back_whole_batch(self, importer, db, monkeypatch):
        real = bulk_importer.resolve_or_create
        calls = {"n": 0}

        def failing_resolve(*args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 5:  # second price lookup, after three rows were flushed
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            return real(*args, **kwargs)

        monkeypatch.setattr(bulk_importer, "resolve_or_create", failing_resolve)

        with pytest.raises(StoreError):
            importer.run(_batch(DENTAL_BATCH))

        assert db.query(MedicalProcedure).count() == 0
        assert db.query(MedicalPractice).count() == 0
        assert db.query(ProcedurePricing).count() == 0

    def test_failed_batch_leaves_earlier_data_intact(self, importer, db, monkeypatch):
        importer.run(_batch(DENTAL_BATCH))

        def always_fail(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(bulk_importer, "resolve_or_create", always_fail)
        with pytest.raises(StoreError):
            importer.run(_batch(DENTAL_BATCH))

        assert db.query(MedicalProcedure).count() == 2
        assert db.query(ProcedurePricing).count() == 3
