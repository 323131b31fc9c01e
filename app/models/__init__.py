# Import all models here so Alembic's env.py can discover them via Base.metadata
from app.models.base import Base  # noqa: F401
from app.models.catalog import MedicalPractice, MedicalProcedure  # noqa: F401
from app.models.pricing import ProcedurePricing  # noqa: F401
