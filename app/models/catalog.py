"""
Catalog entities: MedicalPractice and MedicalProcedure.

Names are the matching key for bulk import but are deliberately NOT unique
in storage — two explicit create calls with the same name produce two rows.
"""

from typing import Optional

from sqlalchemy import Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IntegerPrimaryKeyMixin


class MedicalPractice(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """A provider location that charges for procedures."""

    __tablename__ = "medical_practices"
    __table_args__ = (Index("medical_practices_name_idx", "name"),)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<MedicalPractice id={self.id} name={self.name!r}>"


class MedicalProcedure(Base, IntegerPrimaryKeyMixin, CreatedAtMixin):
    """A named medical service, priced per practice via ProcedurePricing."""

    __tablename__ = "medical_procedures"
    __table_args__ = (
        Index("medical_procedures_name_idx", "name"),
        Index("medical_procedures_category_idx", "category"),
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Free text, matched exactly by search"
    )

    def __repr__(self) -> str:
        return f"<MedicalProcedure id={self.id} name={self.name!r}>"
