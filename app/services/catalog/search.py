"""
Procedure search — case-insensitive substring match on name, optional
exact category filter, alphabetical order, truncated to max_results.

There is no relevance ranking: an exact name match sorts among partial
matches purely by name.
"""

from sqlalchemy.orm import Session

from app.models.catalog import MedicalProcedure
from app.schemas.search import ProcedureSearchParams

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def search_procedures(
    db: Session, params: ProcedureSearchParams
) -> list[MedicalProcedure]:
    pattern = f"%{escape_like(params.query)}%"
    q = db.query(MedicalProcedure).filter(
        MedicalProcedure.name.ilike(pattern, escape=LIKE_ESCAPE)
    )
    if params.category is not None:
        q = q.filter(MedicalProcedure.category == params.category)

    return q.order_by(MedicalProcedure.name.asc()).limit(params.max_results).all()
