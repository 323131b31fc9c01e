"""
Service-layer exceptions.

Services raise these; routers translate NotFoundError into a 404 and the
app-level handler in app.main turns StoreError into a 503.
"""


class CatalogError(Exception):
    """Base class for errors raised by the catalog services."""


class NotFoundError(CatalogError):
    """A referenced procedure or practice id does not exist."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with id {entity_id} not found")


class StoreError(CatalogError):
    """A database write failed; the transaction has already been rolled back."""
