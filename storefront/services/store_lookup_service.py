"""Resolve a public store slug to its store document.

The slug lives only in the ``store_names`` registry; stores, products and orders
are keyed by owner id. Resolution is therefore two reads: slug -> owner id, then
owner id -> store. Nothing is cached.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.store import Store, StoreName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedStore:
    """A store together with the registry record it was reached through."""

    record: StoreName
    store: Store

    @property
    def display_name(self) -> str | None:
        # The registry holds the name chosen at signup
        return self.record.store_name or self.store.store_name


class StoreLookupService:
    """Two-step slug resolution used by the storefront routes."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve_owner(self, slug: str) -> StoreName | None:
        """Look up the registry record for ``slug``."""
        return await self.db.get(StoreName, slug)

    async def load_store(self, owner_id: str) -> Store | None:
        """Load the store document keyed by ``owner_id``."""
        return await self.db.get(Store, owner_id)

    async def get_store_by_slug(self, slug: str) -> ResolvedStore | None:
        """Return the store for ``slug`` or None.

        A registry entry without a store is an inconsistency, but it is reported
        as not found like any other miss. Read failures are also reported as not
        found; the caller cannot tell them apart from a genuine absence.
        """
        try:
            record = await self.resolve_owner(slug)
            if record is None:
                return None

            store = await self.load_store(record.owner_id)
            if store is None:
                logger.warning(
                    "Store name %s points at owner %s but no store exists",
                    slug,
                    record.owner_id,
                )
                return None
        except SQLAlchemyError:
            logger.exception("Error fetching store data for %s", slug)
            return None

        return ResolvedStore(record=record, store=store)
