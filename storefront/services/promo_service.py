"""Early-access promotion: the first N signups get the pro plan."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.promo import EARLY_ACCESS_PROMO_ID, PromoConfig

logger = logging.getLogger(__name__)

# Attempts when two signups race to create the counter row
MAX_CLAIM_ATTEMPTS = 3


class PromoService:
    """Atomic claim of a promotional slot."""

    def __init__(self, db: AsyncSession, *, total_spots: int = 100) -> None:
        self.db = db
        self.total_spots = total_spots

    async def claim_spot(self) -> bool:
        """Claim one early-access spot.

        The counter is read, checked and incremented in one transaction with
        the row locked, so concurrent signups cannot oversell the last spot.
        Any failure denies the promotion instead of failing the signup.

        Returns:
            True if a spot was granted.
        """
        for attempt in range(1, MAX_CLAIM_ATTEMPTS + 1):
            try:
                granted = await self._claim_once()
                await self.db.commit()
            except IntegrityError:
                # Another signup created the counter first; re-read it.
                await self.db.rollback()
                logger.info("Promo counter created concurrently (attempt %d)", attempt)
                continue
            except SQLAlchemyError:
                await self.db.rollback()
                logger.exception("Error checking promo")
                return False

            logger.info("Promo spot %s", "granted" if granted else "denied")
            return granted

        return False

    async def _claim_once(self) -> bool:
        stmt = (
            select(PromoConfig)
            .where(PromoConfig.id == EARLY_ACCESS_PROMO_ID)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        promo = (await self.db.execute(stmt)).scalar_one_or_none()

        if promo is None:
            self.db.add(
                PromoConfig(
                    id=EARLY_ACCESS_PROMO_ID,
                    total_spots=self.total_spots,
                    used_spots=1,
                    is_active=True,
                )
            )
            await self.db.flush()
            return True

        if promo.is_active and promo.spots_left > 0:
            promo.used_spots = (promo.used_spots or 0) + 1
            return True

        return False
