"""Promotional slot counter."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base

EARLY_ACCESS_PROMO_ID = "earlyAccess"


class PromoConfig(Base):
    """Singleton counter granting the pro plan to the first ``total_spots`` signups.

    ``used_spots <= total_spots`` holds as long as every claim goes through
    ``PromoService.claim_spot``.
    """

    __tablename__ = "promo_config"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=EARLY_ACCESS_PROMO_ID)
    total_spots: Mapped[int] = mapped_column(Integer, default=100, nullable=False)
    used_spots: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def spots_left(self) -> int:
        return (self.total_spots or 0) - (self.used_spots or 0)

    def __repr__(self) -> str:
        return f"<PromoConfig {self.id} {self.used_spots}/{self.total_spots}>"
