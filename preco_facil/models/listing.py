"""Listing model.

One merchant's price for one product, keyed by (store_id, product_id).
A promotion is active iff promo_price is set and promo_expires_at is strictly
after the evaluation time.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Numeric, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from preco_facil.stores.postgres import Base


class Listing(Base):
    """Price record of a merchant for a product."""

    __tablename__ = "prices"

    store_id: Mapped[int] = mapped_column(
        ForeignKey("stores.id", ondelete="CASCADE"),
        primary_key=True,
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    promo_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    promo_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True)

    # Relative path (e.g. "/uploads/image-123.jpg")
    image_url: Mapped[str | None] = mapped_column(Text)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Listing store={self.store_id} product={self.product_id} {self.price}>"
