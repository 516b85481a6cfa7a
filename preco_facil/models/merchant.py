"""Merchant model.

A merchant ("store" in user-facing text) publishes listings. Blocked stores
stay in the table but are invisible to search and trending offers.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from preco_facil.stores.postgres import Base


class Merchant(Base):
    """Store with credential, address and visibility flag."""

    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(255), unique=True)

    # Salted one-way hash (passlib); never the plaintext credential
    password_hash: Mapped[str] = mapped_column(String(255))

    # Relative path (e.g. "/uploads/logo-123.png"), resolved by the client
    logo_url: Mapped[str | None] = mapped_column(Text)

    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), default=Decimal("5.0"))
    is_blocked: Mapped[bool] = mapped_column(default=False, index=True)

    # Location
    lat: Mapped[float] = mapped_column(default=0.0)
    lon: Mapped[float] = mapped_column(default=0.0)
    street: Mapped[str | None] = mapped_column(Text)
    number: Mapped[str | None] = mapped_column(Text)
    neighborhood: Mapped[str | None] = mapped_column(Text)

    phone: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Merchant {self.id} {self.name}{' (blocked)' if self.is_blocked else ''}>"
