"""Product model.

Products are shared across merchants and created lazily by the first publish
under a name. `name_key` (lower-cased name) carries the unique constraint so
concurrent first publishes cannot create two rows for the same name.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from preco_facil.stores.postgres import Base


def product_name_key(name: str) -> str:
    """Case-insensitive identity of a product name."""
    return name.strip().lower()


class Product(Base):
    """Canonical product name with optional category."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Display name as first published
    name: Mapped[str] = mapped_column(String(255))
    name_key: Mapped[str] = mapped_column(String(255), unique=True)

    category: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product {self.name}>"
