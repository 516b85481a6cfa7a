"""Counter tables: search term tally and site statistics.

Both are incremented with single-statement upserts
(INSERT ... ON CONFLICT DO UPDATE SET x = x + 1), never read-then-write.
"""

from sqlalchemy import BigInteger, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from preco_facil.stores.postgres import Base

VISITS_STAT_KEY = "total_visits"


class SearchTerm(Base):
    """Occurrence counter per lower-cased search term."""

    __tablename__ = "search_history"

    term: Mapped[str] = mapped_column(Text, primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=1, index=True)

    def __repr__(self) -> str:
        return f"<SearchTerm {self.term!r} x{self.count}>"


class SiteStat(Base):
    """Named monotonically increasing counter (e.g. total_visits)."""

    __tablename__ = "site_stats"

    stat_key: Mapped[str] = mapped_column(String(255), primary_key=True)
    stat_value: Mapped[int] = mapped_column(BigInteger, default=0)
