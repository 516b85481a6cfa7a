"""SQLAlchemy ORM models.

Models represent database tables:
- stores: Merchants with credentials, address and block flag
- products: Canonical product names shared across merchants
- prices: Listings (merchant x product) with optional promotion
- search_history: Search term tally
- site_stats: Visit counter
"""

from preco_facil.models.listing import Listing
from preco_facil.models.merchant import Merchant
from preco_facil.models.product import Product, product_name_key
from preco_facil.models.stats import VISITS_STAT_KEY, SearchTerm, SiteStat

__all__ = [
    "Listing",
    "Merchant",
    "Product",
    "SearchTerm",
    "SiteStat",
    "VISITS_STAT_KEY",
    "product_name_key",
]
