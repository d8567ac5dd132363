"""Street market (feira livre) registry: model, repository and CRUD API."""

from app.features.markets.models import StreetMarket
from app.features.markets.records import MarketRecord
from app.features.markets.repository import MarketRepository, MarketStore
from app.features.markets.routes import router
from app.features.markets.schemas import MarketCreate, MarketQueryParams, MarketResponse

__all__ = [
    "MarketCreate",
    "MarketQueryParams",
    "MarketRecord",
    "MarketRepository",
    "MarketResponse",
    "MarketStore",
    "StreetMarket",
    "router",
]
