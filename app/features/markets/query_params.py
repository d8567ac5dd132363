"""Binding of raw query-string pairs to MarketQueryParams."""

from collections.abc import Mapping

from app.features.markets.schemas import MarketQueryParams
from app.shared.schemas import Pagination

FILTER_KEYS = ("distrito", "regiao5", "nome_feira", "bairro")


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_query_params(
    raw: Mapping[str, str],
    default_limit: int,
    max_limit: int,
) -> MarketQueryParams:
    """Parse query-string pairs into filters and a clamped pagination.

    Unknown keys are ignored. Empty filter values count as absent. An
    unparseable limit or offset behaves as if it were missing.

    Args:
        raw: Query-string key/value pairs.
        default_limit: Limit used when none (or a non-positive one) is given.
        max_limit: Upper bound for the limit.

    Returns:
        Parsed query parameters.
    """
    filters = {key: raw[key] for key in FILTER_KEYS if raw.get(key)}
    pagination = Pagination.clamped(
        limit=_to_int(raw.get("limit")),
        offset=_to_int(raw.get("offset")),
        default_limit=default_limit,
        max_limit=max_limit,
    )
    return MarketQueryParams(**filters, pagination=pagination)
