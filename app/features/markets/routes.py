"""CRUD API routes for street markets."""

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import get_session_maker
from app.core.exceptions import BadRequestError, DatabaseError, NotFoundError
from app.core.logging import get_logger
from app.features.markets.query_params import parse_query_params
from app.features.markets.repository import MarketRepository
from app.features.markets.schemas import MarketCreate, MarketResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/feiras-livres", tags=["feiras-livres"])


def get_repository() -> MarketRepository:
    """Dependency providing a repository over the shared engine."""
    return MarketRepository(get_session_maker())


def _parse_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise BadRequestError("invalid id", details={"id": raw}) from e


@router.get(
    "",
    response_model=list[MarketResponse],
    summary="Query street markets",
    description="""
Filter street markets by `distrito`, `regiao5`, `nome_feira` and `bairro`
(case-insensitive substring match, combined with AND).

**Pagination**: `limit` falls back to the configured default when missing or
below 1 and is capped at the configured maximum; `offset` defaults to 0.
""",
)
async def query_markets(
    request: Request,
    repository: MarketRepository = Depends(get_repository),
) -> list[MarketResponse]:
    """Query markets with filters and pagination."""
    settings = get_settings()
    params = parse_query_params(
        request.query_params,
        default_limit=settings.pagination_default_limit,
        max_limit=settings.pagination_max_limit,
    )

    try:
        return await repository.query(params)
    except SQLAlchemyError as e:
        raise DatabaseError("could not query", details={"error": str(e)}) from e


@router.get(
    "/{market_id}",
    response_model=MarketResponse,
    summary="Get street market by id",
)
async def get_market(
    market_id: str,
    repository: MarketRepository = Depends(get_repository),
) -> MarketResponse:
    """Get one market.

    Raises:
        BadRequestError: If the id is not an integer.
        NotFoundError: If the market does not exist.
    """
    parsed_id = _parse_id(market_id)

    try:
        result = await repository.get_by_id(parsed_id)
    except SQLAlchemyError as e:
        raise DatabaseError("could not get by id", details={"error": str(e)}) from e

    if result is None:
        raise NotFoundError(details={"id": parsed_id})

    return result


@router.post(
    "",
    response_model=MarketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a street market",
)
async def create_market(
    body: MarketCreate,
    repository: MarketRepository = Depends(get_repository),
) -> MarketResponse:
    """Create a market; its id comes from the table sequence."""
    try:
        return await repository.create(body)
    except SQLAlchemyError as e:
        raise DatabaseError("could not create", details={"error": str(e)}) from e


@router.put(
    "/{market_id}",
    response_model=MarketResponse,
    summary="Update a street market",
)
async def update_market(
    market_id: str,
    body: MarketCreate,
    repository: MarketRepository = Depends(get_repository),
) -> MarketResponse:
    """Overwrite every field of a market.

    Raises:
        BadRequestError: If the id is not an integer.
        NotFoundError: If the market does not exist.
    """
    parsed_id = _parse_id(market_id)

    try:
        result = await repository.update(parsed_id, body)
    except SQLAlchemyError as e:
        raise DatabaseError("could not update", details={"error": str(e)}) from e

    if result is None:
        raise NotFoundError(details={"id": parsed_id})

    return result


@router.delete(
    "/{market_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove a street market",
)
async def remove_market(
    market_id: str,
    repository: MarketRepository = Depends(get_repository),
) -> Response:
    """Remove a market. Removing a missing id still answers 204."""
    parsed_id = _parse_id(market_id)

    try:
        await repository.remove(parsed_id)
    except SQLAlchemyError as e:
        raise DatabaseError("could not remove", details={"error": str(e)}) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
