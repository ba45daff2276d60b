"""Public health endpoint: is the API up, and does the todo store answer."""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """API status, database reachability, and which database backend is in use."""

    status: Literal["ok", "unavailable"]
    database: Literal["reachable", "unreachable"]
    dialect: str


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthResponse}},
)
async def health_check(
    response: Response,
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Report whether the API can serve requests.

    No identity is resolved here. An unreachable database is reported as 503.
    """
    dialect = db.get_bind().dialect.name
    try:
        await db.execute(select(literal(1)))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the %s database", dialect)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unavailable", database="unreachable", dialect=dialect)
    return HealthResponse(status="ok", database="reachable", dialect=dialect)
