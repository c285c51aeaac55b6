"""Pseudonym Route — POST /pseudonym turns a pseudonym pair + date into the stable pseudonym.

Invariants:
    - Only JSON bodies accepted (415 otherwise); body validated by PseudonymInput before
      the processor runs
    - Resolver errors propagate to the global handlers (500 integrity, 503 database)
    - Raw pseudonyms are never logged

Design Decisions:
    - Processor built per request from dependencies: tests override get_today / get_token_hasher
    - get_token_hasher cached: pepper decoded once per process
"""

import logging
from datetime import date
from functools import lru_cache
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from surveillance_pseudonym.config import Settings, get_settings
from surveillance_pseudonym.core.hash_tokens import TokenHasher
from surveillance_pseudonym.infrastructure.database import get_db
from surveillance_pseudonym.schemas.pseudonym import PseudonymInput, PseudonymOutput
from surveillance_pseudonym.services.pseudonym_processor import PseudonymProcessor

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pseudonym"])


@lru_cache
def get_token_hasher() -> TokenHasher:
    return TokenHasher(get_settings().hash_pepper)


def get_today() -> Callable[[], date]:
    return date.today


def get_pseudonym_processor(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    hasher: TokenHasher = Depends(get_token_hasher),
    today: Callable[[], date] = Depends(get_today),
) -> PseudonymProcessor:
    return PseudonymProcessor(db, settings, hasher, today)


def require_json(request: Request) -> None:
    """Reject bodies that are not JSON before the body is validated."""
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if media_type != "application/json" and not media_type.endswith("+json"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Content-Type must be application/json",
        )


@router.post(
    "/pseudonym",
    response_model=PseudonymOutput,
    dependencies=[Depends(require_json)],
)
async def create_pseudonym(
    body: PseudonymInput,
    processor: PseudonymProcessor = Depends(get_pseudonym_processor),
):
    """Resolve the stable pseudonym for the subject behind the pseudonym pair."""
    return await processor.create_pseudonym(body)
