"""
Pool endpoints
==============

POST /api/v1/pools/search -- rank the supplied in-progress trips a new
                             rider could join

The caller supplies the candidate snapshot; nothing is read from or written
to storage here.  Results are advisory and must be re-checked when the join
is committed.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ridematch.api.dependencies import get_pool_matcher
from ridematch.api.middleware import limiter
from ridematch.api.schemas import (
    ErrorResponse,
    PoolCandidateResponse,
    PoolSearchRequest,
)
from ridematch.domain.matching import PoolMatcher

router = APIRouter(prefix="/pools", tags=["pools"])


@router.post(
    "/search",
    response_model=list[PoolCandidateResponse],
    summary="Find compatible pools for a ride request",
    responses={422: {"model": ErrorResponse}},
)
@limiter.limit("100/minute")
async def search_pools(
    request: Request,
    body: PoolSearchRequest,
    matcher: PoolMatcher = Depends(get_pool_matcher),
):
    ride_request = body.request.to_domain()
    candidates = [c.to_domain() for c in body.candidates]
    pools = await matcher.find_available_pools(ride_request, candidates)
    return [PoolCandidateResponse.model_validate(p) for p in pools]
