"""Pricing quote endpoint with Redis caching"""
import logging
from fastapi import APIRouter, Depends, Request

from app.schemas.quote import QuoteRequest, QuoteResponse
from app.services.pricing import resolve_price
from app.repositories.pricing import PricingRepository, get_pricing_repository
from app.core.rate_limit import check_rate_limit
from app.utils.price_cache import cache_key_for, get_cached_quote, set_cached_quote

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/calc", response_model=QuoteResponse)
async def calc_quote(
    req: QuoteRequest,
    request: Request,
    repository: PricingRepository = Depends(get_pricing_repository),
):
    client_id = request.client.host if request.client else "anonymous"
    await check_rate_limit(client_id)

    cache_key = await cache_key_for(req)
    cached = await get_cached_quote(cache_key)
    if cached is not None:
        return cached

    result = await resolve_price(repository, req.service_id, req.coordinates)
    await set_cached_quote(cache_key, result)
    return result
