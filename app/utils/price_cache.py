import logging
from typing import Optional
from pydantic import ValidationError
from app.core.redis import get_redis
from app.core.config import settings
from app.core.metrics import cache_hits, cache_misses
from app.schemas.quote import QuoteRequest, QuoteResponse
from app.utils.hashing import payload_hash

logger = logging.getLogger(__name__)

CACHE_PREFIX = "price:"
# bumped by every catalog write; keys from older generations are never read again
GENERATION_KEY = "price-generation"


def quote_cache_key(req: QuoteRequest, generation: int = 0) -> str:
    return f"{CACHE_PREFIX}{generation}:{payload_hash(req.model_dump())}"


async def cache_key_for(req: QuoteRequest) -> Optional[str]:
    """Key for ``req`` under the current generation, or None when caching is off.

    Take the key before pricing so that a write racing an invalidation lands
    under the old generation.
    """
    redis = get_redis()
    if redis is None:
        return None
    try:
        generation = int(await redis.get(GENERATION_KEY) or 0)
    except Exception as e:
        logger.warning(f"Cache generation lookup failed: {e}")
        return None
    return quote_cache_key(req, generation)


async def get_cached_quote(key: Optional[str]) -> Optional[QuoteResponse]:
    redis = get_redis()
    if key is None or redis is None:
        return None
    try:
        cached = await redis.get(key)
        if not cached:
            cache_misses.labels(cache="quotes").inc()
            return None
        quote = QuoteResponse.model_validate_json(cached)
    except ValidationError as e:
        logger.warning(f"Discarding unreadable cached quote {key}: {e.error_count()} errors")
        cache_misses.labels(cache="quotes").inc()
        return None
    except Exception as e:
        logger.warning(f"Cache retrieval failed: {e}")
        return None
    cache_hits.labels(cache="quotes").inc()
    return quote


async def set_cached_quote(key: Optional[str], quote: QuoteResponse) -> None:
    redis = get_redis()
    if key is None or redis is None:
        return
    try:
        await redis.set(key, quote.model_dump_json(), ex=settings.PRICE_CACHE_TTL)
    except Exception as e:
        logger.warning(f"Cache write failed: {e}")


async def invalidate_price_cache() -> int:
    """Start a new cache generation and drop the cached quotes; called after catalog writes."""
    redis = get_redis()
    if redis is None:
        return 0
    removed = 0
    try:
        await redis.incr(GENERATION_KEY)
        async for key in redis.scan_iter(match=f"{CACHE_PREFIX}*"):
            removed += await redis.delete(key)
    except Exception as e:
        logger.warning(f"Cache invalidation failed: {e}")
    if removed:
        logger.info(f"Invalidated {removed} cached quotes")
    return removed
