"""Redis connection for state shared across worker processes."""

import logging
import redis

logger = logging.getLogger(__name__)

# One client per URL, created lazily
_clients = {}


def get_redis(redis_url):
    """Get or create a Redis connection. Returns None when unavailable."""
    if not redis_url:
        logger.warning("REDIS_URL not set - shared hot cache is unavailable")
        return None
    
    if redis_url in _clients:
        return _clients[redis_url]
    
    try:
        client = redis.from_url(redis_url, decode_responses=True)
        # Test connection
        client.ping()
        logger.info("Redis connected successfully")
        _clients[redis_url] = client
        return client
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        return None
