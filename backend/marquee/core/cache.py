import json
import logging
import zlib
from typing import Optional, Any
import redis
from .config import get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Redis JSON cache for catalog responses (optionally zlib-compressed).

    Cache failures never propagate: a broken Redis just means a miss.
    """

    def __init__(self, url: Optional[str] = None, compress: bool = True, prefix: str = "marquee:", client=None):
        if client is None:
            client = redis.Redis.from_url(url or get_settings().REDIS_URL, decode_responses=False)
        self.redis = client
        self.compress = compress
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get_json(self, key: str) -> Optional[Any]:
        try:
            data = self.redis.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if data is None:
            return None
        if self.compress:
            try:
                data = zlib.decompress(data)
            except zlib.error:
                pass
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)
        except (UnicodeDecodeError, ValueError):
            logger.warning(f"Discarding unreadable cache entry {key}")
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        raw = json.dumps(value, ensure_ascii=False).encode("utf-8")
        payload = zlib.compress(raw) if self.compress else raw
        try:
            self.redis.setex(self._key(key), ttl_seconds, payload)
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")
            return False
        return True
