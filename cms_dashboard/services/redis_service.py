from datetime import timedelta
from typing import Optional, Type, TypeVar, Union

import redis.asyncio as redis
from pydantic import BaseModel, ValidationError

from cms_dashboard.configs.settings import settings
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


class RedisService:
    """Keeps dashboard blobs in Redis as JSON-serialized pydantic models.

    Every call degrades instead of raising: an unreachable server or an
    unreadable blob reads as ``None`` and a failed write returns ``False``,
    so a Redis outage only costs the caller its saved UI state.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self._redis_client: Optional[redis.Redis] = client
        self._connection_pool: Optional[redis.ConnectionPool] = None

    async def get_client(self) -> redis.Redis:
        if self._redis_client is None:
            await self._connect()
        return self._redis_client

    async def _connect(self):
        try:
            self._connection_pool = redis.ConnectionPool(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.redis_password or None,
                decode_responses=True,
                max_connections=20,
            )
            self._redis_client = redis.Redis(connection_pool=self._connection_pool)
            await self._redis_client.ping()
            logger.info(f"Connected to Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._redis_client = None
            raise

    async def close(self):
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
        if self._connection_pool:
            await self._connection_pool.disconnect()
            self._connection_pool = None

    async def load(self, key: str, model: Type[M]) -> Optional[M]:
        """Read ``key`` back into ``model``; missing, unreachable or unreadable all give None"""
        try:
            client = await self.get_client()
            raw = await client.get(key)
        except Exception as e:
            logger.error(f"Error reading {key}: {e}")
            return None

        if not raw:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError:
            logger.warning(f"Discarding unreadable {model.__name__} stored at {key}")
            return None

    async def store(self, key: str, value: BaseModel, ttl: Optional[Union[int, timedelta]] = None) -> bool:
        """Write ``value`` as JSON, expiring after ``ttl`` when one is given"""
        payload = value.model_dump_json()
        try:
            client = await self.get_client()
            if ttl:
                if isinstance(ttl, timedelta):
                    ttl = int(ttl.total_seconds())
                await client.setex(key, ttl, payload)
            else:
                await client.set(key, payload)
            return True
        except Exception as e:
            logger.error(f"Error writing {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            client = await self.get_client()
            return await client.delete(key) > 0
        except Exception as e:
            logger.error(f"Error deleting {key}: {e}")
            return False

    async def ping(self) -> bool:
        try:
            client = await self.get_client()
            await client.ping()
            return True
        except Exception as e:
            logger.error(f"Redis ping failed: {e}")
            return False


redis_service = RedisService()
