from redis import Redis

from studio.core.config import settings

redis_client = Redis.from_url(settings.REDIS_URL)
