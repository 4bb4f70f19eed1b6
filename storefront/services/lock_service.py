import uuid

import redis
from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#compare and delete in one step, redis runs the script atomically
#so nobody can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    -checkout guard per (supermarket, buyer)
    -release only by the token holder (lua compare-and-delete)
    -expires on its own if the holder dies
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def checkout_key(supermarket_id: str, user_id: str) -> str:
        return f"checkout:{supermarket_id}:{user_id}:lock"

    @redis_retry()
    def acquire(self, key: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> str | None:
        token = uuid.uuid4().hex
        logger.info(f"Acquire lock {key}")
        #SET checkout:s1:u1:lock <token> NX EX 30
        acquired = self.redis.set(name=key, value=token, nx=True, ex=ttl)
        return token if acquired else None

    @redis_retry()
    def release(self, key: str, token: str) -> bool:
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
