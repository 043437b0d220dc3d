import uuid

import redis

from storefront.utils.retry import redis_retry
from storefront.utils.settings import REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nie da sie wcisnac miedzy GET a DEL
#wiec lock zwalnia tylko ten, kto go zalozyl (porownanie tokenu)


class LockService:
    """
    -blokada skladania zamowienia dla sesji koszyka (jedno naraz)
    -zwalnianie locka
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client if client is not None else redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def new_token() -> str:
        return uuid.uuid4().hex

    @redis_retry()
    def acquire_checkout_lock(self, session_id: str, token: str, ttl: int) -> bool:
        key = f"checkout:{session_id}:lock"
        logger.info(f"Acquire lock {key}")
        #SET checkout:abc:lock "<token>" NX EX 30
        return bool(self.redis.set(
            name=key,
            value=token,
            nx=True, #tylko jesli nie istnieje, inaczej False
            ex=ttl, #wygasa sam, gdyby proces padl w trakcie
        ))

    @redis_retry()
    def release_checkout_lock(self, session_id: str, token: str) -> bool:
        key = f"checkout:{session_id}:lock"
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
