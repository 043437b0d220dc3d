# storefront/services/cart_store.py
"""
Magazyn koszyka, odpowiednik localStorage["cartItems"] w przegladarce.

Kazda zmiana zapisuje cala liste pozycji (bez zapisow przyrostowych).
Odczyt jest "best effort": niedostepny magazyn albo uszkodzone dane daja
pusty koszyk zamiast wyjatku.
"""
from typing import Dict, List, Optional, Protocol

import redis
from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from storefront.domain import cart_rules
from storefront.domain.schemas import CartKey, CartLine
from storefront.utils.logging import get_logger
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CART_TTL_SECONDS, REDIS_URL

logger = get_logger(__name__)

STORAGE_KEY = "cartItems"

_lines_adapter = TypeAdapter(List[CartLine])


class CartStorage(Protocol):
    def read(self, session_id: str) -> Optional[str]: ...

    def write(self, session_id: str, payload: str) -> None: ...

    def delete(self, session_id: str) -> None: ...


class RedisCartStorage:
    def __init__(self, url: str | None = None, ttl: int = CART_TTL_SECONDS, client: redis.Redis | None = None):
        self.redis = client if client is not None else redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"cart:{session_id}:{STORAGE_KEY}"

    @redis_retry()
    def read(self, session_id: str) -> Optional[str]:
        return self.redis.get(self._key(session_id))

    @redis_retry()
    def write(self, session_id: str, payload: str) -> None:
        self.redis.set(self._key(session_id), payload, ex=self.ttl)

    @redis_retry()
    def delete(self, session_id: str) -> None:
        self.redis.delete(self._key(session_id))


class MemoryCartStorage:
    """Magazyn w pamieci procesu (dev, testy)."""

    def __init__(self):
        self.data: Dict[str, str] = {}

    def read(self, session_id: str) -> Optional[str]:
        return self.data.get(session_id)

    def write(self, session_id: str, payload: str) -> None:
        self.data[session_id] = payload

    def delete(self, session_id: str) -> None:
        self.data.pop(session_id, None)


class CartStore:
    def __init__(self, storage: CartStorage):
        self.storage = storage

    def get(self, session_id: str) -> List[CartLine]:
        try:
            raw = self.storage.read(session_id)
        except RedisError as e:
            logger.warning(f"Magazyn koszyka niedostepny dla sesji {session_id}: {e}")
            return []
        except UnicodeDecodeError as e:
            # wartosc pod kluczem to nie UTF-8
            logger.warning(f"Uszkodzony koszyk w sesji {session_id}, zwracam pusty: {e}")
            return []

        if not raw:
            return []

        try:
            return _lines_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Uszkodzony koszyk w sesji {session_id}, zwracam pusty: {e}")
            return []

    def _save(self, session_id: str, lines: List[CartLine]) -> List[CartLine]:
        self.storage.write(session_id, _lines_adapter.dump_json(lines).decode())
        return lines

    def add(self, session_id: str, line: CartLine) -> List[CartLine]:
        lines = cart_rules.merge_line(self.get(session_id), line)
        logger.info(f"Dodano {line.key} x{line.quantity} do koszyka {session_id}")
        return self._save(session_id, lines)

    def update_quantity(self, session_id: str, key: CartKey, delta: int) -> List[CartLine]:
        lines = cart_rules.apply_quantity_delta(self.get(session_id), key, delta)
        return self._save(session_id, lines)

    def remove(self, session_id: str, key: CartKey) -> List[CartLine]:
        lines = cart_rules.remove_line(self.get(session_id), key)
        logger.info(f"Usunieto {key} z koszyka {session_id}")
        return self._save(session_id, lines)

    def clear(self, session_id: str) -> None:
        self.storage.delete(session_id)
        logger.info(f"Koszyk {session_id} wyczyszczony")
