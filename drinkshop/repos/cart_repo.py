# drinkshop/repos/cart_repo.py
from typing import Callable

import redis

from drinkshop.domain.cart import Cart
from drinkshop.utils.retry import redis_retry
from drinkshop.utils.settings import REDIS_URL, CART_TTL_SECONDS
from drinkshop.utils.logging import get_logger

logger = get_logger(__name__)

CONFLICT_MESSAGE = "Konflikt wspolbieznosci - koszyk zostal zmodyfikowany przez inna operacje"


class CartRepo:
    """
    Koszyk sesji trzymany tylko w pamieci (redis), bez bazy.
    Kazdy zapis przedluza TTL - aktywny uzytkownik nie traci koszyka.

    Optimistic locking przez WATCH: jesli klucz zmieni sie miedzy odczytem
    a zapisem, EXEC sie nie wykona i dostajemy RuntimeError.
    """

    def __init__(self, client: redis.Redis | None = None, ttl: int = CART_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"cart:{session_id}"

    @staticmethod
    def _parse(raw) -> Cart:
        if raw is None:
            return Cart()
        return Cart.model_validate_json(raw)

    @redis_retry()
    def get_cart(self, session_id: str) -> Cart:
        return self._parse(self.redis.get(self._key(session_id)))

    @redis_retry()
    def save_cart(self, session_id: str, cart: Cart) -> Cart:
        #SET cart:abc "{...}" EX 7200
        self.redis.set(self._key(session_id), cart.model_dump_json(), ex=self.ttl)
        return cart

    @redis_retry()
    def update_cart(self, session_id: str, mutate: Callable[[Cart], Cart]) -> Cart:
        """
        Odczyt -> mutate -> zapis jako jedna transakcja.
        Wyjatek z mutate przerywa operacje bez zapisu.
        """
        key = self._key(session_id)
        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(key)
                updated = mutate(self._parse(pipe.get(key)))
                pipe.multi()
                pipe.set(key, updated.model_dump_json(), ex=self.ttl)
                pipe.execute()
            except redis.WatchError as e:
                logger.warning(f"Konflikt zapisu koszyka {session_id}")
                raise RuntimeError(CONFLICT_MESSAGE) from e
        return updated

    @redis_retry()
    def claim_cart(self, session_id: str, expected: Cart) -> None:
        """
        Zdejmuje koszyk z sesji pod warunkiem ze nadal jest taki jak `expected`.
        Drugi rownolegly checkout tej samej sesji dostaje RuntimeError.
        """
        key = self._key(session_id)
        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(key)
                if self._parse(pipe.get(key)) != expected:
                    raise RuntimeError(CONFLICT_MESSAGE)
                pipe.multi()
                pipe.delete(key)
                pipe.execute()
            except redis.WatchError as e:
                raise RuntimeError(CONFLICT_MESSAGE) from e
        logger.info(f"Koszyk sesji {session_id} przejety przez checkout")

    @redis_retry()
    def delete_cart(self, session_id: str) -> None:
        logger.info(f"Usuwanie koszyka sesji {session_id}")
        self.redis.delete(self._key(session_id))
