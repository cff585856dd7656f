"""
Mecanisme de retry avec backoff exponentiel pour les API externes.

Toutes les operations reseau instables (recherche Google, Jikan, Notion)
passent par un unique BackoffExecutor: chaque echec retryable est suivi
d'une attente de base_delay * 2^tentative avant de relancer, jusqu'a
MAX_RETRIES relances.

Usage:
    executor = BackoffExecutor(base_delay=0.1)
    hits = await executor.execute(lambda: search_client.search(query))

    # Avec un callback de succes
    await executor.execute(fetch, on_success=handle_result)
"""

import inspect
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
)

from malsync.utils.constants import MAX_RETRIES

T = TypeVar("T")

# Codes HTTP signalant un rate limiting ou une surcharge temporaire
RATE_LIMIT_STATUS_CODES = frozenset({429, 503})


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests (ou 503).

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


class BackoffExhaustedError(Exception):
    """
    Echec definitif apres epuisement des tentatives.

    Attributes:
        attempts: Nombre total de tentatives effectuees
        last_error: Derniere exception rencontree
    """

    def __init__(self, attempts: int, last_error: Optional[BaseException]) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Echec apres {attempts} tentative(s): {last_error}")


def check_rate_limit(response: httpx.Response) -> None:
    """
    Convertit une reponse 429/503 en RateLimitError.

    Args:
        response: Reponse httpx a verifier

    Raises:
        RateLimitError: Si le code HTTP signale un rate limiting
    """
    if response.status_code in RATE_LIMIT_STATUS_CODES:
        retry_after_header = response.headers.get("Retry-After")
        retry_after = int(retry_after_header) if retry_after_header and retry_after_header.isdigit() else None
        raise RateLimitError(retry_after)


class BackoffExecutor:
    """
    Executeur generique avec backoff exponentiel.

    Le delai avant la relance k (k = 0 pour la premiere relance) vaut
    base_delay * 2^k secondes, plafonne a max_delay.

    Attributes:
        MAX_RETRIES: Nombre de relances par defaut (16, soit 17 tentatives)

    Example:
        executor = BackoffExecutor(max_retries=5, base_delay=0.5)
        record = await executor.execute(lambda: jikan.get_media(5114, kind))
    """

    MAX_RETRIES: int = MAX_RETRIES

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        base_delay: float = 0.1,
        max_delay: float = 60.0,
        retry_on: tuple[type[BaseException], ...] = (RateLimitError,),
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ) -> None:
        """
        Initialise l'executeur.

        Args:
            max_retries: Nombre maximum de relances apres la premiere tentative
            base_delay: Unite de temps du backoff, en secondes
            max_delay: Delai maximum entre deux tentatives, en secondes
            retry_on: Types d'exception declenchant une relance
            sleep: Fonction d'attente async (injectable pour les tests)
        """
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._retry_on = retry_on
        self._sleep = sleep

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def delay_for(self, attempt_index: int) -> float:
        """Delai applique avant la relance d'index attempt_index."""
        return min(self._base_delay * 2**attempt_index, self._max_delay)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        """Trace chaque echec avant l'attente (marque retry=True pour le filtre console)."""
        error = retry_state.outcome.exception() if retry_state.outcome else None
        retry_logger = logger.bind(retry=True)
        retry_logger.warning(
            f"Echec tentative {retry_state.attempt_number}/{self._max_retries + 1}: {error!r}"
        )
        retry_logger.debug(f"Relance dans {self.delay_for(retry_state.attempt_number - 1)}s")

    def _build_retrying(self) -> AsyncRetrying:
        kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            kwargs["sleep"] = self._sleep
        return AsyncRetrying(
            retry=retry_if_exception_type(self._retry_on),
            wait=lambda retry_state: self.delay_for(retry_state.attempt_number - 1),
            stop=stop_after_attempt(self._max_retries + 1),
            before_sleep=self._log_retry,
            **kwargs,
        )

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        on_success: Optional[Callable[[T], Any]] = None,
    ) -> T:
        """
        Execute une operation async avec relances exponentielles.

        Args:
            operation: Fabrique de coroutine, rappelee a chaque tentative
            on_success: Callback (sync ou async) recevant le resultat

        Returns:
            Le resultat de l'operation

        Raises:
            BackoffExhaustedError: Si toutes les tentatives ont echoue
            Exception: Toute exception non retryable, propagee immediatement
        """
        try:
            async for attempt in self._build_retrying():
                with attempt:
                    result = await operation()
        except RetryError as e:
            last_error = e.last_attempt.exception()
            logger.error(f"Abandon apres {e.last_attempt.attempt_number} tentative(s): {last_error!r}")
            raise BackoffExhaustedError(e.last_attempt.attempt_number, last_error) from last_error

        if on_success is not None:
            outcome = on_success(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result
