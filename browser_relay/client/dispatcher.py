# Browser Relay Retry Dispatcher
"""
Client side delivery of log batches to the relay.

Each send() gets its own retry task and RetryState. A failed delivery is
retried on a fixed backoff schedule with the same batch; once the
schedule is used up the batch is dropped. Nothing is ever raised to the
caller of send().
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, Set, Tuple

import httpx

from browser_relay.config import Settings

logger = logging.getLogger(__name__)

# Seconds to wait before retry 1..5
RETRY_DELAYS: Tuple[float, ...] = (1.0, 2.0, 4.0, 8.0, 16.0)

# Per-attempt network timeout, below the shortest retry delay
DEFAULT_TIMEOUT = 0.9

DeliverFn = Callable[[Sequence[Dict[str, Any]], str], Awaitable[None]]
SleepFn = Callable[[float], Awaitable[None]]


class DeliveryError(Exception):
    """The relay did not acknowledge a batch."""


@dataclass
class RetryState:
    """Delivery progress of one batch; owned by its retry task."""
    batch: Tuple[Dict[str, Any], ...]
    session_id: str
    attempt_count: int = 0


def generate_session_id() -> str:
    """Session id for one client lifecycle."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class RetryDispatcher:
    """
    Fire-and-forget sender with bounded exponential backoff.

    Usage:
        dispatcher = RetryDispatcher("http://127.0.0.1:27497")
        dispatcher.send([{"level": "info", "message": "hi", "timestamp": "..."}])
        await dispatcher.aclose()
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:27497",
        session_id: Optional[str] = None,
        delays: Sequence[float] = RETRY_DELAYS,
        timeout: float = DEFAULT_TIMEOUT,
        deliver: Optional[DeliverFn] = None,
        sleep: SleepFn = asyncio.sleep,
    ):
        """
        Initialize dispatcher.

        Args:
            base_url: Relay base URL, batches go to {base_url}/logs
            session_id: Session id for all batches, generated if omitted
            delays: Backoff schedule, one entry per retry
            timeout: Network timeout for one attempt
            deliver: Delivery coroutine replacing the HTTP post
            sleep: Coroutine used to wait between attempts
        """
        self.base_url = base_url.rstrip("/")
        self.session_id = session_id or generate_session_id()
        self.delays = tuple(delays)
        self.timeout = timeout
        self._deliver = deliver or self._post_batch
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None
        self._tasks: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "RetryDispatcher":
        """Create a dispatcher targeting the configured relay."""
        return cls(base_url=settings.relay_url, timeout=settings.request_timeout, **kwargs)

    @property
    def pending(self) -> int:
        """Number of batches still being delivered."""
        return len(self._tasks)

    @property
    def max_attempts(self) -> int:
        return len(self.delays) + 1

    def _get_client(self) -> httpx.AsyncClient:
        """Get HTTP client, creating one if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def _post_batch(self, batch: Sequence[Dict[str, Any]], session_id: str) -> None:
        client = self._get_client()
        try:
            response = await client.post("/logs", json={"logs": list(batch), "sessionId": session_id})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(f"Server responded with {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise DeliveryError(f"Request failed: {e}") from e

    def send(self, batch: Sequence[Dict[str, Any]]) -> asyncio.Task:
        """
        Start delivering a batch and return immediately.

        Must be called from a running event loop. The returned task
        resolves to True when the batch was acknowledged, False when it
        was dropped.
        """
        state = RetryState(batch=tuple(batch), session_id=self.session_id)
        task = asyncio.create_task(self._deliver_with_retry(state))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver_with_retry(self, state: RetryState) -> bool:
        while True:
            try:
                await self._deliver(state.batch, state.session_id)
                if state.attempt_count:
                    logger.debug(f"Batch of {len(state.batch)} delivered after {state.attempt_count} retries")
                return True
            except Exception as e:
                if state.attempt_count >= len(self.delays):
                    logger.warning(
                        f"Dropping batch of {len(state.batch)} logs after "
                        f"{state.attempt_count + 1} attempts: {e}"
                    )
                    return False
                delay = self.delays[state.attempt_count]
                state.attempt_count += 1
                logger.debug(f"Delivery failed, retry {state.attempt_count} in {delay}s: {e}")
                await self._sleep(delay)

    async def drain(self) -> None:
        """Wait for every in-flight batch to be delivered or dropped."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        """Drain pending batches and close the HTTP client."""
        await self.drain()
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RetryDispatcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
