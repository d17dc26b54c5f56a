import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

logger = logging.getLogger(__name__)

FetchFn = Callable[[], Awaitable[Any]]
ResultFn = Callable[[Any], None]
ErrorFn = Callable[[Exception], None]
SleepFn = Callable[[float], Awaitable[None]]


class Poller:
    """Invokes a fetch function now and then every ``interval`` seconds.

    Ticks are wall-clock based: a slow fetch does not delay the next tick, so
    invocations can overlap. Each invocation runs in its own task and its
    result is handed to ``on_result`` when it arrives, so the most recently
    completed fetch always wins. Once disposed, no new invocations start and
    results of in-flight ones are dropped.
    """

    def __init__(
        self,
        fetch: FetchFn,
        interval: float,
        on_result: ResultFn,
        on_error: Optional[ErrorFn] = None,
        *,
        sleep: SleepFn = asyncio.sleep,
        name: Optional[str] = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result
        self.on_error = on_error
        self.name = name or getattr(fetch, "__name__", "poller")
        self._sleep = sleep
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._disposed = False
        self.invocations = 0
        self.latest_result: Any = None
        self.latest_error: Optional[Exception] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._disposed

    @property
    def disposed(self) -> bool:
        return self._disposed

    def start(self) -> Callable[[], None]:
        """Start polling. Must be called from a running event loop.

        Returns:
            A disposer that stops the poller.
        """
        if self._disposed:
            raise RuntimeError(f"Poller {self.name} has been disposed")
        if self._timer is not None:
            raise RuntimeError(f"Poller {self.name} already started")

        logger.info(f"Starting poller {self.name} (every {self.interval}s)")
        self._spawn()
        self._timer = asyncio.get_running_loop().create_task(self._run())
        return self.dispose

    def dispose(self) -> None:
        """Cancel the timer and drop any results still in flight."""
        if self._disposed:
            return
        self._disposed = True
        if self._timer is not None:
            self._timer.cancel()
        logger.info(f"Stopped poller {self.name} ({len(self._in_flight)} fetches abandoned)")

    async def _run(self):
        while True:
            await self._sleep(self.interval)
            if self._disposed:
                return
            self._spawn()

    def _spawn(self):
        self.invocations += 1
        logger.debug(f"Poller {self.name} tick #{self.invocations}")
        task = asyncio.get_running_loop().create_task(self._invoke())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _invoke(self):
        try:
            result = await self.fetch()
        except Exception as e:
            if self._disposed:
                logger.debug(f"Poller {self.name} dropped error after dispose: {e}")
                return
            self.latest_error = e
            logger.debug(f"Poller {self.name} fetch failed: {e}")
            if self.on_error is not None:
                self.on_error(e)
            return

        if self._disposed:
            logger.debug(f"Poller {self.name} dropped result after dispose")
            return
        self.latest_result = result
        self.on_result(result)
