"""Autosave Task."""

import asyncio

from core import get_logger
from document.store import BuilderStore


logger = get_logger(__name__)


class AutosaveTask:
    """Periodically saves the page when it has unsaved changes.

    Runs on the same event loop as the UI, so each tick snapshots the forest
    between edits, never during one. The gateway call itself runs in the
    default executor and never blocks the loop.
    """

    def __init__(self, store: BuilderStore, interval: float = 30.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.store = store
        self.interval = interval
        self.saves = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("autosave_started", interval=self.interval)

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("autosave_stopped", saves=self.saves)

    async def tick(self) -> bool:
        """One autosave attempt. Returns True if the page was saved."""
        if not self.store.is_dirty:
            return False

        logger.debug("autosave_saving", page_id=self.store.page_id)
        saved = await self.store.autosave_async()
        if saved:
            self.saves += 1
        else:
            logger.warning("autosave_failed", page_id=self.store.page_id)
        return saved

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception as e:
                # Keep ticking; next interval retries
                logger.error("autosave_error", error=str(e), exc_info=True)
