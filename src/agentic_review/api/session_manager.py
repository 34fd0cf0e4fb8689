"""
Background session manager for the single live review.

The review runs independently of client SSE connections, allowing:
- Page reloads without losing progress
- Reconnection to an ongoing review
- Event history for late-joining clients
"""

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import AsyncIterator, Callable
from functools import lru_cache

from agentic_review.models import LogStatus, ReviewStatus, Session, WorkflowEvent
from agentic_review.review.orchestrator import (
    UNKNOWN_ERROR_MESSAGE,
    ReviewRequest,
    WorkflowOrchestrator,
)
from agentic_review.review.projector import SessionProjector

logger = logging.getLogger(__name__)

# Maximum events to buffer (prevent memory issues)
MAX_EVENT_BUFFER = 2000

# Seconds without events before a keepalive ping is sent
PING_INTERVAL_SECONDS = 30.0


class ReviewSessionManager:
    """
    Owns the one live review session.

    Events from the running orchestrator are applied to the projector, kept
    in a history buffer and fanned out to subscriber queues. ``None`` on a
    queue signals that the review finished.

    ``start``, ``reset`` and ``cancel`` are serialised so that at most one
    review task is ever live.
    """

    def __init__(self, orchestrator_factory: Callable[[], WorkflowOrchestrator] | None = None):
        self._orchestrator_factory = orchestrator_factory or WorkflowOrchestrator
        self._lock = asyncio.Lock()
        self.projector = SessionProjector()
        self.request: ReviewRequest | None = None
        self.task: asyncio.Task | None = None
        self.events: deque[WorkflowEvent] = deque(maxlen=MAX_EVENT_BUFFER)
        self.subscribers: list[asyncio.Queue] = []

    @property
    def session(self) -> Session:
        return self.projector.session

    @property
    def is_running(self) -> bool:
        return self.task is not None and not self.task.done()

    async def start(self, request: ReviewRequest) -> Session:
        """
        Start a new review in the background, replacing any previous one.

        Args:
            request: Review request

        Returns:
            The freshly reset, in-progress session
        """
        async with self._lock:
            await self._cancel_running()
            self._clear()

            self.request = request
            self.projector.start()
            self.task = asyncio.create_task(self._run(request), name="agentic-review")

        logger.info(f"Started background review for {request.repo_url}@{request.branch}")
        return self.session

    async def reset(self) -> Session:
        """Cancel in-flight work and return to an idle session."""
        async with self._lock:
            await self._cancel_running()
            self._clear()
            self.request = None
            return self.projector.reset()

    async def cancel(self) -> bool:
        """Cancel the running review, waiting for it to unwind."""
        async with self._lock:
            return await self._cancel_running()

    async def _cancel_running(self) -> bool:
        if not self.is_running:
            return False

        self.task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self.task
        logger.info("Running review cancelled")
        return True

    async def _run(self, request: ReviewRequest) -> None:
        try:
            orchestrator = self._orchestrator_factory()
            await orchestrator.run(request, self._handle_event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Orchestrator construction failed before any step ran
            logger.exception("Failed to start review")
            message = str(e) or UNKNOWN_ERROR_MESSAGE
            await self._handle_event(WorkflowEvent.failure(f"Review failed: {message}"))
            await self._handle_event(WorkflowEvent.log_update(LogStatus.ERROR, f"Error: {message}"))
            await self._handle_event(WorkflowEvent.status(ReviewStatus.ERROR))
        finally:
            self._close_subscribers()

    async def _handle_event(self, event: WorkflowEvent) -> None:
        """Apply an event and notify subscribers."""
        self.projector.apply(event)
        self.events.append(event)

        for queue in self.subscribers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning("Subscriber queue full, dropping event")

    def _clear(self) -> None:
        self._close_subscribers()
        self.subscribers = []
        self.events.clear()

    def _close_subscribers(self) -> None:
        for queue in self.subscribers:
            with contextlib.suppress(asyncio.QueueFull):
                queue.put_nowait(None)

    def subscribe(self) -> asyncio.Queue:
        """Create a new subscriber queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=MAX_EVENT_BUFFER)
        self.subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        """Remove a subscriber queue."""
        if queue in self.subscribers:
            self.subscribers.remove(queue)

    def get_history(self) -> list[WorkflowEvent]:
        """Get all buffered events."""
        return list(self.events)

    async def stream_events(
        self, ping_interval: float = PING_INTERVAL_SECONDS
    ) -> AsyncIterator[dict[str, str]]:
        """
        Generate SSE events.

        Replays the buffered history, then streams live events until the
        review finishes. A ping is sent after ``ping_interval`` seconds of
        silence.
        """
        queue = self.subscribe()

        try:
            for event in self.get_history():
                yield event.to_sse()

            if not self.is_running:
                return

            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=ping_interval)
                except asyncio.TimeoutError:
                    yield {"event": "ping", "data": "{}"}
                    continue

                if event is None:
                    break
                yield event.to_sse()

        finally:
            # Client disconnected; the review keeps running
            self.unsubscribe(queue)


@lru_cache
def get_session_manager() -> ReviewSessionManager:
    """Get the global ReviewSessionManager instance."""
    return ReviewSessionManager()
