"""
runner.py — Background enrichment and idea creation.

Enrichment is fire-and-forget from the caller's point of view, but every
submission returns a Future[EnrichmentResult] the caller may inspect. A
second submission for an idea that is still in flight returns the same
future instead of starting another run.

Usage:
    runner = EnrichmentRunner(orchestrator)
    created = create_idea(store, runner, {"group_slug": "alps", "prompt": "..."})
    created.enrichment.result().success
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .models import EnrichmentResult, GroupNotFoundError, Idea, IdeaStatus
from .notify import NotificationSink, fire_and_forget
from .orchestrator import EnrichmentOrchestrator
from .store import InMemoryRecordStore
from .validate import CreateIdeaInput, validate_input

logger = logging.getLogger(__name__)


class EnrichmentRunner:
    """Runs EnrichmentOrchestrator.enrich in a worker pool."""

    def __init__(self, orchestrator: EnrichmentOrchestrator, max_workers: int = 4) -> None:
        self.orchestrator = orchestrator
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="enrich")
        self._lock = threading.Lock()
        self._in_flight: Dict[str, Future] = {}

    def submit(self, idea_id: str) -> "Future[EnrichmentResult]":
        with self._lock:
            future = self._in_flight.get(idea_id)
            if future is not None:
                logger.info("Enrichment already running for idea %s", idea_id)
                return future
            future = self._pool.submit(self._run, idea_id)
            self._in_flight[idea_id] = future
        future.add_done_callback(lambda f: self._finished(idea_id, f))
        return future

    async def enrich(self, idea_id: str) -> EnrichmentResult:
        """Await a (possibly shared) background run from async code."""
        return await asyncio.wrap_future(self.submit(idea_id))

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def _run(self, idea_id: str) -> EnrichmentResult:
        try:
            return self.orchestrator.enrich(idea_id)
        except Exception as e:
            logger.exception("Unexpected error enriching idea %s", idea_id)
            return EnrichmentResult(idea_id=idea_id, success=False, error=str(e))

    def _finished(self, idea_id: str, future: Future) -> None:
        with self._lock:
            if self._in_flight.get(idea_id) is future:
                del self._in_flight[idea_id]
        result = future.result()
        if result.success:
            logger.info("Moodboard generation completed for idea %s", idea_id)
        else:
            logger.warning("Moodboard generation failed for idea %s: %s", idea_id, result.error)


# ── Idea creation ─────────────────────────────────────────────────────────────

@dataclass
class CreatedIdea:
    idea: Idea
    enrichment: "Future[EnrichmentResult]"


def create_idea(
    store: InMemoryRecordStore,
    runner: EnrichmentRunner,
    data: Any,
    author_id: str = "",
    sink: Optional[NotificationSink] = None,
) -> CreatedIdea:
    """
    Validate input, create the idea as DRAFT, notify, start enrichment.

    Raises:
        ValidationError: bad input
        GroupNotFoundError: no group with that slug
    """
    payload = validate_input(CreateIdeaInput, data)

    group = store.get_group_by_slug(payload.group_slug)
    if group is None:
        raise GroupNotFoundError(payload.group_slug)

    idea = store.add_idea(Idea(
        id=uuid.uuid4().hex,
        prompt=payload.prompt,
        title=payload.prompt[:100],
        group_id=group.id,
        author_id=author_id,
        month_hint=payload.month,
        budget=payload.budget,
        kids_friendly=bool(payload.kids),
        status=IdeaStatus.DRAFT,
    ))
    logger.info("Idea created: %s for group %s", idea.id, group.id)

    if sink is not None:
        fire_and_forget(sink.on_new_idea, group.id, idea.id)

    return CreatedIdea(idea=idea, enrichment=runner.submit(idea.id))
