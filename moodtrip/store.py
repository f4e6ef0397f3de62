"""
store.py — Record store interface and an in-memory implementation.

The pipeline only needs five operations (get/update idea, create/list images,
list availability). InMemoryRecordStore adds the few writes used by idea
creation, the CLI and tests. All returned records are copies.
"""

from __future__ import annotations

import copy
import threading
import uuid
from typing import Dict, List, Optional, Protocol

from .models import AvailabilitySample, Group, Idea, IdeaNotFoundError, Image, ImageSource

# Fields the pipeline is allowed to write on an idea
IDEA_UPDATE_FIELDS = frozenset({"status", "palette", "summary", "tags"})


class RecordStore(Protocol):
    def get_idea(self, idea_id: str) -> Optional[Idea]: ...

    def update_idea(self, idea_id: str, **fields) -> Idea: ...

    def create_image(self, idea_id: str, url: str, source: ImageSource, provider: str, order: int) -> Image: ...

    def list_images(self, idea_id: str) -> List[Image]: ...

    def list_availability(self, group_id: str) -> List[AvailabilitySample]: ...


class InMemoryRecordStore:

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ideas: Dict[str, Idea] = {}
        self._images: Dict[str, List[Image]] = {}
        self._groups: Dict[str, Group] = {}
        self._availability: List[AvailabilitySample] = []

    # ── Ideas ─────────────────────────────────────────────────────────────────

    def add_idea(self, idea: Idea) -> Idea:
        with self._lock:
            self._ideas[idea.id] = copy.deepcopy(idea)
            return copy.deepcopy(idea)

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        with self._lock:
            idea = self._ideas.get(idea_id)
            return copy.deepcopy(idea) if idea else None

    def update_idea(self, idea_id: str, **fields) -> Idea:
        unknown = set(fields) - IDEA_UPDATE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update idea fields: {sorted(unknown)}")
        with self._lock:
            idea = self._ideas.get(idea_id)
            if idea is None:
                raise IdeaNotFoundError(idea_id)
            for key, value in fields.items():
                setattr(idea, key, copy.deepcopy(value))
            return copy.deepcopy(idea)

    def list_ideas(self, group_id: str) -> List[Idea]:
        with self._lock:
            ideas = [i for i in self._ideas.values() if i.group_id == group_id]
            ideas.sort(key=lambda i: i.created_at, reverse=True)
            return copy.deepcopy(ideas)

    # ── Images ────────────────────────────────────────────────────────────────

    def create_image(self, idea_id: str, url: str, source: ImageSource, provider: str, order: int) -> Image:
        image = Image(
            id=uuid.uuid4().hex,
            idea_id=idea_id,
            url=url,
            source=source,
            provider=provider,
            order=order,
        )
        with self._lock:
            self._images.setdefault(idea_id, []).append(image)
        return image

    def list_images(self, idea_id: str) -> List[Image]:
        with self._lock:
            return sorted(self._images.get(idea_id, []), key=lambda i: i.order)

    # ── Groups + availability ─────────────────────────────────────────────────

    def add_group(self, group: Group) -> Group:
        with self._lock:
            self._groups[group.id] = group
        return group

    def get_group_by_slug(self, slug: str) -> Optional[Group]:
        with self._lock:
            return next((g for g in self._groups.values() if g.slug == slug), None)

    def add_availability(self, sample: AvailabilitySample) -> AvailabilitySample:
        with self._lock:
            self._availability.append(sample)
        return sample

    def upsert_availability(self, sample: AvailabilitySample) -> AvailabilitySample:
        """Replace the (group, user, month) entry if present, else add it."""
        key = (sample.group_id, sample.user_id, sample.month)
        with self._lock:
            for i, existing in enumerate(self._availability):
                if (existing.group_id, existing.user_id, existing.month) == key:
                    self._availability[i] = sample
                    break
            else:
                self._availability.append(sample)
        return sample

    def list_availability(self, group_id: str) -> List[AvailabilitySample]:
        with self._lock:
            return [s for s in self._availability if s.group_id == group_id]
