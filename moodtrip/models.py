"""
models.py — Records and value objects shared by the enrichment pipeline.

  Idea                — travel idea as read/written through the record store
  Image               — persisted moodboard image (owned by an idea)
  CandidateImage      — transient stock-search result, only seen by the ranker
  AvailabilitySample  — one user's availability score for one month
  ImageResult         — output of the image provider chain
  EnrichmentResult    — outcome of one orchestrator run

The pipeline never owns storage; these dataclasses are what the record store
hands back and accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional


# ── Enums ─────────────────────────────────────────────────────────────────────

class IdeaStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class ImageSource(str, Enum):
    GENERATED = "GENERATED"
    STOCK = "STOCK"


class BudgetLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ── Errors ────────────────────────────────────────────────────────────────────

class MoodTripError(Exception):
    """Base class for pipeline errors."""


class IdeaNotFoundError(MoodTripError):
    def __init__(self, idea_id: str) -> None:
        super().__init__(f"Idea not found: {idea_id}")
        self.idea_id = idea_id


class GroupNotFoundError(MoodTripError):
    def __init__(self, slug: str) -> None:
        super().__init__(f'Group with slug "{slug}" not found')
        self.slug = slug


class ProviderError(MoodTripError):
    """An external image/text provider failed or timed out."""


class ExtractionError(MoodTripError):
    """Swatch extraction failed for a single image."""


class EnrichmentError(MoodTripError):
    """A step after image acquisition failed; the idea is reverted to DRAFT."""


class ValidationError(MoodTripError):
    """Caller input failed validation."""


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass
class Idea:
    id: str
    prompt: str
    group_id: str = ""
    author_id: str = ""
    title: str = ""
    month_hint: Optional[int] = None            # 1-12
    budget: Optional[BudgetLevel] = None
    kids_friendly: bool = False
    status: IdeaStatus = IdeaStatus.DRAFT

    # Moodboard fields, written only by the orchestrator
    palette: List[str] = field(default_factory=list)   # <= 5 hex colors
    summary: Optional[str] = None
    tags: List[str] = field(default_factory=list)       # <= 5, unique

    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class Image:
    id: str
    idea_id: str
    url: str
    source: ImageSource
    provider: str
    order: int


@dataclass(frozen=True)
class AvailabilitySample:
    group_id: str
    user_id: str
    month: int      # 1-12
    score: int      # 0-100


@dataclass
class Group:
    id: str
    slug: str
    name: str = ""


@dataclass
class CandidateImage:
    """A stock-search hit. Lives only inside the quality ranker's working set."""
    id: str
    urls: Dict[str, str] = field(default_factory=dict)    # raw/full/regular/small
    description: str = ""
    alt_description: str = ""
    likes: int = 0
    downloads: int = 0
    views: int = 0
    width: int = 0
    height: int = 0
    color: str = ""                                        # dominant color, hex
    created_at: Optional[datetime] = None
    sponsored: bool = False
    premium: bool = False
    photographer_total_photos: int = 0
    photographer_total_likes: int = 0

    @property
    def text(self) -> str:
        """Description + alt text, lowercased, for keyword matching."""
        return f"{self.description or ''} {self.alt_description or ''}".lower()


# ── Results ───────────────────────────────────────────────────────────────────

@dataclass
class ImageResult:
    urls: List[str]
    provider: str
    source: ImageSource


@dataclass
class EnrichmentResult:
    idea_id: str
    success: bool
    skipped: bool = False           # idempotency short-circuit
    reused_images: bool = False     # images from a prior partial run
    not_found: bool = False
    error: str = ""
    elapsed_seconds: float = 0.0

    @classmethod
    def missing(cls, idea_id: str) -> "EnrichmentResult":
        return cls(idea_id=idea_id, success=False, not_found=True, error="Idea not found")
