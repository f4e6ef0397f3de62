"""
orchestrator.py — Enrich one idea into a published moodboard.

State machine:
    DRAFT --enrich ok-->  PUBLISHED   (terminal)
    DRAFT --enrich err--> DRAFT       (caller may retry)

Steps:
  1. Load idea (missing → not_found result)
  2. PUBLISHED with images → no-op success
  3. Images already stored → reuse them; otherwise acquire via the provider
     chain, optionally mirror locally, create Image rows with order 0..n-1
  4–5. Palette, summary and tags run concurrently and are joined
  6. Single update: status=PUBLISHED + palette + summary + tags
  7. Any error in 3–6 → best-effort status=DRAFT, failed result

PUBLISHED always means fully enriched: a failure in any sub-step reverts to
DRAFT even if images were already created.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from rich.console import Console

from .config import Settings
from .downloader import download_and_save_images
from .enrichers import SummaryEnricher, TagEnricher, build_enrichers
from .image_chain import ImageProviderChain
from .models import EnrichmentError, EnrichmentResult, Idea, IdeaStatus, ImageResult
from .notify import NotificationSink, fire_and_forget
from .palette import PaletteExtractor
from .store import RecordStore

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class EnrichmentOrchestrator:

    def __init__(
        self,
        store: RecordStore,
        image_chain: ImageProviderChain,
        palette: PaletteExtractor,
        summarizer: SummaryEnricher,
        tagger: TagEnricher,
        settings: Optional[Settings] = None,
        sink: Optional[NotificationSink] = None,
    ) -> None:
        self.store = store
        self.image_chain = image_chain
        self.palette = palette
        self.summarizer = summarizer
        self.tagger = tagger
        self.settings = settings or Settings()
        self.sink = sink

    @classmethod
    def from_settings(
        cls,
        store: RecordStore,
        settings: Settings,
        sink: Optional[NotificationSink] = None,
    ) -> "EnrichmentOrchestrator":
        summarizer, tagger = build_enrichers(settings)
        return cls(
            store=store,
            image_chain=ImageProviderChain.from_settings(settings),
            palette=PaletteExtractor(settings),
            summarizer=summarizer,
            tagger=tagger,
            settings=settings,
            sink=sink,
        )

    # ── Entry point ───────────────────────────────────────────────────────────

    def enrich(self, idea_id: str) -> EnrichmentResult:
        t0 = time.monotonic()
        idea = self.store.get_idea(idea_id)
        if idea is None:
            logger.warning("Enrichment requested for missing idea %s", idea_id)
            return EnrichmentResult.missing(idea_id)

        existing = self.store.list_images(idea_id)
        if idea.status == IdeaStatus.PUBLISHED and existing:
            logger.info("Moodboard already exists for idea %s, skipping", idea_id)
            return EnrichmentResult(idea_id=idea_id, success=True, skipped=True)

        console.print(f"\n[bold cyan]→ Enriching idea {idea_id}[/bold cyan]")
        try:
            urls, reused = self._images_for(idea, existing)
            palette, summary, tags = self._enrich_content(idea.prompt, urls)
            self.store.update_idea(
                idea_id,
                status=IdeaStatus.PUBLISHED,
                palette=palette,
                summary=summary,
                tags=tags,
            )
        except Exception as e:
            logger.error("Moodboard generation failed for idea %s: %s", idea_id, e)
            console.print(f"  [yellow]⚠ Enrichment failed: {e}[/yellow]")
            self._revert(idea_id)
            return EnrichmentResult(
                idea_id=idea_id,
                success=False,
                error=str(e) or e.__class__.__name__,
                elapsed_seconds=time.monotonic() - t0,
            )

        elapsed = time.monotonic() - t0
        console.print(f"  [green]✓[/green] Moodboard published [dim]({elapsed:.1f}s)[/dim]")
        if self.sink is not None:
            fire_and_forget(
                self.sink.on_moodboard_completed,
                idea_id,
                {"images": len(urls), "reused_images": reused, "tags": tags},
            )
        return EnrichmentResult(idea_id=idea_id, success=True, reused_images=reused, elapsed_seconds=elapsed)

    # ── Steps ─────────────────────────────────────────────────────────────────

    def _images_for(self, idea: Idea, existing) -> Tuple[List[str], bool]:
        """Reuse stored images from a prior partial run, or acquire and persist new ones."""
        if existing:
            console.print(
                f"  [dim]Reusing {len(existing)} image(s) from {existing[0].provider}[/dim]"
            )
            return [img.url for img in existing], True

        result: ImageResult = self.image_chain.acquire(idea.prompt)
        urls = list(result.urls)
        if not urls:
            raise EnrichmentError("Image provider chain returned no images")

        if self.settings.media_dir is not None:
            urls = download_and_save_images(urls, idea.id, self.settings.media_dir, self.settings.http_timeout)

        for order, url in enumerate(urls):
            self.store.create_image(
                idea_id=idea.id,
                url=url,
                source=result.source,
                provider=result.provider,
                order=order,
            )
        return urls, False

    def _enrich_content(self, prompt: str, urls: List[str]) -> Tuple[List[str], str, List[str]]:
        """Palette, summary and tags in parallel. Every task is attempted; any failure raises."""
        with ThreadPoolExecutor(max_workers=3) as pool:
            futures = {
                "palette": pool.submit(self.palette.extract, urls),
                "summary": pool.submit(self.summarizer.summarize, prompt),
                "tags": pool.submit(self.tagger.tag, prompt),
            }
            results, errors = {}, []
            for name, future in futures.items():
                try:
                    results[name] = future.result()
                except Exception as e:
                    logger.warning("%s generation failed: %s", name, e)
                    errors.append(f"{name}: {e}")

        if errors:
            raise EnrichmentError("; ".join(errors))
        if not results["summary"]:
            raise EnrichmentError("summary: empty")
        return list(results["palette"]), results["summary"], list(results["tags"])

    def _revert(self, idea_id: str) -> None:
        try:
            self.store.update_idea(idea_id, status=IdeaStatus.DRAFT)
        except Exception:
            logger.error("Failed to revert idea %s to DRAFT", idea_id, exc_info=True)
