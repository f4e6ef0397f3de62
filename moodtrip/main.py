"""
MoodTrip — Idea enrichment CLI

Usage:
  python -m moodtrip.main enrich "Ski week in Zermatt with friends" --month 2
  python -m moodtrip.main enrich "Lisbon food crawl" --media-dir media
  python -m moodtrip.main group-fit --month 6 --sample 5:80 --sample 6:60 --sample 6:80 --sample 7:40
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import group_fit
from .config import Settings
from .models import AvailabilitySample, BudgetLevel, Group, MoodTripError
from .notify import LoggingNotificationSink
from .orchestrator import EnrichmentOrchestrator
from .runner import EnrichmentRunner, create_idea
from .store import InMemoryRecordStore

console = Console()

LOG_FORMAT = "%(asctime)s — %(levelname)s — %(name)s — %(message)s"


# ── CLI ───────────────────────────────────────────────────────────────────────

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="MoodTrip — turn a trip idea into a moodboard"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    enrich = sub.add_parser("enrich", help="Create an idea and run the enrichment pipeline")
    enrich.add_argument("prompt", help="Free-text trip idea (10-500 chars)")
    enrich.add_argument("--month", type=int, default=None, help="Month hint 1-12")
    enrich.add_argument(
        "--budget",
        choices=[b.value for b in BudgetLevel],
        default=None,
        help="Budget tier",
    )
    enrich.add_argument("--kids", action="store_true", help="Kids-friendly trip")
    enrich.add_argument(
        "--media-dir",
        default=None,
        help="Mirror images locally into this directory (default: $MOODTRIP_MEDIA_DIR)",
    )

    fit = sub.add_parser("group-fit", help="Score a month against availability samples")
    fit.add_argument("--month", type=int, required=True, help="Target month 1-12")
    fit.add_argument(
        "--sample",
        action="append",
        default=[],
        metavar="MONTH:SCORE",
        help="One availability sample, repeatable",
    )
    return parser.parse_args(argv)


# ── Commands ──────────────────────────────────────────────────────────────────

def run_enrich(args: argparse.Namespace, settings: Settings) -> int:
    if args.media_dir:
        settings.media_dir = Path(args.media_dir)

    store = InMemoryRecordStore()
    group = store.add_group(Group(id=uuid.uuid4().hex, slug="cli", name="CLI"))
    sink = LoggingNotificationSink()
    orchestrator = EnrichmentOrchestrator.from_settings(store, settings, sink=sink)
    runner = EnrichmentRunner(orchestrator, max_workers=1)

    try:
        created = create_idea(
            store,
            runner,
            {
                "group_slug": group.slug,
                "prompt": args.prompt,
                "month": args.month,
                "budget": args.budget,
                "kids": args.kids,
            },
            author_id="cli",
            sink=sink,
        )
        result = created.enrichment.result()
    except MoodTripError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    finally:
        runner.shutdown()

    idea = store.get_idea(created.idea.id)
    display_moodboard(idea, store.list_images(idea.id))
    if not result.success:
        console.print(f"[red]✗ Enrichment failed: {result.error}[/red]")
        return 1
    return 0


def run_group_fit(args: argparse.Namespace) -> int:
    samples = []
    for i, raw in enumerate(args.sample):
        try:
            month, value = (int(p) for p in raw.split(":", 1))
        except ValueError:
            console.print(f"[red]✗ Bad sample {raw!r}, expected MONTH:SCORE[/red]")
            return 2
        samples.append(AvailabilitySample(group_id="cli", user_id=f"user{i}", month=month, score=value))

    fit = group_fit.score(args.month, samples)
    if fit is None:
        console.print("[dim]No signal — no availability around that month[/dim]")
    else:
        console.print(f"Group fit for month {args.month}: [bold]{fit}%[/bold]")
    return 0


# ── Display ───────────────────────────────────────────────────────────────────

def display_moodboard(idea, images) -> None:
    swatches = "  ".join(f"[on {c}]    [/on {c}] {c}" for c in idea.palette) or "[dim]none[/dim]"
    body = (
        f"[bold]Status:[/bold] {idea.status.value}\n"
        f"[bold]Summary:[/bold] {idea.summary or '[dim]none[/dim]'}\n\n"
        f"[bold]Tags:[/bold] {', '.join(idea.tags) or '[dim]none[/dim]'}\n"
        f"[bold]Palette:[/bold] {swatches}"
    )
    color = "green" if idea.status.value == "PUBLISHED" else "yellow"
    console.print(Panel(body, title=f"[bold]{idea.title}[/bold]", border_style=color))

    if images:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Source")
        table.add_column("Provider")
        table.add_column("URL", overflow="fold")
        for img in images:
            table.add_row(str(img.order), img.source.value, img.provider, img.url)
        console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "group-fit":
        return run_group_fit(args)
    return run_enrich(args, Settings.from_env())


if __name__ == "__main__":
    sys.exit(main())
