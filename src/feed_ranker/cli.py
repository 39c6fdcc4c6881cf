"""CLI entry point for feed ranker."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from feed_ranker.adapters.serialization import feed_item_to_dict
from feed_ranker.adapters.storage import SnapshotError, YamlSnapshotRepository
from feed_ranker.config import Settings, get_settings
from feed_ranker.core import FeedItem
from feed_ranker.use_cases import FeedService


def main(
    snapshot: Path = typer.Argument(..., help="YAML snapshot with sources, content and interactions"),
    user: str = typer.Option(..., "--user", "-u", help="User to build the feed for"),
    config: Path = typer.Option(Path("config.yaml"), "--config", help="Settings file"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Show only the first N items"),
    output_format: str = typer.Option("text", "--format", help="Output format: text or json"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging"),
) -> None:
    """Generate a user's ranked feed from a data snapshot."""
    settings = get_settings(config)
    configure_logging(settings, debug)

    if output_format not in ("text", "json"):
        print(f"❌ Unknown format: {output_format}")
        raise typer.Exit(code=2)

    try:
        feed = asyncio.run(build_feed(snapshot, user, settings))
    except SnapshotError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    if limit is not None:
        feed = feed[:max(0, limit)]

    if output_format == "json":
        print(json.dumps([feed_item_to_dict(item) for item in feed], indent=2, ensure_ascii=False))
    else:
        print_feed(feed, user, snapshot)


def app() -> None:
    """CLI entry point."""
    typer.run(main)


def configure_logging(settings: Settings, debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else settings.log_level,
        format=settings.logging.format,
        datefmt="%H:%M:%S",
    )


async def build_feed(snapshot: Path, user: str, settings: Settings) -> list[FeedItem]:
    service = FeedService(
        repository=YamlSnapshotRepository(snapshot),
        settings=settings,
    )
    return await service.generate_feed(user)


def print_feed(feed: list[FeedItem], user: str, snapshot: Path) -> None:
    print("\n" + "=" * 70)
    print(f"📺 FEED for {user} ({snapshot.name})")
    print("=" * 70)

    if not feed:
        print("\nNothing to show: no sources or no eligible content.")
        return

    new_count = sum(1 for item in feed if item.is_new)
    resurfaced = sum(1 for item in feed if item.is_resurfaced)

    print(f"\n  • Items: {len(feed)}")
    print(f"  • New: {new_count}")
    print(f"  • Backlog: {len(feed) - new_count}")
    if resurfaced:
        print(f"  • Back from \"not now\": {resurfaced}")
    print()

    for item in feed:
        marker = "🆕" if item.is_new else "📼"
        if item.is_resurfaced:
            marker = "🔁"
        print(f"{item.position:>4}. {marker} {item.content.title[:60]}")
        print(f"      └─ {item.source_display_name} · {item.content.url}")


if __name__ == "__main__":
    app()
