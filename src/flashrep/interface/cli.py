"""flashrep CLI: review and stats commands over YAML deck files."""

import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Annotated, Any

import typer

from flashrep.application.config import AppConfig, resolve_config
from flashrep.domain.errors import DeckFileError, InvalidQualityError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="flashrep: SM-2 spaced-repetition reviews for flashcard decks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage flashrep configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for flashrep."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger().setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.getLogger().setLevel(logging.INFO)


def _resolve(ctx: typer.Context, **overrides: Any) -> AppConfig:
    verbose = (ctx.obj or {}).get("verbose")
    return resolve_config({**overrides, "verbose": verbose or None})


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------

QUALITY_HELP = "1=Again 2=Hard 3=Good 4=Easy 5=Perfect, q to stop"


@app.command()
def review(
    ctx: typer.Context,
    deck: Annotated[
        Path | None,
        typer.Argument(help="YAML deck file. Defaults to 'deck_path' in config."),
    ] = None,
    user: Annotated[str | None, typer.Option(help="User or deck ID to study.")] = None,
    limit: Annotated[
        int | None, typer.Option(min=1, help="Stop after this many cards.")
    ] = None,
):
    """[bold green]Review[/bold green] the cards that are due now."""
    from flashrep.application.factory import get_analytics_sink
    from flashrep.application.review_queue import ReviewQueue
    from flashrep.application.session_tracker import SessionTracker
    from flashrep.application.stats.aggregator import StatsAggregator
    from flashrep.application.study_service import StudyService
    from flashrep.infrastructure.clock import SystemClock

    config = _resolve(ctx, deck_path=deck, user_id=user)
    repo = _repository_or_exit(config)
    clock = SystemClock()
    sink = get_analytics_sink(config)
    tracker = SessionTracker(sink, clock, timeout=config.analytics_timeout_seconds)
    service = StudyService(
        repo,
        tracker,
        clock,
        queue=ReviewQueue(aggregator=StatsAggregator(config.learning_threshold)),
    )

    async def study() -> int:
        await service.load(config.user_id)
        snapshot = service.stats()
        typer.echo(f"{snapshot.due} of {snapshot.total} cards due.")
        if not snapshot.due:
            return 0

        await service.start(config.user_id, {"deck": str(config.deck_path)})
        reviewed = 0
        try:
            while limit is None or reviewed < limit:
                card = service.next_card()
                if card is None:
                    break

                started = time.monotonic()
                typer.echo("")
                typer.secho(card.question or "(no question)", bold=True)
                if card.hints:
                    typer.echo(f"Hint: {card.hints}")
                typer.prompt("Press Enter to reveal", default="", show_default=False)
                typer.echo(card.answer or "(no answer)")

                quality = _prompt_quality()
                if quality is None:
                    break

                state = await service.answer(
                    card.card_id, quality, time_spent_seconds=time.monotonic() - started
                )
                typer.echo(f"Next review in {state.interval} day(s).")
                reviewed += 1
        finally:
            summary = await service.finish()
            repo.save(config.user_id, service.queue.cards)

        if summary is not None:
            typer.echo("")
            typer.secho(
                f"Reviewed {summary.answered_count} card(s), "
                f"accuracy {summary.accuracy:.0%}.",
                fg="green",
            )
        return reviewed

    async def run() -> int:
        try:
            return await study()
        finally:
            await sink.close()

    try:
        asyncio.run(run())
    except DeckFileError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)


@app.command()
def stats(
    ctx: typer.Context,
    deck: Annotated[
        Path | None,
        typer.Argument(help="YAML deck file. Defaults to 'deck_path' in config."),
    ] = None,
    user: Annotated[str | None, typer.Option(help="User or deck ID to inspect.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON.")] = False,
):
    """Show total/due/new/learning/reviewing counts for a deck."""
    from flashrep.application.review_queue import ReviewQueue
    from flashrep.application.stats.aggregator import StatsAggregator
    from flashrep.infrastructure.clock import SystemClock

    config = _resolve(ctx, deck_path=deck, user_id=user)
    repo = _repository_or_exit(config)

    try:
        raw_cards = asyncio.run(repo.fetch(config.user_id))
    except DeckFileError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(1)

    now = SystemClock().now()
    queue = ReviewQueue.from_cards(
        raw_cards, now, aggregator=StatsAggregator(config.learning_threshold)
    )
    result = queue.classify(now)

    if as_json:
        typer.echo(json.dumps(result.as_dict(), indent=2))
        return

    for name, count in result.as_dict().items():
        typer.echo(f"{name.capitalize():<10} {count}")


def _repository_or_exit(config: AppConfig):
    from flashrep.application.factory import get_card_repository

    try:
        return get_card_repository(config)
    except ValueError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(2)


def _prompt_quality() -> int | None:
    from flashrep.domain.review.models import QualityRating

    while True:
        raw = typer.prompt(f"Quality ({QUALITY_HELP})").strip()
        if raw.lower() in ("q", "quit"):
            return None
        try:
            return int(QualityRating.parse(raw))
        except InvalidQualityError as e:
            typer.secho(str(e), fg="yellow")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


if __name__ == "__main__":
    app()
