"""
BiasLab CLI - scenario practice for cognitive biases and logical fallacies.

Usage:
    biaslab practice                 # Practice the whole catalog
    biaslab practice -c anchoring    # Five-scenario drill on one concept
    biaslab stats                    # Accuracy, streak, badges, most missed
    biaslab library -s money         # Search the concept library
    biaslab concept sunk_cost        # Show one library entry
    biaslab set theme light          # Change a setting
    biaslab reset                    # Wipe local progress
"""

from __future__ import annotations

import random
import sys
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from biaslab.config import Settings, get_settings
from biaslab.content import Catalog, load_catalog
from biaslab.core.errors import BiasLabError, CatalogError, InvalidSettingError
from biaslab.core.models import Scenario
from biaslab.core.progress_store import ProgressStore
from biaslab.core.scoring import BADGE_LABELS
from biaslab.practice import AnswerOutcome, PracticeEngine, PracticeSession
from biaslab.storage import create_backend

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="biaslab",
    help="🧠 BiasLab - Master cognitive biases & logical fallacies through scenarios",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()

ACCENTS = {"dark": "cyan", "light": "blue"}


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""
    _configure_logging(get_settings())


def _configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level, format="<level>{message}</level>")
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=3)


def _open_store(settings: Settings) -> ProgressStore:
    store = ProgressStore(create_backend(settings), key=settings.storage_key)
    store.load()
    return store


def _open_catalog(settings: Settings) -> Catalog:
    try:
        return load_catalog(settings.catalog_source, timeout=settings.catalog_timeout_seconds)
    except CatalogError as e:
        console.print(f"[red]✗ Could not load catalog: {e}[/]")
        raise typer.Exit(1)


def _accent(store: ProgressStore) -> str:
    return ACCENTS.get(store.state.settings.theme, "cyan")


def _progress_bar(pct: int, width: int = 20) -> str:
    filled = round(width * max(0, min(100, pct)) / 100)
    return "█" * filled + "░" * (width - filled)


# =============================================================================
# Practice
# =============================================================================


@app.command()
def practice(
    concept: Annotated[
        str | None, typer.Option("--concept", "-c", help="Drill scenarios for one concept id")
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Seed the shuffle for a reproducible order")
    ] = None,
) -> None:
    """
    Start a practice session.

    Answer with the option number, [bold]s[/] to skip, [bold]q[/] to end the session.
    """
    settings = get_settings()
    store = _open_store(settings)
    catalog = _open_catalog(settings)
    engine = PracticeEngine(store, rng=random.Random(seed), drill_size=settings.drill_size)
    accent = _accent(store)

    try:
        session = engine.start_session(catalog.scenarios, concept)
    except BiasLabError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)

    if session.is_drill:
        picked = catalog.concept(concept) if concept else None
        title = f"Drill: [bold]{picked.name if picked else 'Selected'}[/]"
    else:
        title = "Practice Mode"
    console.print(Panel(f"{title}\nScenarios: {session.total}", title="🎯", border_style=accent))

    reason = "Session complete 🎉"
    while (scenario := session.current_scenario()) is not None:
        _render_scenario(session, scenario, store, accent)
        choices = [str(i) for i in range(1, len(scenario.options) + 1)] + ["s", "q"]
        choice = Prompt.ask("Pick the best explanation", choices=choices, show_choices=False)

        if choice == "q":
            engine.end_session(session)
            reason = "Session ended"
            break
        if choice == "s":
            engine.skip(session)
            continue

        option = scenario.options[int(choice) - 1]
        outcome = engine.submit_answer(session, scenario, option.id)
        _render_outcome(outcome, store)
        engine.advance(session)

    summary = engine.summary(session)
    console.print(
        Panel(
            f"You answered [bold]{summary.correct_count}[/] out of [bold]{summary.attempted}[/] correctly.\n"
            f"Streak: {store.state.stats.streak} days • Accuracy: {store.accuracy()}%",
            title=reason,
            border_style=accent,
        )
    )


def _render_scenario(session: PracticeSession, scenario: Scenario, store: ProgressStore, accent: str) -> None:
    console.print()
    console.print(
        f"[dim]{_progress_bar(session.progress_percent)}  "
        f"Q {session.position}/{session.total} • Streak: {store.state.stats.streak}[/]"
    )
    console.print(f"[bold {accent}]{scenario.title}[/]")
    console.print(scenario.text)
    for number, option in enumerate(scenario.options, start=1):
        console.print(f"  [{accent}]{number}[/]. {option.text}")


def _render_outcome(outcome: AnswerOutcome, store: ProgressStore) -> None:
    if store.state.settings.audio:
        console.bell()
    if outcome.is_correct:
        console.print(f"[green]✅ Correct:[/] {outcome.correct_option.text} - {outcome.correct_option.reason}")
    else:
        console.print(f"[red]❌ Not quite:[/] {outcome.chosen_option.text} - {outcome.chosen_option.reason}")
        console.print(f"[green]✅ Correct answer:[/] {outcome.correct_option.text} - {outcome.correct_option.reason}")
    if outcome.explainer:
        console.print(f"[dim]{outcome.explainer}[/]")


# =============================================================================
# Stats
# =============================================================================


@app.command()
def stats(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Rows in the most-missed table")] = 5,
) -> None:
    """Show accuracy, streak, badges and most-missed concepts."""
    settings = get_settings()
    store = _open_store(settings)
    catalog = _open_catalog(settings)
    state = store.state
    accent = _accent(store)

    table = Table(title="Your Stats", show_header=False, border_style=accent)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Accuracy", f"{store.accuracy()}%  {_progress_bar(store.accuracy())}")
    table.add_row("Answered", str(state.stats.total_answered))
    table.add_row("Current streak", f"{state.stats.streak} days (best {state.stats.best_streak})")
    table.add_row("Badges", f"{store.badge_count()} / {len(BADGE_LABELS)}")
    for key, (label, hint) in BADGE_LABELS.items():
        unlocked = getattr(state.badges, key)
        table.add_row("", f"{'🏆' if unlocked else '🔒'} {label} [dim]({hint})[/]")
    console.print(table)

    rows = store.most_missed(limit)
    if not rows:
        console.print("[dim]Answer more scenarios to see targeted suggestions.[/]")
        return

    missed = Table(title="Most missed", border_style=accent)
    missed.add_column("Concept")
    missed.add_column("Correct", justify="right")
    missed.add_column("Rate", justify="right")
    missed.add_column("Practice")
    for row in rows:
        entry = catalog.concept(row.concept_id)
        missed.add_row(
            entry.name if entry else row.concept_id,
            f"{row.correct}/{row.seen}",
            f"{row.rate}%",
            f"biaslab practice -c {row.concept_id}",
        )
    console.print(missed)


# =============================================================================
# Library
# =============================================================================


@app.command()
def library(
    search: Annotated[str, typer.Option("--search", "-s", help="Filter by name, summary, tag or context")] = "",
) -> None:
    """List library entries with your mastery of each."""
    settings = get_settings()
    store = _open_store(settings)
    catalog = _open_catalog(settings)

    concepts = catalog.search(search)
    if not concepts:
        console.print(f"[yellow]No entries match {search!r}[/]")
        return

    table = Table(title="Library", border_style=_accent(store))
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Difficulty")
    table.add_column("Tags")
    table.add_column("Mastery", justify="right")
    for c in concepts:
        table.add_row(
            c.id,
            c.name,
            "★" * c.difficulty,
            ", ".join(c.tags[:4]),
            f"{store.mastery_rate(c.id)}%",
        )
    console.print(table)


@app.command()
def concept(
    concept_id: Annotated[str, typer.Argument(help="Concept id, e.g. confirmation_bias")],
) -> None:
    """Show one library entry."""
    settings = get_settings()
    store = _open_store(settings)
    catalog = _open_catalog(settings)

    entry = catalog.concept(concept_id)
    if entry is None:
        console.print(f"[red]✗ Unknown concept: {concept_id}[/]")
        raise typer.Exit(1)

    mastery = store.mastery_for(concept_id)
    lines = [f"[italic]{entry.summary}[/]", "", f"[bold]Definition:[/] {entry.definition}"]
    if entry.classic_examples:
        lines += ["", "[bold]Classic examples[/]"] + [f"  • {e}" for e in entry.classic_examples]
    if entry.contexts:
        lines += ["", "[bold]Contexts[/]"] + [f"  • {c}" for c in entry.contexts]
    if entry.related_research:
        lines += ["", "[bold]Related research[/]"]
        for r in entry.related_research:
            doi = f" - DOI: {r.doi}" if r.doi else ""
            lines.append(f"  • {r.author} ({r.year}). [italic]{r.title}[/]{doi}")
    lines += [
        "",
        f"[bold]Mastery:[/] {store.mastery_rate(concept_id)}% ({mastery.correct}/{mastery.seen} correct)",
        f"[dim]See it in a scenario: biaslab practice -c {concept_id}[/]",
    ]
    console.print(Panel("\n".join(lines), title=entry.name, border_style=_accent(store)))


# =============================================================================
# Settings / Reset
# =============================================================================

_BOOL_WORDS = {"on": True, "true": True, "yes": True, "off": False, "false": False, "no": False}


@app.command("set")
def set_setting(
    key: Annotated[str, typer.Argument(help="Setting name: audio or theme")],
    value: Annotated[str, typer.Argument(help="audio: on/off, theme: light/dark")],
) -> None:
    """Change a setting."""
    store = _open_store(get_settings())
    parsed: object = value
    if key == "audio":
        parsed = _BOOL_WORDS.get(value.lower(), value)
    try:
        store.set_setting(key, parsed)
    except InvalidSettingError as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/] {key} = {value}")


@app.command()
def reset(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
) -> None:
    """Reset all local progress."""
    store = _open_store(get_settings())
    if not yes and not Confirm.ask("Reset all local progress?"):
        console.print("[dim]Cancelled[/]")
        raise typer.Exit(0)
    store.reset()
    console.print("[green]✓ Progress reset[/]")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
