"""Interactive CLI for the 2-7 triple draw opening trainer."""

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .action import ActionType, Classification
from .card import Card, Suit, cards
from .classifier import HandClassifier, Variant
from .config import Config, get_config
from .drill import Deal, Phase, Trainer
from .hand import Hand
from .notation import expand as expand_pattern
from .position import Position
from .ranges import DrawCategory, format_range
from .strategy import StrategyBook

app = typer.Typer(help="Opening-hand trainer for 2-7 triple draw")
console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose else get_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def format_card(c: Card) -> str:
    """Format a card with color based on suit."""
    symbol = f"{c.rank.symbol}{c.suit.symbol}"
    if c.suit in (Suit.HEARTS, Suit.DIAMONDS):
        return f"[red]{symbol}[/red]"
    return f"[white]{symbol}[/white]"


def format_hand(hand: Hand) -> str:
    return " ".join(format_card(c) for c in hand.cards)


def parse_hand(s: str) -> Hand:
    """Parse five space or comma separated cards."""
    return Hand(tuple(cards(s)))


def _load(variant: str | None, strategy_file: Path | None) -> tuple[Config, HandClassifier]:
    config = get_config()
    trainer = config.trainer
    if variant is not None:
        trainer = replace(trainer, variant=Variant(variant))
    strategy = config.strategy
    if strategy_file is not None:
        strategy = replace(strategy, file=strategy_file)
    config = replace(config, trainer=trainer, strategy=strategy)
    return config, config.build_classifier()


def _display_classification(result: Classification) -> None:
    """Display a classification with Rich formatting."""
    color = "green" if result.correct_action is ActionType.RAISE else "red"
    lines = [
        f"[bold {color}]{result.correct_action}[/bold {color}]  {result.category}",
        f"[dim]{result.explanation}[/dim]",
        f"Rule: {result.rule_used}",
    ]
    if result.benchmark:
        lines.append(f"Benchmark: {result.benchmark}")
    if result.minimum_raise_example:
        lines.append(f"[yellow]Minimum to open: {result.minimum_raise_example}[/yellow]")
    console.print(Panel("\n".join(lines), title="[bold magenta]Correct Play[/bold magenta]", expand=False))


_VARIANT_HELP = "Classifier variant (multi, single)"


@app.command()
def classify(
    hand: str = typer.Argument(..., help="Five cards (e.g., '8s 6h 5d 3c 2s')"),
    position: str = typer.Option("UTG", "--position", "-P", help="Table position"),
    variant: str | None = typer.Option(None, "--variant", help=_VARIANT_HELP),
    strategy_file: Path | None = typer.Option(None, "--strategy", "-s", help="Strategy JSON file"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every rule's verdict"),
):
    """Classify a hand at a position."""
    try:
        parsed = parse_hand(hand)
        pos = Position.from_str(position)
        _, classifier = _load(variant, strategy_file)

        console.print(f"\n[bold]Hand:[/bold]     {format_hand(parsed)}")
        console.print(f"[bold]Position:[/bold] {pos.label}\n")
        _display_classification(classifier.classify(parsed, pos))

        if trace:
            table = Table(title="Rule Trace")
            table.add_column("Rule", style="cyan")
            table.add_column("Verdict")
            for name, verdict in classifier.trace(parsed, pos):
                table.add_row(name, f"{verdict.correct_action}: {verdict.category}" if verdict else "[dim]-[/dim]")
            console.print(table)

    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def deal(
    count: int = typer.Option(1, "--count", "-n", help="Number of hands"),
    position: str | None = typer.Option(None, "--position", "-P", help="Table position (default: random)"),
    variant: str | None = typer.Option(None, "--variant", help=_VARIANT_HELP),
    strategy_file: Path | None = typer.Option(None, "--strategy", "-s", help="Strategy JSON file"),
):
    """Deal random hands and show the correct play."""
    try:
        config, classifier = _load(variant, strategy_file)
        positions = [Position.from_str(position)] if position else config.trainer.dealing_positions
        trainer = Trainer(classifier, deck=config.build_deck(), positions=positions)

        table = Table(title="Dealt Hands")
        table.add_column("Pos", style="cyan")
        table.add_column("Hand")
        table.add_column("Action")
        table.add_column("Category")
        table.add_column("Rule", style="dim")

        for _ in range(count):
            hand = trainer.deal_hand()
            pos = trainer.rng.choice(trainer.positions)
            result = trainer.classify(hand, pos)
            color = "green" if result.is_playable else "red"
            table.add_row(pos.short, format_hand(hand), f"[{color}]{result.correct_action}[/{color}]",
                          result.category, result.rule_used)

        console.print(table)

    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def ranges(
    position: str | None = typer.Argument(None, help="Position to show (default: all)"),
    breakdown: bool = typer.Option(False, "--breakdown", "-b", help="Expand benchmarks into hands"),
    variant: str | None = typer.Option(None, "--variant", help=_VARIANT_HELP),
    strategy_file: Path | None = typer.Option(None, "--strategy", "-s", help="Strategy JSON file"),
):
    """Show each position's own and inherited opening ranges."""
    try:
        _, classifier = _load(variant, strategy_file)
        book = classifier.book
        positions = [Position.from_str(position)] if position else book.positions

        for pos in positions:
            strategy = book.get(pos)
            resolved = book.resolve(pos)
            title = pos.label
            if strategy.inherits_from is not None:
                title += f" [dim](inherits from {strategy.inherits_from.short})[/dim]"

            table = Table(title=title)
            table.add_column("Category", style="cyan")
            table.add_column("Own")
            table.add_column("Effective")
            for cat in DrawCategory:
                table.add_row(
                    cat.label,
                    format_range(strategy.range_for(cat), breakdown),
                    format_range(resolved[cat].as_hand_range(), breakdown),
                )
            console.print(table)

    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def expand(
    pattern: str = typer.Argument(..., help="Range notation (e.g., '8654+')"),
    limit: int | None = typer.Option(None, "--limit", "-l", help="Maximum hands to list"),
):
    """List example hands covered by a range notation."""
    hands = expand_pattern(pattern, limit)
    console.print(f"[bold]{pattern}[/bold]: {', '.join(hands)}")


@app.command()
def export(
    output: Path | None = typer.Argument(None, help="Write to this file instead of stdout"),
    variant: str | None = typer.Option(None, "--variant", help=_VARIANT_HELP),
    strategy_file: Path | None = typer.Option(None, "--strategy", "-s", help="Strategy JSON file"),
):
    """Export the current strategies as JSON."""
    try:
        _, classifier = _load(variant, strategy_file)
        if output is None:
            print(classifier.book.to_json())
        else:
            classifier.book.save(output)
            console.print(f"[green]Saved {len(classifier.book)} strategies to {output}[/green]")

    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command(name="check-strategy")
def check_strategy(
    path: Path = typer.Argument(..., help="Strategy JSON file"),
    strict: bool = typer.Option(False, "--strict", help="Reject unrecognised notation"),
):
    """Validate a strategy file before using it."""
    try:
        book = StrategyBook.load(path, strict=strict)
        for pos in book.positions:
            chain = " <- ".join(p.short for p in reversed(book.chain(pos)))
            console.print(f"  {chain}")
        console.print(f"[green]OK: {len(book)} strategies[/green]")

    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def _show_deal(trainer: Trainer, current: Deal) -> None:
    state = trainer.state
    if state.phase is Phase.DRILL:
        drill = state.drill
        header = f"[bold yellow]Drill {drill.current_index + 1}/{len(drill.mistake_pool)}[/bold yellow]"
    else:
        header = f"Score: {state.score}  |  Mistakes: {len(state.mistakes)}"
    console.print(f"\n{header}")
    console.print(f"[bold]{current.position.label}[/bold]: {format_hand(current.hand)}")


@app.command()
def train(
    variant: str | None = typer.Option(None, "--variant", help=_VARIANT_HELP),
    strategy_file: Path | None = typer.Option(None, "--strategy", "-s", help="Strategy JSON file"),
):
    """Practice raise/fold decisions; review mistakes in drill mode."""
    try:
        config, classifier = _load(variant, strategy_file)
        trainer = Trainer(classifier, deck=config.build_deck(), positions=config.trainer.dealing_positions)
        current = trainer.start()
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(Panel("[bold]2-7 Triple Draw - Opening Trainer[/bold]"))
    console.print("[dim]Answer r(aise) or f(old). Then: Enter=next, d=drill mistakes, x=exit drill, quit[/dim]")

    try:
        while True:
            _show_deal(trainer, current)
            response = Prompt.ask("[bold]Raise or fold?[/bold]")
            if response.lower() == "quit":
                break
            try:
                action = ActionType.from_str(response)
            except ValueError as e:
                console.print(f"[red]{e}[/red]")
                continue

            trainer.record_action(action)
            if trainer.state.is_correct:
                console.print("[bold green]✓ CORRECT![/bold green]")
            else:
                console.print("[bold red]✗ INCORRECT[/bold red]")
            _display_classification(current.classification)

            command = Prompt.ask("[dim]Next[/dim]", default="").lower()
            if command == "quit":
                break
            in_drill = trainer.state.phase is Phase.DRILL
            if command == "d" and not in_drill and trainer.start_drill():
                current = trainer.current  # type: ignore[assignment]
                continue
            if command == "d" and not in_drill:
                console.print("[yellow]No mistakes to review yet.[/yellow]")

            if command == "x" and in_drill:
                _show_review(trainer)
                current = trainer.exit_drill()
            else:
                if in_drill and trainer.state.drill.remaining == 0:
                    _show_review(trainer)
                current = trainer.next_hand()

    except KeyboardInterrupt:
        console.print("\n[dim]Exiting...[/dim]")

    console.print(f"\n[bold]Final score:[/bold] {trainer.state.score}")


def _show_review(trainer: Trainer) -> None:
    review = trainer.state.drill.review
    console.print(f"[bold]Drill complete:[/bold] {review.correct}/{review.total} correct on review")


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
