"""Command line entry point - just wiring, no logic."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import Config, config_dir
from .defaults import ensure_config
from .engine import build_engine

# Load environment variables from ~/.config/content-intel/.env
config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
dotenv_path = Path(config_home) / "content-intel" / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)

console = Console()
app = typer.Typer(help="Local content intelligence for Bengali news.")


def load_config(config_path: Optional[Path]) -> Config:
    try:
        return Config.from_file(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        raise typer.Exit(1)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        console.print(f"[bold red]❌ Cannot read {path}: {e}[/bold red]")
        raise typer.Exit(1)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("init-config")
def init_config() -> None:
    """Create the default config file if missing."""
    config_file = ensure_config()
    console.print(f"[green]✅ Config ready: {config_file}[/green]")


@app.command()
def serve(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Run the REST API server."""
    if config_path is None:
        ensure_config()
    config = load_config(config_path)

    from .api import create_app

    engine = build_engine(config)
    console.print(
        f"[yellow]🌐 Starting API server on http://{config.api_host}:{config.api_port}[/yellow]"
    )
    if not config.remote_enabled:
        console.print("[dim]No \\[llm] section configured, using local heuristics only[/dim]")
    elif not asyncio.run(engine.intelligence.remote.probe()):
        console.print(
            f"[yellow]⚠️  LLM {config.llm_model} not reachable, "
            "local heuristics will answer until it is[/yellow]"
        )

    uvicorn.run(
        create_app(engine),
        host=config.api_host,
        port=config.api_port,
        log_level="warning",
        access_log=False,
    )


@app.command()
def summarize(
    file: Path = typer.Argument(..., help="UTF-8 text file to summarize"),
    max_length: Optional[int] = typer.Option(None, "--max-length", "-n", min=4),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Summarize a text file."""
    config = load_config(config_path) if _has_config(config_path) else Config()
    engine = build_engine(config)
    result = asyncio.run(engine.intelligence.summarize(read_text(file), max_length))

    console.print(result.value)
    console.print(f"[dim]({result.source}, {len(result.value)} chars)[/dim]")


@app.command()
def analyze(
    file: Path = typer.Argument(..., help="UTF-8 article body"),
    title: str = typer.Option("", "--title", "-t", help="Article headline"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Full analysis of an article: summary, sentiment, tags, topics."""
    config = load_config(config_path) if _has_config(config_path) else Config()
    engine = build_engine(config)
    analysis = asyncio.run(engine.intelligence.analyze_article(read_text(file), title))

    if as_json:
        print(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
        return

    table = Table(title=title or str(file), show_header=False)
    table.add_row("Summary", analysis.summary)
    table.add_row(
        "Sentiment",
        f"{analysis.sentiment.emoji} {analysis.sentiment.display_label} "
        f"({analysis.sentiment.confidence_percent}%)",
    )
    table.add_row("Tags", ", ".join(analysis.tags))
    table.add_row("Topics", ", ".join(analysis.topics) or "-")
    table.add_row("Reading time", f"{analysis.reading_time} min")
    table.add_row("Complexity", analysis.complexity.value)
    console.print(table)


@app.command()
def rank(
    query: str = typer.Argument(..., help="Search query"),
    file: Path = typer.Argument(..., help="JSON file with a list of articles"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Rerank a JSON list of articles against a query."""
    try:
        articles = json.loads(read_text(file))
    except json.JSONDecodeError as e:
        console.print(f"[bold red]❌ Invalid JSON in {file}: {e}[/bold red]")
        raise typer.Exit(1)
    if not isinstance(articles, list):
        console.print("[bold red]❌ Expected a JSON list of articles[/bold red]")
        raise typer.Exit(1)

    config = load_config(config_path) if _has_config(config_path) else Config()
    engine = build_engine(config)

    async def run() -> tuple[list, str]:
        await engine.start()
        try:
            ranked = await engine.search.enhance_search_results(query, articles)
            return ranked, engine.embeddings.mode
        finally:
            await engine.close()

    results, mode = asyncio.run(run())

    table = Table(title=f"Results for '{query}' ({mode})")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Title")
    for position, article in enumerate(results, 1):
        score = article.get("ai_relevance_score") if isinstance(article, dict) else None
        title = article.get("title", "") if isinstance(article, dict) else str(article)
        table.add_row(str(position), "-" if score is None else f"{score:.3f}", title)
    console.print(table)


def _has_config(config_path: Optional[Path]) -> bool:
    return config_path is not None or (config_dir() / "config.toml").exists()


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)
