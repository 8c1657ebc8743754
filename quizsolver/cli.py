import asyncio
import json
import logging
import time

import typer

from quizsolver.config import PROVIDER_ENV, load_settings
from quizsolver.guard import with_timeout
from quizsolver.highlight import HighlightedAnswer, has_detail, highlight
from quizsolver.normalizer import AIResponse, confidence, normalize
from quizsolver.providers import ProviderError, get_spec
from quizsolver.runner import build_resolver, provider_status


app = typer.Typer(help="Answer quiz questions through a chain of fallback AI providers")

BENCH_QUESTIONS = [
    "What is 2+2?",
    "What is the capital of France?",
    "Explain photosynthesis briefly",
]

STYLES = {
    "plain": {},
    "strong": {"bold": True, "underline": True},
    "muted": {"dim": True},
}


@app.command()
def solve(
    question: str = typer.Argument(..., help="Question text, or '-' to read from stdin"),
    as_json: bool = typer.Option(False, "--json", is_flag=True, help="Print the raw result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", is_flag=True, help="Log each provider attempt"),
) -> None:
    _configure_logging(verbose)
    text = _read_question(question)
    settings = load_settings()
    resolver = build_resolver(settings)
    response = asyncio.run(resolver.resolve(text))

    if as_json:
        typer.echo(json.dumps(response.to_dict(), indent=2))
        return
    _echo_response(response)
    if response.failed:
        raise typer.Exit(code=1)


@app.command()
def providers() -> None:
    settings = load_settings()
    status = provider_status(settings)
    rows = []
    for position, key in enumerate(settings.order, start=1):
        spec = get_spec(key)
        entry = status[spec.name]
        env_var = PROVIDER_ENV.get(key, "-") if spec.requires_key else "-"
        rows.append([str(position), spec.name, env_var, "ready" if entry["available"] else "missing key"])
    typer.echo(_render_table(PROVIDER_HEADERS, rows))


@app.command()
def validate() -> None:
    settings = load_settings()
    missing = []
    for key in settings.order:
        spec = get_spec(key)
        if spec.requires_key and key not in settings.credentials:
            missing.append(f"{spec.name}: {PROVIDER_ENV.get(key, 'UNKNOWN')}")
    if missing:
        typer.echo("Missing API keys:")
        for entry in missing:
            typer.echo(f"  - {entry}")
    else:
        typer.echo("All provider API keys present.")
    if missing and len(missing) == sum(1 for key in settings.order if get_spec(key).requires_key):
        typer.echo("Only keyless providers will be tried.")


@app.command()
def compare(
    question: str = typer.Argument("What is the capital of France?", help="Question sent to every provider"),
    verbose: bool = typer.Option(False, "--verbose", "-v", is_flag=True),
) -> None:
    """Ask every configured provider the same question, one after another."""
    _configure_logging(verbose)
    text = _read_question(question)
    settings = load_settings()
    resolver = build_resolver(settings)

    rows = []
    successes = 0
    for provider in resolver.providers:
        if not provider.available:
            rows.append([provider.name, "skipped", "-", "credential missing"])
            continue
        try:
            raw = asyncio.run(
                with_timeout(
                    provider.invoke(text, timeout=settings.timeout_ms / 1000),
                    provider.name,
                    settings.timeout_ms,
                )
            )
        except ProviderError as exc:
            rows.append([provider.name, "failed", "-", _truncate_cell(str(exc))])
            continue
        response = normalize(raw.text, provider.name, raw.elapsed_ms, split_lines=provider.split_lines)
        successes += 1
        rows.append([provider.name, "ok", _format_latency(response.time_taken), _truncate_cell(response.answer)])

    typer.echo(_render_table(COMPARE_HEADERS, rows))
    typer.echo(f"Success rate: {successes}/{len(rows)}")


@app.command()
def bench(verbose: bool = typer.Option(False, "--verbose", "-v", is_flag=True)) -> None:
    """Run a fixed question set through the fallback chain."""
    _configure_logging(verbose)
    settings = load_settings()
    resolver = build_resolver(settings)

    rows = []
    successes = 0
    total_ms = 0
    for text in BENCH_QUESTIONS:
        start = time.perf_counter()
        response = asyncio.run(resolver.resolve(text))
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        total_ms += elapsed_ms
        if not response.failed:
            successes += 1
        rows.append([_truncate_cell(text, 40), response.source, _format_latency(elapsed_ms)])

    typer.echo(_render_table(BENCH_HEADERS, rows))
    typer.echo(f"Success rate: {successes / len(BENCH_QUESTIONS) * 100:.1f}%")
    typer.echo(f"Average time: {_format_latency(total_ms / len(BENCH_QUESTIONS))}")


PROVIDER_HEADERS = ["#", "Provider", "Key", "Status"]
COMPARE_HEADERS = ["Provider", "Result", "Latency", "Answer / Error"]
BENCH_HEADERS = ["Question", "Source", "Total Time"]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_question(raw: str) -> str:
    if raw == "-":
        raw = typer.get_text_stream("stdin").read()
    text = raw.strip()
    if not text:
        raise typer.BadParameter("Question must not be empty")
    return text


def _echo_response(response: AIResponse) -> None:
    typer.echo("Answer: " + _styled(highlight(response.answer)))
    if response.explanation and not has_detail(response.answer):
        typer.echo(typer.style(f"Details: {response.explanation}", dim=True))
    typer.echo(
        f"Source: {response.source} | Time: {_format_latency(response.time_taken)} | "
        f"Confidence: {_format_pct(confidence(response))}"
    )


def _styled(highlighted: HighlightedAnswer) -> str:
    parts = []
    for text, style in highlighted.segments():
        if style == "muted":
            text = "\n        " + text
        parts.append(typer.style(text, **STYLES[style]))
    return "".join(parts)


def _truncate_cell(text: str, limit: int = 60) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[: limit - 3].rstrip() + "..."


def _render_table(headers: list[str], rows: list[list[str]]) -> str:
    if not rows:
        return ""
    widths = [len(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))

    def format_row(row: list[str]) -> str:
        return " | ".join(cell.ljust(widths[idx]) for idx, cell in enumerate(row))

    lines = [format_row(headers), "-+-".join("-" * w for w in widths)]
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines)


def _format_pct(value: float | int) -> str:
    try:
        return f"{float(value) * 100:.0f}%"
    except (TypeError, ValueError):
        return "-"


def _format_latency(ms: int | float | None) -> str:
    if ms in (None, ""):
        return "-"
    try:
        return f"{float(ms) / 1000:.1f}s"
    except (TypeError, ValueError):
        return "-"


if __name__ == "__main__":
    app()
