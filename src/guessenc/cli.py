import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO

import orjson
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from guessenc.config import ConfigError, GuessConfig, build_guesser, load_config
from guessenc.eval.harness import EvalSummary, evaluate_synthetic
from guessenc.eval.report import append_csv, append_jsonl, summary_to_row
from guessenc.eval.summarize import summarize_log
from guessenc.guess import Guesser
from guessenc.transcode import UnsupportedEncodingError, codec_name

app = typer.Typer(help="Guess the character encoding of files or standard input.")
eval_app = typer.Typer(help="Evaluation harness over a synthetic labelled corpus.")
console = Console()
err_console = Console(stderr=True)

app.add_typer(eval_app, name="eval")


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _resolve_config(
    config: Path | None, chunk_size: int | None, ignore_bom: bool
) -> GuessConfig:
    try:
        cfg = load_config(config) if config else GuessConfig()
        if chunk_size is not None:
            cfg = replace(cfg, chunk_size=chunk_size)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if ignore_bom:
        cfg.ignore_bom = True
    return cfg


def _guess_one(guesser: Guesser, stream: BinaryIO, cfg: GuessConfig) -> str:
    return str(guesser.guess(stream, chunk_size=cfg.chunk_size, ignore_bom=cfg.ignore_bom))


@app.command()
def guess(
    inputs: list[Path] | None = typer.Argument(
        None, help="Files to inspect; '-' or nothing reads standard input."
    ),
    chunk_size: int | None = typer.Option(
        None, "--chunk-size", "-s", min=1, help="Bytes read per heuristic round (default 4096)."
    ),
    ignore_bom: bool = typer.Option(
        False, "--ignore-bom", help="Skip the byte-order-mark shortcut."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="YAML/JSON file with detection settings."
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit a JSON document instead of lines."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log rule decisions to stderr."),
) -> None:
    """Report the most likely encoding of each input."""
    _setup_logging(verbose)
    cfg = _resolve_config(config, chunk_size, ignore_bom)
    guesser = build_guesser(cfg)

    results: list[dict[str, str]] = []
    for path in inputs or [Path("-")]:
        if str(path) == "-":
            encoding = _guess_one(guesser, sys.stdin.buffer, cfg)
        else:
            if not path.is_file():
                raise typer.BadParameter(f"Input file not found: {path}")
            with path.open("rb") as handle:
                encoding = _guess_one(guesser, handle, cfg)
        results.append({"input": str(path), "encoding": encoding})

    if as_json:
        console.print(
            orjson.dumps(results, option=orjson.OPT_INDENT_2).decode(),
            soft_wrap=True,
            markup=False,
            highlight=False,
        )
    else:
        for result in results:
            console.print(
                f"{escape(result['input'])}: [bold]{result['encoding']}[/]",
                soft_wrap=True,
                highlight=False,
            )


@app.command()
def encodings() -> None:
    """List registered encodings and which detection paths can report them."""
    guesser = Guesser()
    heuristic = set(guesser.supported_encodings)
    boms = set(guesser.supported_boms)
    table = Table("Encoding", "Heuristic", "BOM", "Python codec")
    for encoding in guesser.registry:
        try:
            codec = codec_name(encoding)
        except UnsupportedEncodingError:
            codec = "-"
        table.add_row(
            str(encoding),
            "yes" if encoding in heuristic else "",
            "yes" if encoding in boms else "",
            codec,
        )
    console.print(table)


@app.command("test-chars")
def test_chars(
    encoding: str = typer.Argument(..., help="Encoding whose test byte table to show."),
) -> None:
    """Show the byte codes of the test characters in ENCODING."""
    guesser = Guesser()
    codes = guesser.table.char_bytes_for(encoding)
    name = guesser.registry.canonicalize(encoding)
    payload = {
        "encoding": str(name),
        "count": len(codes),
        "bytes": [f"0x{code:02X}" for code in codes],
        "in_pool": name in guesser.table.pool,
    }
    console.print_json(orjson.dumps(payload).decode())


@eval_app.command("run")
def eval_run(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write evaluation JSON."
    ),
    log_csv: Path | None = typer.Option(
        None, "--log-csv", help="Append summary as a CSV row for trend tracking."
    ),
    log_jsonl: Path | None = typer.Option(
        None, "--log-jsonl", help="Append full payload as JSONL for trend tracking."
    ),
    tag: str | None = typer.Option(None, "--tag", help="Optional tag to mark this run."),
    count: int = typer.Option(16, "--count", "-n", help="Samples to generate."),
    seed: int = typer.Option(1234, "--seed", help="Seed for synthetic generation."),
    chunk_size: int | None = typer.Option(None, "--chunk-size", "-s", min=1),
    ignore_bom: bool = typer.Option(False, "--ignore-bom", help="Evaluate heuristics only."),
    config: Path | None = typer.Option(None, "--config", "-c", help="Detection settings."),
) -> None:
    """Run the detector over a synthetic corpus and report accuracy."""
    cfg = _resolve_config(config, chunk_size, ignore_bom)
    payload = evaluate_synthetic(
        count=count,
        seed=seed,
        chunk_size=cfg.chunk_size,
        ignore_bom=cfg.ignore_bom,
        guesser=build_guesser(cfg),
    )
    payload["tag"] = tag

    evaluation = payload["evaluation"]
    if log_csv and isinstance(evaluation, EvalSummary):
        append_csv(log_csv, summary_to_row(evaluation, source="synthetic", tag=tag))
        console.print(f"[bold green]Appended CSV log[/] to {log_csv}")
    if log_jsonl:
        append_jsonl(log_jsonl, payload)
        console.print(f"[bold green]Appended JSONL log[/] to {log_jsonl}")

    if output:
        output.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote evaluation report[/] to {output}")
    else:
        console.print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@eval_app.command("summarize")
def eval_summarize(
    log: Path = typer.Argument(..., help="CSV or JSONL log file produced by eval run."),
) -> None:
    """Summarize log(s) produced by eval logging."""
    if not log.is_file():
        raise typer.BadParameter(f"Log file not found: {log}")
    summary = summarize_log(log)
    console.print(orjson.dumps(summary, option=orjson.OPT_INDENT_2).decode())


if __name__ == "__main__":
    app()
