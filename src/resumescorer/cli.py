"""Command line interface for resumescorer."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console

from resumescorer import __version__
from resumescorer.analysis.analyzer import ResumeAnalysisClient
from resumescorer.config import AppConfig, load_config
from resumescorer.exceptions import InputValidationError, ResumeScorerError
from resumescorer.models import ProcessingEvent, ProcessingStage
from resumescorer.services.resume_processor import ResumeProcessor
from resumescorer.storage import CredentialStore, JsonFileStore, ModelSelection, mask_credential
from resumescorer.utils.display import display_analysis_result, display_error, display_models
from resumescorer.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


def parse_args(args: List[str]) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments without the program name.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="resumescorer",
        description="Score a PDF resume against a job description using OpenAI.",
    )
    parser.add_argument("--config", type=str, help="Path to a YAML configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging and error details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Score a resume against a job description")
    analyze.add_argument("resume", type=str, help="Path to the resume PDF")
    job_group = analyze.add_mutually_exclusive_group(required=True)
    job_group.add_argument("--job", type=str, help="File containing the job description")
    job_group.add_argument("--job-text", type=str, help="Job description text")
    analyze.add_argument("--json", action="store_true", help="Print the result as JSON")

    key = subparsers.add_parser("key", help="Manage the stored OpenAI API key")
    key_actions = key.add_subparsers(dest="action", required=True)
    key_set = key_actions.add_parser("set", help="Store an API key")
    key_set.add_argument("api_key", nargs="?", help="API key; prompted for when omitted")
    key_actions.add_parser("clear", help="Remove the stored API key")
    key_actions.add_parser("show", help="Show the API key source and a masked key")

    model = subparsers.add_parser("model", help="Manage the selected model")
    model_actions = model.add_subparsers(dest="action", required=True)
    model_actions.add_parser("list", help="List available models")
    model_set = model_actions.add_parser("set", help="Select a model")
    model_set.add_argument("model_id", type=str, help="Model id")
    model_actions.add_parser("clear", help="Revert to the default model")

    return parser.parse_args(args)


def _read_job_description(args: argparse.Namespace) -> str:
    if args.job_text is not None:
        return args.job_text
    path = Path(args.job).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputValidationError(f"Could not read job description {path}: {e}") from e


class _ProgressReporter:
    """Update a rich status line from processing events."""

    def __init__(self, status) -> None:
        self.status = status

    def __call__(self, event: ProcessingEvent) -> None:
        if event.stage is ProcessingStage.VALIDATING:
            self.status.update("Validating resume...")
        elif event.stage is ProcessingStage.EXTRACTING and event.progress:
            p = event.progress
            self.status.update(
                f"Extracting text: page {p.current_page}/{p.total_pages} ({p.percent_complete}%)"
            )
        elif event.stage is ProcessingStage.ANALYZING:
            self.status.update("Analyzing resume against job description...")


async def run_analyze(args: argparse.Namespace, config: AppConfig) -> int:
    job_description = _read_job_description(args)
    async with ResumeAnalysisClient.from_config(config) as client:
        processor = ResumeProcessor(client, config=config.processing)
        with err_console.status("Starting...") as status:
            result = await processor.process_resume(
                args.resume, job_description, on_event=_ProgressReporter(status)
            )

    if args.json:
        console.print_json(result.model_dump_json(by_alias=True))
    else:
        display_analysis_result(result, console)
    return 0


def run_key(args: argparse.Namespace, store: JsonFileStore) -> int:
    credentials = CredentialStore(store)
    if args.action == "set":
        api_key = args.api_key or console.input("OpenAI API key: ", password=True)
        credentials.store_credential(api_key)
        console.print("[green]API key stored.[/green]")
    elif args.action == "clear":
        credentials.remove_credential()
        console.print("API key removed.")
    else:
        api_key = credentials.get_credential()
        if api_key:
            console.print(f"Source: {credentials.key_source}\nKey: {mask_credential(api_key)}")
        else:
            console.print("[yellow]No API key configured.[/yellow]")
    return 0


def run_model(args: argparse.Namespace, store: JsonFileStore, config: AppConfig) -> int:
    models = ModelSelection(store, default_model=config.openai.model)
    if args.action == "set":
        models.store_model(args.model_id)
        console.print(f"Selected model: [cyan]{args.model_id}[/cyan]")
    elif args.action == "clear":
        models.clear_model()
        console.print(f"Reverted to default model: [cyan]{models.get_model()}[/cyan]")
    else:
        display_models(models.get_model_display_order(), models.get_model(), console)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    load_dotenv()
    args = parse_args(sys.argv[1:] if argv is None else argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        display_error(e, err_console)
        return 1

    debug = args.debug or config.debug
    setup_logging(config.logging, debug=debug)
    show_details = debug or config.analysis.include_raw_payload

    try:
        if args.command == "analyze":
            return asyncio.run(run_analyze(args, config))
        store = JsonFileStore(config.settings_file)
        if args.command == "key":
            return run_key(args, store)
        return run_model(args, store, config)
    except ResumeScorerError as e:
        logger.debug("Command failed", exc_info=True)
        display_error(e, err_console, debug=show_details)
        return 1
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted.[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
