"""Command-line interface for the Code Review Assistant."""

import sys
from pathlib import Path
from typing import Optional

import click

from codereviewer.analysis import analyze_code
from codereviewer.config import load_config
from codereviewer.controller import validate_code
from codereviewer.exceptions import EmptyCodeError
from codereviewer.gemini_client import GeminiClient
from codereviewer.language import detect_language
from codereviewer.review_formatter import EXPORT_FILENAME, ReviewFormatter


@click.group(invoke_without_command=True)
@click.pass_context
def main(ctx):
    """Code Review Assistant - AI-powered review of source code.

    \b
    COMMANDS:
      review   Review a file or stdin (default)
      detect   Print the detected language of a file
      serve    Run the web service

    \b
    EXAMPLES:
      codereviewer review app.js              # Review a file
      cat app.py | codereviewer               # Review stdin
      codereviewer review app.js --export     # Also write code-review-summary.md
      codereviewer serve --port 8765          # Start the web service
    """
    if ctx.invoked_subcommand is None:
        ctx.invoke(review_command)


@main.command("review")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--model", "-m", help="Gemini model to use (defaults to config)")
@click.option("--output-file", "-o", type=click.Path(dir_okay=False), help="Save review to markdown file")
@click.option("--export", "export_summary", is_flag=True, help=f"Save review to ./{EXPORT_FILENAME}")
@click.option("--show-code", is_flag=True, help="Print the code with highlighting before the review")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to config file")
@click.option("--debug", "-d", is_flag=True, help="Enable debug mode (show API request sizes)")
def review_command(source=None, model: Optional[str] = None, output_file: Optional[str] = None,
                   export_summary: bool = False, show_code: bool = False,
                   config_path: Optional[str] = None, debug: bool = False):
    """Review code from SOURCE (a file path, or - for stdin)."""
    formatter = ReviewFormatter()
    if source is None:
        source = click.get_text_stream("stdin")

    code = source.read()
    try:
        validate_code(code)
    except EmptyCodeError as e:
        formatter.print_error(f"{e.title}: {e.description}")
        sys.exit(1)

    settings = load_config(Path(config_path) if config_path else None)
    client = GeminiClient(model_name=model or settings["review"]["model"], debug=debug)

    if show_code:
        formatter.display_code(code, detect_language(code))

    try:
        with formatter.console.status("Analyzing...", spinner="dots"):
            review = analyze_code(code, client)
    except KeyboardInterrupt:
        formatter.print_warning("Review cancelled by user.")
        sys.exit(0)

    formatter.display_review_terminal(review)

    for target in filter(None, [output_file, EXPORT_FILENAME if export_summary else None]):
        formatter.format_review_markdown(review, target)
        formatter.print_success(f"Review saved to: {target}")


@main.command("detect")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def detect_command(source):
    """Print the language detected for SOURCE."""
    click.echo(detect_language(source.read()))


@main.command("serve")
@click.option("--host", help="Host to bind (defaults to config)")
@click.option("--port", type=int, help="Port to bind (defaults to config)")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to config file")
def serve_command(host: Optional[str], port: Optional[int], config_path: Optional[str]):
    """Run the Code Review web service."""
    from codereviewer.service import CodeReviewService

    config = load_config(Path(config_path) if config_path else None)
    CodeReviewService(config=config).run(host=host, port=port)


if __name__ == "__main__":
    main()
