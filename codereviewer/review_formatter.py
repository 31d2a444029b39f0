"""Rendering of review results for the terminal, the web page and Markdown export."""

import html
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from codereviewer.console import console as default_console
from codereviewer.models import ReviewResult

EXPORT_FILENAME = "code-review-summary.md"
EXPORT_MEDIA_TYPE = "text/markdown"

EMPTY_STATE_MESSAGE = "Run the analysis to get a code review summary"

# kind -> (icon, rich style)
ISSUE_STYLES = {
    "error": ("✖", "red"),
    "warning": ("⚠", "yellow"),
    "info": ("ℹ", "blue"),
    "success": ("✔", "green"),
}
DEFAULT_ISSUE_KIND = "info"


def issue_icon(kind: str) -> str:
    """Icon for an issue kind; unknown kinds use the info icon."""
    return ISSUE_STYLES.get(kind, ISSUE_STYLES[DEFAULT_ISSUE_KIND])[0]


class ReviewFormatter:
    """Formats review results. Holds no review state of its own."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or default_console

    # Notices

    def print_info(self, message: str):
        self.console.print(f"[blue]{message}[/blue]")

    def print_success(self, message: str):
        self.console.print(f"[green]✔ {message}[/green]")

    def print_warning(self, message: str):
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_error(self, message: str):
        self.console.print(f"[red]✖ {message}[/red]")

    # Terminal

    def display_code(self, code: str, language: str):
        """Print code with syntax highlighting and a line number gutter."""
        self.console.print(Syntax(code, language, line_numbers=True, word_wrap=False))

    def display_review_terminal(self, review: Optional[ReviewResult], loading: bool = False):
        """Print the review panel for the loading, empty or ready state."""
        if loading:
            self.console.print(Panel(Text("Analyzing...", style="dim"), title="AI Review Summary"))
            return

        if review is None:
            self.console.print(Panel(Text(EMPTY_STATE_MESSAGE, style="dim"), title="AI Review Summary"))
            return

        self.console.rule("AI Review Summary")
        self.console.print("[bold]Summary[/bold]")
        self.console.print(Text(review.summary))
        self.console.print()
        self.console.print("[bold]Issues & Improvements[/bold]")

        for issue in review.issues:
            icon, style = ISSUE_STYLES.get(issue.kind, ISSUE_STYLES[DEFAULT_ISSUE_KIND])
            body = Text(issue.message)
            if issue.code_snippet:
                body.append("\n\n")
                body.append(issue.code_snippet, style="dim")
            self.console.print(Panel(body, title=f"{icon} {issue.kind}", title_align="left", border_style=style))

    # HTML

    def render_html(self, review: Optional[ReviewResult], loading: bool = False) -> str:
        """Render the review panel as an HTML fragment."""
        parts = ['<section class="review-summary">', "<header>AI Review Summary</header>"]

        if loading:
            parts.append('<div class="review-loading" aria-busy="true">Analyzing...</div>')
        elif review is None:
            parts.append(f'<div class="review-empty"><p>{EMPTY_STATE_MESSAGE}</p></div>')
        else:
            parts.append(f'<a class="review-download" href="/api/review/export" download="{EXPORT_FILENAME}">Download</a>')
            parts.append("<h3>Summary</h3>")
            parts.append(f'<p class="review-text">{html.escape(review.summary)}</p>')
            parts.append("<h3>Issues &amp; Improvements</h3>")
            parts.append('<div class="review-issues">')
            for issue in review.issues:
                parts.append(f'<div class="issue issue-{issue.kind}">')
                parts.append(f'<span class="issue-icon">{issue_icon(issue.kind)}</span>')
                parts.append(f'<p class="issue-message">{html.escape(issue.message)}</p>')
                if issue.code_snippet:
                    parts.append(f"<pre><code>{html.escape(issue.code_snippet)}</code></pre>")
                parts.append("</div>")
            parts.append("</div>")

        parts.append("</section>")
        return "\n".join(parts)

    # Markdown

    def format_review_markdown(self, review: ReviewResult,
                               output_file: Optional[Union[str, Path]] = None) -> str:
        """Serialize a review as Markdown, optionally writing it to ``output_file``."""
        content = "# AI Code Review Summary\n\n"
        content += f"## Summary\n{review.summary}\n\n"
        content += "## Issues & Improvements\n\n"

        for issue in review.issues:
            content += f"### {issue.kind.upper()}: {issue.message}\n"
            if issue.code_snippet:
                content += "```\n" + issue.code_snippet + "\n```\n\n"
            else:
                content += "\n"

        if output_file:
            Path(output_file).write_text(content, encoding="utf-8")

        return content
