# src/helmbridge/cli/formatter.py
import difflib
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

VERSION = "0.1.0"

# Initialize the Rich console for high-quality terminal output
console = Console()


class BridgeFormatter:
    """
    Renders translation diffs, registration tables and run summaries.
    """

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]helm-bridge v{VERSION}[/bold cyan]\n"
            "══════════════════════════════════════════════════",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def display_diff(self, original_text: str, translated_text: str, file_name: str):
        """
        Renders a colorized unified diff of the values document before and
        after placeholder substitution.
        """
        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            translated_text.splitlines(),
            fromfile=f"original/{file_name}",
            tofile=f"translated/{file_name}",
            lineterm=""
        ))

        if not diff_list:
            console.print(f"[dim]ℹ No placeholders to translate in {file_name}.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        console.print(Panel(syntax, title=f"Translation: {file_name}", border_style="green"))

    def print_translation(self, result: Dict[str, Any]):
        status = result.get("status")
        color = "green" if status == "TRANSLATED" else "cyan" if status == "PREVIEW" else "dim"
        console.print(
            f"[bold white]{result.get('file_path')}[/bold white]: "
            f"[{color}]{status}[/{color}] "
            f"({result.get('placeholders', 0)} placeholders)"
        )

    def print_registration_table(self, reports: List[Dict[str, Any]]):
        table = Table(title="Bridge Registration Report", show_lines=True, header_style="bold magenta")
        table.add_column("Resource", style="cyan")
        table.add_column("Kind", style="white")
        table.add_column("Namespace", style="dim")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            status = r.get("status", "FAILED")
            success = r.get("success", False)
            status_color = "dim" if status == "SKIPPED" else "green" if success else "red"
            result_icon = "–" if status == "SKIPPED" else "✅" if success else "❌"
            table.add_row(
                str(r.get("name") or "<unnamed>"), str(r.get("kind")), str(r.get("namespace") or ""),
                f"[{status_color}]{status}[/{status_color}]",
                result_icon
            )

        console.print(table)

        for r in reports:
            if r.get("error"):
                console.print(f"[bold red]Error in {r.get('kind')} {r.get('name')}:[/bold red] {r['error']}")

    def print_summary(self, summary: Dict[str, Any]):
        console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Resources:   {summary['total_resources']}\n"
            f"Registered:  [green]{summary['registered']}[/green]\n"
            f"Skipped:     {summary['skipped']}\n"
            f"Failed:      [red]{summary['failed']}[/red]",
            border_style="dim"
        ))

    def print_error(self, message: str):
        console.print(f"[bold red]Error:[/bold red] {message}")
