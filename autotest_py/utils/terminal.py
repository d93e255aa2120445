"""Utility functions for terminal output."""

from rich.console import Console
from rich.table import Table

from ..client.models import Program, ProgramStatus, TestResultStatus

console = Console()


def create_table(title: str, headers: list) -> Table:
    """Create a formatted table for display."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    return table


def format_status_color(status: ProgramStatus) -> str:
    """Format a program status with appropriate color."""
    if status in (ProgramStatus.GRADED, ProgramStatus.FINISHED_TESTING):
        return f"[green]{status.value}[/green]"
    elif status in (ProgramStatus.COMPILE_ERROR, ProgramStatus.PLAGIARIZED, ProgramStatus.REJECTED):
        return f"[red]{status.value}[/red]"
    elif status in (ProgramStatus.AWAITING_TESTS, ProgramStatus.CURRENTLY_TESTING):
        return f"[yellow]{status.value}[/yellow]"
    else:
        return f"[magenta]{status.value}[/magenta]"


def format_result_color(success: bool, status: TestResultStatus) -> str:
    """Format a test result with appropriate color."""
    if success:
        return f"[green]{status.value}[/green]"
    elif status in (TestResultStatus.EXECUTION_TIMEOUT, TestResultStatus.PROFILER_ERROR):
        return f"[magenta]{status.value}[/magenta]"
    else:
        return f"[red]{status.value}[/red]"


def progress_message(program: Program) -> str:
    """One-line description of a program that is still being tested."""
    result = program.result
    if result is None:
        return program.status.value
    if result.is_waiting:
        if result.in_queue:
            return f"{program.status.value} ({result.in_queue} ahead)"
        return program.status.value
    return f"{program.status.value} {result.completed_tests}/{program.total_tests}"


def results_table(program: Program) -> Table:
    """Build a table with the per-test results of *program*."""
    table = create_table("Test Results", ["Test", "Passed", "Status"])
    results = program.result.test_results if program.result else []
    for test in sorted(results, key=lambda t: t.id):
        table.add_row(
            str(test.id),
            "[green]yes[/green]" if test.success else "[red]no[/red]",
            format_result_color(test.success, test.status),
        )
    return table
