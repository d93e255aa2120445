"""Command-line interface for autotest_py."""

import asyncio
from pathlib import Path
from typing import Optional

import click
from bs4 import BeautifulSoup

from . import __version__
from .client import AutotesterClient, Program, RunStatus
from .config import GlobalConfig, LocalConfig
from .errors import AutotestError
from .service import AutotestService, LocalFileStorage
from .utils import console, format_status_color, progress_message, results_table
from .utils.log import configure_logging


RUN_MESSAGES = {
    RunStatus.RUNNING: "[yellow]Tests are already running for this directory.[/yellow]",
    RunStatus.NO_AUTOTESTS_DEFINED: "[red]No autotests defined (.autotest2 not found).[/red]",
    RunStatus.ERROR_OPENING_DIRECTORY: "[red]Could not open directory.[/red]",
}


def build_service(config: Optional[GlobalConfig] = None) -> AutotestService:
    """Create an AutotestService from global and workspace configuration."""
    config = config or GlobalConfig.load()
    local = LocalConfig.load()
    workspace_root = None
    if local is not None:
        if local.server_url:
            config.server_url = local.server_url
        if local.language:
            config.language = local.language
        workspace_root = local.workspace_root()

    return AutotestService(
        autotester=AutotesterClient(config),
        storage=LocalFileStorage(),
        poll_interval=config.poll_interval,
        workspace_root=workspace_root,
    )


@click.group()
@click.version_option(version=__version__)
def cli():
    """autotest_py - run assignment autotests on the autotester service."""
    pass


@cli.command()
def configure():
    """Save autotester server and credentials for future use."""
    config = GlobalConfig.load()
    config.server_url = click.prompt("Server URL", default=config.server_url)
    config.user = click.prompt("Username", default=config.user or "", show_default=False)
    config.password = click.prompt(
        "Password", default=config.password or "", hide_input=True, show_default=False
    )
    config.save()
    console.print(f"[green]Configuration saved for {config.server_url}[/green]")


@cli.command()
@click.option("--server-url", help="Server URL for this workspace")
@click.option("--language", help="Language of rendered results pages")
def init(server_url: Optional[str], language: Optional[str]):
    """Mark the current directory as a workspace root."""
    config = LocalConfig.load(Path.cwd() / ".autotest_py.local") or LocalConfig()
    if server_url:
        config.server_url = server_url
    if language:
        config.language = language
    config.save(Path.cwd() / ".autotest_py.local")
    console.print(f"[green]Workspace initialized at {Path.cwd()}[/green]")


@cli.command()
@click.argument("directory", type=click.Path(path_type=Path), default=".")
def check(directory: Path):
    """Check whether a directory has autotests defined."""
    service = build_service()
    if asyncio.run(service.has_autotests_defined(directory)):
        console.print(f"[green]Autotests defined in {directory}[/green]")
    else:
        console.print(f"[yellow]No autotests defined in {directory}[/yellow]")
        raise SystemExit(1)


@cli.command()
@click.argument("directory", type=click.Path(path_type=Path), default=".")
@click.option("--debug", is_flag=True, default=False, help="Enable debug output")
def run(directory: Path, debug: bool):
    """Run autotests for a directory and watch the results."""
    configure_logging(debug)
    service = build_service()
    if not asyncio.run(watch_tests(service, directory)):
        raise SystemExit(1)


async def watch_tests(service: AutotestService, directory: Path) -> bool:
    """Submit *directory* and follow it until testing ends."""
    try:
        info = await service.run_tests(directory)
    except AutotestError as e:
        console.print(f"[red]Failed to run tests: {e}[/red]")
        return False

    if not info.success:
        console.print(RUN_MESSAGES[info.status])
        return False

    console.print(f"[cyan]Submitted {directory}[/cyan]")
    outcome = {}

    with console.status("[bold green]Waiting in queue...") as status:
        unsubscribe = [
            service.on_tests_update.subscribe(
                lambda event: status.update(f"[bold green]{progress_message(event.program)}")
            ),
            service.on_tests_finished.subscribe(lambda event: outcome.update(finished=event.program)),
            service.on_tests_failed.subscribe(lambda event: outcome.update(failed=event.program)),
        ]
        try:
            await service.wait_for(directory)
        finally:
            for fn in unsubscribe:
                fn()
            await service.aclose()

    if "finished" not in outcome:
        console.print("[red]Testing was interrupted, see log for details.[/red]")
        return False

    console.print(f"\n[bold]Status:[/bold] {format_status_color(outcome['finished'].status)}")
    program = await service.get_program_from_autotest_result_file(directory)
    if program is not None:
        show_results(program)
    return True


def show_results(program: Program):
    """Print per-test results of a program."""
    if program.result and program.result.test_results:
        passed = sum(1 for t in program.result.test_results if t.success)
        console.print(results_table(program))
        console.print(f"[bold]Passed:[/bold] {passed}/{len(program.result.test_results)}")
    else:
        console.print("[yellow]No detailed test results available.[/yellow]")


@cli.command()
@click.argument("directory", type=click.Path(path_type=Path), default=".")
def results(directory: Path):
    """Show the last saved results for a directory."""
    service = build_service()
    try:
        program = asyncio.run(service.get_program_from_autotest_result_file(directory))
    except AutotestError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if program is None:
        console.print("[yellow]No results found. Run the tests first.[/yellow]")
        return

    console.print(f"[bold]Status:[/bold] {format_status_color(program.status)}")
    show_results(program)


@cli.command()
@click.argument("directory", type=click.Path(path_type=Path))
@click.argument("test_id", type=int)
@click.option("--text", is_flag=True, default=False, help="Strip HTML from the page")
def page(directory: Path, test_id: int, text: bool):
    """Show the rendered results page of one test."""
    service = build_service()
    try:
        body = asyncio.run(service.get_results_page(directory, test_id))
    except AutotestError as e:
        console.print(f"[red]Failed to fetch results page: {e}[/red]")
        raise SystemExit(1)

    if body is None:
        console.print("[yellow]Both .autotest2 and .at_result are needed to render results.[/yellow]")
        raise SystemExit(1)

    if text:
        body = BeautifulSoup(body, "html.parser").get_text("\n", strip=True)
    click.echo(body)


@cli.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]autotest_py[/bold cyan] version [green]{__version__}[/green]")
    console.print("Client for the autotester grading service")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
