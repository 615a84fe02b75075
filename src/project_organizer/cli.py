"""Command line interface for project organizer."""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.classifier import ExtensionClassifier
from .core.organizer import ProjectOrganizer, RunReport, build_profile
from .core.profile_schema import validate_profile_file, create_example_profile
from .core.pruner import EmptyDirectoryPruner
from .core.scaffold import ScaffoldBuilder
from .core.selection import DialogDirectoryProvider, PromptDirectoryProvider, validate_target
from .models.config import Config, COLLISION_POLICIES, load_config, create_default_config
from .models.profile import list_profiles
from .exceptions import ProjectOrganizerError

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def _build_config(
    config_path: Optional[Path],
    profile: Optional[str] = None,
    profile_file: Optional[Path] = None,
    collision: Optional[str] = None,
    dry_run: bool = False,
    templates: bool = True,
    git: bool = True,
    normalize_names: bool = False
) -> Config:
    """Merge the config file (if any) with command line overrides."""
    cfg = load_config(config_path) if config_path else Config.default()

    sorting = cfg.sorting
    if profile:
        sorting = replace(sorting, profile=profile, profile_file=None)
    if profile_file:
        sorting = replace(sorting, profile_file=profile_file)
    if collision:
        sorting = replace(sorting, collision=collision)
    if normalize_names:
        sorting = replace(sorting, normalize_names=True)

    return replace(
        cfg,
        sorting=sorting,
        dry_run=dry_run or cfg.dry_run,
        templates=cfg.templates and templates,
        git_init=cfg.git_init and git
    )


def _fail(error: Exception) -> None:
    console.print(f"\n[red]Error: {error}[/red]")
    sys.exit(1)


def _print_relocation(report: RunReport) -> None:
    relocation = report.relocation
    title = "Planned moves" if relocation.dry_run else "Moved files"

    if relocation.moved:
        table = Table(title=title)
        table.add_column("File", style="cyan")
        table.add_column("Destination")
        for move in relocation.moved:
            table.add_row(
                str(move.source.relative_to(report.root)),
                str(move.destination.relative_to(report.root))
            )
        console.print(table)
    else:
        console.print("[yellow]No files to move[/yellow]")

    if relocation.renamed:
        console.print(f"[yellow]{len(relocation.renamed)} files renamed to avoid collisions[/yellow]")
    if relocation.overwritten:
        console.print(f"[red]{len(relocation.overwritten)} existing files overwritten[/red]")
    if relocation.skipped:
        console.print(f"[dim]{len(relocation.skipped)} files left in place[/dim]")


def _print_report(report: RunReport) -> None:
    _print_relocation(report)
    if report.dry_run:
        return

    removed = report.stale_pruned.removed + report.pruned.removed
    failures = report.stale_pruned.failures + report.pruned.failures

    summary = Table(title="Summary")
    summary.add_column("Step", style="cyan")
    summary.add_column("Count", justify="right")
    summary.add_row("Directories created", str(len(report.scaffold_created)))
    summary.add_row("Files moved", str(len(report.relocation.moved)))
    summary.add_row("Empty directories removed", str(len(removed)))
    summary.add_row("Templates written", str(len(report.templates.written)))
    summary.add_row("Templates already present", str(len(report.templates.skipped)))
    console.print(summary)

    if failures:
        console.print("\n[yellow]Directories that could not be pruned:[/yellow]")
        for path, message in failures[:10]:
            console.print(f"  • {path}: {message}")
        if len(failures) > 10:
            console.print(f"  ... and {len(failures) - 10} more")

    if report.repository_initialized:
        console.print("[green]Git repository initialized.[/green]")


profile_option = click.option(
    '--profile',
    help='Built-in sorting profile (current or legacy)'
)
profile_file_option = click.option(
    '--profile-file',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Custom sorting profile JSON file'
)
collision_option = click.option(
    '--collision',
    type=click.Choice(COLLISION_POLICIES),
    help='What to do when a destination file already exists'
)
config_option = click.option(
    '--config',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Configuration file path'
)


@click.group()
@click.version_option(package_name="project-organizer")
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def cli(verbose: bool):
    """Scaffold project folders and sort loose files into them."""
    _setup_logging(verbose)


@cli.command()
@click.argument('directory', required=False, type=click.Path(file_okay=False, path_type=Path))
@config_option
@profile_option
@profile_file_option
@collision_option
@click.option('--dry-run', is_flag=True, help='Show what would be moved without making changes')
@click.option('--templates/--no-templates', default=True, help='Write boilerplate files')
@click.option('--git/--no-git', default=True, help='Initialize a git repository if missing')
@click.option('--normalize-names', is_flag=True, help='Lower-case file names and use underscores')
@click.option('--dialog', is_flag=True, help='Pick the directory with a folder dialog')
def run(
    directory: Optional[Path],
    config: Optional[Path],
    profile: Optional[str],
    profile_file: Optional[Path],
    collision: Optional[str],
    dry_run: bool,
    templates: bool,
    git: bool,
    normalize_names: bool,
    dialog: bool
):
    """Organize a project DIRECTORY: scaffold, sort, prune, templates and git."""
    try:
        cfg = _build_config(
            config, profile, profile_file, collision, dry_run, templates, git, normalize_names
        )
        provider = DialogDirectoryProvider() if dialog else PromptDirectoryProvider(console=console)
        organizer = ProjectOrganizer(cfg, provider=provider)

        report = organizer.run(directory)
        console.print(f"\n[bold cyan]Project: {report.root}[/bold cyan]")
        _print_report(report)
    except ProjectOrganizerError as e:
        _fail(e)


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@config_option
@profile_option
@profile_file_option
@collision_option
@click.option('--dry-run', is_flag=True, help='Show what would be moved without making changes')
@click.option('--normalize-names', is_flag=True, help='Lower-case file names and use underscores')
def sort(
    directory: Path,
    config: Optional[Path],
    profile: Optional[str],
    profile_file: Optional[Path],
    collision: Optional[str],
    dry_run: bool,
    normalize_names: bool
):
    """Sort files in DIRECTORY by extension and remove empty folders."""
    try:
        cfg = _build_config(
            config, profile, profile_file, collision, dry_run,
            normalize_names=normalize_names
        )
        report = ProjectOrganizer(cfg).sort(directory)
        _print_relocation(report)
        if report.pruned.removed:
            console.print(f"[green]Removed {len(report.pruned.removed)} empty directories[/green]")
    except ProjectOrganizerError as e:
        _fail(e)


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option('--passes', default=1, show_default=True, type=click.IntRange(min=1),
              help='Maximum number of prune passes')
def prune(directory: Path, passes: int):
    """Remove empty directories below DIRECTORY."""
    result = EmptyDirectoryPruner().prune_repeatedly(directory, passes)
    for path in result.removed:
        console.print(f"Removed empty directory: {path}")
    for path, message in result.failures:
        console.print(f"[yellow]Could not prune {path}: {message}[/yellow]")
    console.print(f"\n[green]Removed {len(result.removed)} directories in {result.passes} passes[/green]")


@cli.command()
@click.argument('directory', type=click.Path(exists=True, file_okay=False, path_type=Path))
@config_option
def scaffold(directory: Path, config: Optional[Path]):
    """Create the standard folder skeleton in DIRECTORY."""
    try:
        cfg = load_config(config) if config else Config.default()
        builder = ScaffoldBuilder.from_config(cfg.scaffold)
        created = builder.build(directory)

        table = Table(title="Project Skeleton")
        table.add_column("Directory", style="cyan")
        table.add_column("Status")
        for path in builder.paths(directory):
            status = "[green]created[/green]" if path in created else "[dim]exists[/dim]"
            table.add_row(str(path.relative_to(directory)), status)
        console.print(table)
    except ProjectOrganizerError as e:
        _fail(e)


@cli.command()
@click.argument('name')
@click.option('--parent', type=click.Path(exists=True, file_okay=False, path_type=Path),
              default=Path('.'), help='Directory to create the project in')
@config_option
@click.option('--git/--no-git', default=True, help='Initialize a git repository')
def new(name: str, parent: Path, config: Optional[Path], git: bool):
    """Create a new project called NAME."""
    try:
        cfg = _build_config(config, git=git)
        report = ProjectOrganizer(cfg).new_project(parent, name)
        console.print(f"[green]Created project {report.root}[/green]")
        console.print(f"  {len(report.scaffold_created)} directories, "
                      f"{len(report.templates.written)} template files")
        if report.repository_initialized:
            console.print("[green]Git repository initialized.[/green]")
    except ProjectOrganizerError as e:
        _fail(e)


@cli.command()
@click.argument('filenames', nargs=-1, required=True)
@profile_option
@profile_file_option
def classify(filenames: Tuple[str, ...], profile: Optional[str], profile_file: Optional[Path]):
    """Show where each of FILENAMES would be sorted to."""
    try:
        cfg = _build_config(None, profile, profile_file)
        classifier = ExtensionClassifier(build_profile(cfg))

        table = Table(title=f"Destinations ({classifier.profile.name} profile)")
        table.add_column("File", style="cyan")
        table.add_column("Extension")
        table.add_column("Destination")
        for filename in filenames:
            table.add_row(
                filename,
                classifier.extension_of(filename) or "-",
                f"{classifier.classify_path(filename)}/"
            )
        console.print(table)
    except ProjectOrganizerError as e:
        _fail(e)


@cli.command()
def profiles():
    """List the built-in sorting profiles."""
    for profile in list_profiles():
        table = Table(title=f"{profile.name}: {profile.description}")
        table.add_column("Extensions", style="cyan")
        table.add_column("Destination")
        for rule in profile.rules:
            table.add_row(" ".join(sorted(rule.extensions)), rule.destination)
        table.add_row("(anything else)", profile.default)
        console.print(table)


@cli.command(name='validate-profile')
@click.argument('profile_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate_profile(profile_file: Path):
    """Check a custom profile JSON file."""
    errors = validate_profile_file(profile_file)
    if errors:
        console.print("[red]Profile is invalid:[/red]")
        for error in errors:
            console.print(f"  • {error}")
        sys.exit(1)
    console.print(f"[green]✓ {profile_file} is a valid profile[/green]")


@cli.command(name='init-config')
@click.argument('config_file', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--with-profile', type=click.Path(dir_okay=False, path_type=Path),
              help='Also write an editable profile file')
def init_config(config_file: Path, with_profile: Optional[Path]):
    """Write a default configuration to CONFIG_FILE."""
    if config_file.exists():
        console.print(f"[red]{config_file} already exists[/red]")
        sys.exit(1)
    create_default_config(config_file)
    console.print(f"[green]Wrote {config_file}[/green]")

    if with_profile:
        with open(with_profile, 'w', encoding='utf-8') as f:
            json.dump(create_example_profile(), f, indent=2)
        console.print(f"[green]Wrote {with_profile}[/green]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
