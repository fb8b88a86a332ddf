"""
Main CLI entry point for sorty
"""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from sorty import __version__
from sorty.commands.check import CheckCommand
from sorty.core.config import PROJECT_CONFIG_NAME, Config
from sorty.core.diagnostics import Level
from sorty.core.lint import DECLARATION_GROUPS, UNSORTED_DECLARATIONS
from sorty.core.path_analyzer import PathAnalyzer
from sorty.core.reporter import Reporter

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@click.group()
@click.version_option(
    version=__version__,
    prog_name="sorty",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Configuration file path",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output",
)
@click.pass_context
def cli(
    ctx,
    config: str | None,
    verbose: bool,
    quiet: bool,
):
    """Declaration order linter for Rust

    Checks that `extern crate`, out-of-line `mod` and `use` declarations at
    the top of each module are in alphabetical order, and suggests the
    sorted replacement when they are not.
    """
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj["config"] = Config.from_file(Path(config))
    else:
        ctx.obj["config"] = Config.load_hierarchy(Path.cwd())

    # Apply CLI flags
    if verbose or ctx.obj["config"].verbose:
        ctx.obj["config"].verbose = True
        logging.getLogger().setLevel(logging.DEBUG)

    if quiet or ctx.obj["config"].quiet:
        ctx.obj["config"].quiet = True
        logging.getLogger().setLevel(logging.WARNING)
    elif not ctx.obj["config"].verbose:
        # progress messages only with --verbose
        logging.getLogger().setLevel(logging.WARNING)


@cli.command()
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(path_type=Path),
)
@click.option(
    "--level",
    "-l",
    type=click.Choice([level.value for level in Level]),
    help="Lint level (overrides configuration)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    help="Output format (overrides configuration)",
)
@click.option(
    "--changed-since",
    metavar="REF",
    help="Only check Rust files changed since this Git reference",
)
@click.option(
    "--no-suggestions",
    is_flag=True,
    help="Do not print the suggested declaration order",
)
@click.option(
    "--fail-on-warning",
    is_flag=True,
    help="Exit with status 1 when warnings are emitted",
)
@click.pass_context
def check(
    ctx,
    paths: tuple[Path, ...],
    level: str | None,
    output_format: str | None,
    changed_since: str | None,
    no_suggestions: bool,
    fail_on_warning: bool,
):
    """Check declaration order in Rust files.

    PATHS may be files or directories; directories are searched for `.rs`
    files. Defaults to the current directory.

    Examples:
        sorty check src/
        sorty check src/lib.rs --level deny
        sorty check . --changed-since origin/main --format json
    """
    config = ctx.obj["config"]
    if level:
        config.lint.level = level
    if output_format:
        config.output.format = output_format
    if no_suggestions:
        config.output.show_suggestions = False
    if fail_on_warning:
        config.output.fail_on_warning = True

    errors = config.validate()
    if errors:
        for error in errors:
            click.echo(f"Configuration error: {error}", err=True)
        sys.exit(2)

    command = CheckCommand(config)
    try:
        results = command.execute(list(paths) or [Path.cwd()], changed_since)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    reporter = Reporter(
        command.source_map,
        console=Console(
            highlight=False,
            emoji=False,
            no_color=not config.output.color,
        ),
        output_format=config.output.format,
        show_suggestions=config.output.show_suggestions,
    )
    reporter.report(results)

    sys.exit(command.exit_code(results))


@cli.command()
@click.argument(
    "path",
    type=click.Path(exists=True, path_type=Path),
)
@click.pass_context
def analyze(ctx, path: Path):
    """Analyze a path to see which Rust files would be checked.

    Examples:
        sorty analyze .
        sorty analyze src/lib.rs
    """
    config = ctx.obj["config"]
    analyzer = PathAnalyzer(
        extensions=config.discovery.extensions,
        exclude=config.discovery.exclude,
        recursive=config.discovery.recursive,
    )
    analysis = analyzer.analyze(path)

    click.echo(f"\nPath Analysis: {path}")
    click.echo("=" * 60)
    click.echo(f"Type: {analysis.path_type.value}")
    click.echo(f"Description: {analysis.description}")

    if analysis.is_directory:
        click.echo("\nFile Statistics:")
        click.echo(f"  Total files: {analysis.total_files}")
        click.echo(f"  Rust files: {len(analysis.rust_files)}")
        if analysis.excluded_files:
            click.echo(f"  Excluded Rust files: {len(analysis.excluded_files)}")

    if analysis.has_manifest:
        click.echo("\nCargo:")
        if analysis.crate_name:
            click.echo(f"  Crate: {analysis.crate_name}")
        for root in analysis.crate_roots:
            click.echo(f"  Crate root: {root}")
        for member in analysis.workspace_members:
            click.echo(f"  Workspace member: {member}")


@cli.command()
@click.pass_context
def init(ctx):
    """Initialize configuration in current directory

    Creates a default .sorty.yaml configuration file in the current directory.
    """
    config_path = Path.cwd() / PROJECT_CONFIG_NAME

    if config_path.exists():
        click.confirm(f"{config_path} already exists. Overwrite?", abort=True)

    default_config = Config()
    default_config.save(config_path)

    click.echo(f"Created configuration file: {config_path}")
    click.echo("Edit this file to customize your settings.")


@cli.command()
def explain():
    """Describe the unsorted_declarations lint"""
    lint = UNSORTED_DECLARATIONS
    click.echo(f"{lint.name} (default: {lint.default_level.value})")
    click.echo(f"  {lint.description}")
    click.echo("\nChecked groups (each one independently, per module):")
    for _, kind, keyword in DECLARATION_GROUPS:
        click.echo(f"  - {kind} (`{keyword}`)")
    click.echo(
        "\nWithin a group, #[macro_use] declarations come first and `pub`"
        "\ndeclarations last; otherwise names are compared character by"
        "\ncharacter. In a braced use list `self` comes first. Inline modules"
        "\nand the std prelude are ignored."
    )
    click.echo(
        "\nSilence it for a module with #![allow(unsorted_declarations)]"
        "\nor turn it into an error with #![deny(unsorted_declarations)]."
    )


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
