"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click
from click.core import ParameterSource

from json_schema_markdown.configuration import DEFAULT_CONFIG_FILENAME, write_placeholder_settings
from json_schema_markdown.generation import (
    GenerationExecutionError,
    GenerationRequest,
    execute_markdown_generation,
)


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="json-schema-markdown")
def cli() -> None:
    """Generate Markdown reference documentation from JSON Schema files."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML settings template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a YAML settings file with guidance comments."""
    try:
        resolved_output = write_placeholder_settings(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="generate")
@click.argument("schema_path", type=click.Path(path_type=str))
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Markdown file to write; prints to stdout when omitted",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a YAML/JSON settings file",
)
@click.option(
    "-l",
    "--header-level",
    type=click.IntRange(min=1),
    default=None,
    help="Header level of the table of contents",
)
@click.option(
    "-p",
    "--schema-path",
    "schema_relative_base_path",
    default=None,
    help="Path, relative to the generated document, where the schema files can be found",
)
@click.option(
    "-s",
    "--suppress-warnings/--no-suppress-warnings",
    default=False,
    help="Do not print warnings (e.g. missing titles) into the document",
)
@click.option("-d", "--debug/--no-debug", default=False, help="Log $ref resolution steps")
@click.pass_context
def generate(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    schema_path: str,
    output_path: str | None,
    config_path: str | None,
    header_level: int | None,
    schema_relative_base_path: str | None,
    suppress_warnings: bool,
    debug: bool,
) -> None:
    """Render SCHEMA_PATH and every schema it references as Markdown."""
    _configure_logging(debug=debug)
    # Flags left at their default defer to the settings file.
    explicit = {
        name: value
        for name, value in (("suppress_warnings", suppress_warnings), ("debug", debug))
        if ctx.get_parameter_source(name) is not ParameterSource.DEFAULT
    }
    try:
        outcome = execute_markdown_generation(
            GenerationRequest(
                schema_path=schema_path,
                output_path=output_path,
                config_path=config_path,
                header_level=header_level,
                schema_relative_base_path=schema_relative_base_path,
                suppress_warnings=explicit.get("suppress_warnings"),
                debug=explicit.get("debug"),
            )
        )
    except GenerationExecutionError as exc:
        raise CliError(str(exc)) from exc

    if outcome.output_path is None:
        click.echo(outcome.markdown, nl=False)
    else:
        click.echo(str(outcome.output_path))


def _configure_logging(*, debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
