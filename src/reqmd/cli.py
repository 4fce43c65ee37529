"""CLI entry point for reqmd."""

from pathlib import Path

import click

from reqmd.config import Settings, load_environment
from reqmd.errors import ReqmdError
from reqmd.export import dump_json, list_lines
from reqmd.factory import Factory
from reqmd.log import configure_logging
from reqmd.processor.pipeline import default_pipeline
from reqmd.request import Document
from reqmd.selector import Target
from reqmd.transport import RequestsTransport, Transport


def _load_document(doc_path: Path, settings: Settings, env_files: tuple[Path, ...]) -> Document:
    """Read a markdown file and build its processed requests."""
    environ = load_environment(env_files)
    factory = Factory(
        pipeline=default_pipeline(environ, prefix=settings.env_prefix),
        best_effort=settings.best_effort,
    )
    try:
        return factory.build(doc_path.read_text(encoding="utf-8"))
    except ReqmdError as e:
        raise click.ClickException(f"{doc_path}: {e}") from e


def _env_file_option(func):
    return click.option(
        "--env-file",
        "env_files",
        multiple=True,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Extra .env file to load (repeatable).",
    )(func)


def _best_effort_option(func):
    return click.option(
        "--best-effort",
        is_flag=True,
        help="Skip malformed request blocks instead of failing.",
    )(func)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool):
    """Run HTTP requests written in markdown documents."""
    configure_logging(verbose)


@main.command("list")
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_env_file_option
@_best_effort_option
def list_requests(doc_path: Path, env_files: tuple[Path, ...], best_effort: bool):
    """List the requests in a markdown file."""
    document = _load_document(doc_path, Settings(best_effort=best_effort), env_files)
    for line in list_lines(document):
        click.echo(line)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_env_file_option
@_best_effort_option
def dump(doc_path: Path, env_files: tuple[Path, ...], best_effort: bool):
    """Print every request in a markdown file as JSON."""
    document = _load_document(doc_path, Settings(best_effort=best_effort), env_files)
    click.echo(dump_json(document))


@main.command()
@click.argument("target")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds.")
@_env_file_option
@_best_effort_option
def send(target: str, timeout: float | None, env_files: tuple[Path, ...], best_effort: bool):
    """Send one request, addressed as FILE[:N|first|last|lineN]."""
    try:
        parsed = Target.parse(target)
    except ReqmdError as e:
        raise click.ClickException(str(e)) from e
    if not parsed.path.is_file():
        raise click.ClickException(f"file not found: {parsed.path}")

    settings = Settings(timeout=timeout, best_effort=best_effort)
    document = _load_document(parsed.path, settings, env_files)
    try:
        md = parsed.selection.resolve(document)
        if md.error is not None:
            raise md.error
        transport: Transport = RequestsTransport(timeout=settings.timeout)
        response = transport.send(md.request)
    except ReqmdError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"{response.status} {md.request.method.value} {md.request.url}", err=True)
    click.echo(response.body, nl=False)
