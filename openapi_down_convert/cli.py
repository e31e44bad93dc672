import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from openapi_down_convert.config import get_options
from openapi_down_convert.converter import Converter
from openapi_down_convert.exceptions import DownConvertError
from openapi_down_convert.loader import dump_document, load_document

console = Console(stderr=True)
app = typer.Typer(
    name='openapi-down-convert',
    help='Convert an OpenAPI 3.1 document to OpenAPI 3.0',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger('openapi_down_convert')
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(
                console=console,
                show_time=False,
                show_path=False,
                show_level=False,
                markup=False,
            )
        )
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.command()
def convert(
    source: Annotated[
        str,
        typer.Option('--input', '-i', help='OpenAPI 3.1 document (file path or URL, YAML or JSON)'),
    ],
    output: Annotated[
        str | None,
        typer.Option(
            '--output',
            '-o',
            help='Output file. JSON if it ends in .json, YAML otherwise. Defaults to stdout.',
        ),
    ] = None,
    verbose: Annotated[
        bool | None,
        typer.Option('--verbose/--no-verbose', '-v', help='Log each transformation to stderr'),
    ] = None,
    delete_examples_with_id: Annotated[
        bool | None,
        typer.Option(
            '--delete-examples-with-id/--keep-examples-with-id',
            help='Drop schema examples that are objects with an `id` property',
        ),
    ] = None,
    allof: Annotated[
        bool | None,
        typer.Option(
            '--allof/--no-allof', help='Rewrite schema $ref with siblings to allOf: [{$ref}]'
        ),
    ] = None,
    authorization_url: Annotated[
        str | None,
        typer.Option('--authorization-url', help='authorizationUrl for openIdConnect -> oauth2'),
    ] = None,
    token_url: Annotated[
        str | None,
        typer.Option('--token-url', help='tokenUrl for openIdConnect -> oauth2'),
    ] = None,
    scopes: Annotated[
        str | None,
        typer.Option('--scopes', help='YAML or JSON file mapping scope names to descriptions'),
    ] = None,
    convert_nullable_types: Annotated[
        bool | None,
        typer.Option(
            '--convert-nullable-types/--no-convert-nullable-types',
            help='Rewrite type: [T, "null"] to nullable: true',
        ),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option('--config', '-c', help='Path to configuration file (YAML or JSON)'),
    ] = None,
) -> None:
    """Convert an OpenAPI 3.1 document to OpenAPI 3.0.

    Options not given on the command line are read from the configuration
    file, OPENAPI_DOWN_CONVERT_* environment variables, or defaults.

    Examples:
        openapi-down-convert convert -i openapi.yaml -o openapi-3.0.yaml
        openapi-down-convert convert -i openapi.json --scopes scopes.yaml -v
    """
    try:
        options = get_options(
            config,
            verbose=verbose,
            delete_example_with_id=delete_examples_with_id,
            allof_transform=allof,
            authorization_url=authorization_url,
            token_url=token_url,
            scope_description_file=scopes,
            convert_nullable_types=convert_nullable_types,
        )
        _configure_logging(options.verbose)

        document = load_document(source)
        converted = Converter(document, options).convert()
        dump_document(converted, output)

    except DownConvertError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    if output:
        console.print(f'[green]Converted[/green] {escape(source)} -> {escape(output)}')


@app.command()
def version() -> None:
    """Show the version of openapi-down-convert."""
    from openapi_down_convert import __version__

    console.print(f'openapi-down-convert version: {__version__}')


if __name__ == '__main__':
    app()
