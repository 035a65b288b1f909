"""
CLI for WSDL generation.

Provides the command-line interface for generating service descriptions
from annotated sources, inspecting what the directives declare, formatting
XML and serving documents over HTTP.

Usage:
    wsdlgen generate DemoService.php -n urn:demo -e http://localhost/soap
    wsdlgen generate -c wsdl.yml --readable -o demo.wsdl
    wsdlgen inspect DemoService.php
    wsdlgen format demo.wsdl --indent 2
    wsdlgen serve --port 8080 --source DemoService.php
"""

import json
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from wsdl_automation import __version__
from wsdl_automation.config import GeneratorConfig, ParseOptions
from wsdl_automation.errors import WsdlError
from wsdl_automation.formatter import format_xml
from wsdl_automation.generator import WsdlGenerator
from wsdl_automation.logging import configure_logging
from wsdl_automation.parser.interpreter import ParseSession, parse_source

console = Console(stderr=True)


def _fail(error: WsdlError) -> None:
    console.print(f"[bold red]Error:[/bold red] {error.message}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Minimum level of log events written to stderr.",
)
@click.option("--json-logs", is_flag=True, help="Write log events as JSON.")
def cli(log_level: str, json_logs: bool):
    """WSDL generator CLI.

    Build WSDL 1.1 service descriptions from @keyword directives in
    documentation comments.
    """
    configure_logging(level=log_level, json_format=json_logs or None)


@cli.command()
@click.argument(
    "sources",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--namespace", "-n", help="Target namespace of the document.")
@click.option("--endpoint", "-e", help="SOAP endpoint URI.")
@click.option("--service", "-s", "service_name", help="Service name (an @service directive takes precedence).")
@click.option(
    "--readable/--compact",
    default=None,
    help="Re-indent the document (default: compact, or the config file setting).",
)
@click.option("--include-desc", is_flag=True, help="Embed descriptions (readable output only).")
@click.option("--disable-array-suffix", is_flag=True, help="Do not infer arrays from an 'Array' suffix.")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML generator configuration.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the document to this file instead of stdout.",
)
def generate(
    sources: tuple,
    namespace: str | None,
    endpoint: str | None,
    service_name: str | None,
    readable: bool | None,
    include_desc: bool,
    disable_array_suffix: bool,
    config_path: Path | None,
    output: Path | None,
):
    """Generate a WSDL document from annotated sources.

    Examples:
        wsdlgen generate DemoService.php -n urn:demo -e http://localhost/soap
        wsdlgen generate -c wsdl.yml --readable -o demo.wsdl
    """
    try:
        config = GeneratorConfig.from_yaml(config_path) if config_path else GeneratorConfig()
        config = config.with_overrides(
            namespace=namespace,
            endpoint=endpoint,
            service_name=service_name,
            source_files=list(sources) or None,
            optimize=None if readable is None else not readable,
            include_desc=include_desc or None,
            parse=replace(config.parse, disable_array_suffix=True) if disable_array_suffix else None,
        )
        generator = WsdlGenerator(config)
        document = generator.generate()
    except WsdlError as e:
        _fail(e)
        return

    for diagnostic in generator.diagnostics:
        console.print(f"[yellow]Warning:[/yellow] {diagnostic}")

    if output:
        output.write_text(document, encoding="utf-8")
        console.print(
            f"[green]✅ Wrote {output}[/green] "
            f"({len(generator.types)} types, {len(generator.operations)} operations)"
        )
    else:
        click.echo(document, nl=not document.endswith("\n"))


@cli.command()
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--disable-array-suffix", is_flag=True, help="Do not infer arrays from an 'Array' suffix.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def inspect(sources: tuple, disable_array_suffix: bool, as_json: bool):
    """Show the types, operations and rejected directives of annotated sources."""
    options = ParseOptions(disable_array_suffix=disable_array_suffix)
    session = ParseSession()
    for path in sources:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            console.print(f"[yellow]Warning:[/yellow] skipped {path}: {e}")
            continue
        parse_source(text, options, include_desc=True, origin=str(path), session=session)

    if as_json:
        click.echo(json.dumps(_summary(session), indent=2))
        return

    out = Console()
    out.print(f"\n[bold blue]🔎 Service:[/bold blue] {session.service_name or '-'}")
    if session.description:
        out.print(f"   {session.description}")
    out.print()

    types = Table(title="Types")
    types.add_column("Name", style="cyan")
    types.add_column("Kind")
    types.add_column("Members")
    types.add_column("Description")
    for definition in session.types:
        if definition.is_array:
            types.add_row(
                definition.name, "array", f"{definition.element_type}[]", definition.description or ""
            )
        else:
            members = ", ".join(f"{f.name}: {f.type_name}" for f in definition.fields)
            types.add_row(definition.name, "struct", members or "-", definition.description or "")
    out.print(types)

    operations = Table(title="Operations")
    operations.add_column("Name", style="cyan")
    operations.add_column("Parameters")
    operations.add_column("Returns")
    operations.add_column("Description")
    for operation in session.operations:
        params = ", ".join(f"{p.name}: {p.type_name}" for p in operation.parameters)
        returns = operation.returns.type_name if operation.returns else "-"
        operations.add_row(operation.name, params or "-", returns, operation.description or "")
    out.print(operations)

    if session.diagnostics:
        out.print("\n[bold yellow]Rejected directives:[/bold yellow]")
        for diagnostic in session.diagnostics:
            out.print(f"  ⚠️  {diagnostic}")


def _summary(session: ParseSession) -> dict:
    return {
        "service": session.service_name,
        "description": session.description,
        "types": [
            {
                "name": t.name,
                "description": t.description,
                "is_array": t.is_array,
                "element_type": t.element_type,
                "fields": [
                    {"name": f.name, "type": f.type_name, "description": f.description} for f in t.fields
                ],
            }
            for t in session.types
        ],
        "operations": [
            {
                "name": o.name,
                "description": o.description,
                "parameters": [
                    {"name": p.name, "type": p.type_name, "description": p.description}
                    for p in o.parameters
                ],
                "returns": o.returns.type_name if o.returns else None,
            }
            for o in session.operations
        ],
        "diagnostics": [str(d) for d in session.diagnostics],
    }


@cli.command("format")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--indent", default=4, show_default=True, help="Spaces per nesting level.")
@click.option("--wrap", default=75, show_default=True, help="Wrap text at this column (0 disables).")
def format_command(source, indent: int, wrap: int):
    """Re-indent an XML document (use '-' for stdin)."""
    try:
        formatted = format_xml(source.read(), indent_multiplier=indent, wrap_width=wrap or None)
    except WsdlError as e:
        _fail(e)
        return
    click.echo(formatted, nl=False)


@cli.command()
@click.option("--host", default=None, help="Bind address.")
@click.option("--port", default=None, type=int, help="Bind port.")
@click.option(
    "--source",
    "sources",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Annotated source file (repeatable).",
)
@click.option("--service", "-s", "service_name", default=None, help="Service name.")
def serve(host: str | None, port: int | None, sources: tuple, service_name: str | None):
    """Serve the WSDL document over HTTP (GET /?wsdl)."""
    import uvicorn

    from wsdl_automation.service import create_app
    from wsdl_automation.settings import WsdlServiceSettings

    overrides = {
        "host": host,
        "port": port,
        "source_files": list(sources) or None,
        "service_name": service_name,
    }
    settings = WsdlServiceSettings(**{k: v for k, v in overrides.items() if v is not None})
    configure_logging(level=settings.log_level, json_format=settings.json_logs or None)

    console.print(f"[bold blue]🌐 Serving WSDL on http://{settings.host}:{settings.port}/?wsdl[/bold blue]")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
