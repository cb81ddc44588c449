"""CLI entry point for java2graph."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from java2graph.classfile import ClassPath, split_classpath
from java2graph.core import BuildStats, ConfigError, FilterChain, Java2GraphError
from java2graph.core.builder import GraphBuilder
from java2graph.core.graph import UNLIMITED, TraversalOptions, TypeGraph, VisibilityPolicy
from java2graph.render import OutputFormat, render

app = typer.Typer(
    name="java2graph",
    help="Type hierarchy graphs for compiled Java archives.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ClasspathOption = Annotated[
    list[str] | None,
    typer.Option(
        "--classpath",
        "-c",
        help="Jar files or directories of jars, ':'-separated. Can be repeated.",
    ),
]
LogLevelOption = Annotated[
    str, typer.Option("--log-level", "-L", help="Log level: DEBUG, INFO, WARNING, ERROR")
]


def setup_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level {level!r}", param_hint="--log-level")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def classpath_roots(values: list[str] | None) -> list[Path]:
    """Expand repeated, colon-separated class path options."""
    roots: list[Path] = []
    for value in values or []:
        roots.extend(split_classpath(value))
    return roots


def print_stats(graph: TypeGraph, stats: BuildStats, target: Console) -> None:
    target.print("[green]Done![/green]")
    target.print(f"  Archives: {stats.archives}")
    target.print(f"  Types registered: {stats.types}")
    target.print(f"  Nodes: {graph.num_nodes}")
    target.print(f"  Links: {graph.num_edges}")
    if stats.skipped:
        target.print(f"  [dim]Filtered out: {stats.skipped}[/]")
    if stats.errors:
        target.print(f"  [red]Errors: {len(stats.errors)}[/red]")
        for error in stats.errors:
            target.print(f"    {error}")


@app.command()
def graph(
    seeds: Annotated[
        list[str],
        typer.Argument(help="Seed types (a.b.C or a/b/C.java), or jar files for all their types"),
    ],
    classpath: ClasspathOption = None,
    no_interfaces: Annotated[
        bool, typer.Option("--no-interfaces", "-i", help="Ignore interfaces")
    ] = False,
    no_implementors: Annotated[
        bool,
        typer.Option("--no-implementors", "-m", help="Ignore classes implementing interfaces"),
    ] = False,
    no_declared: Annotated[
        bool, typer.Option("--no-declared", "-d", help="Ignore declared (nested) types")
    ] = False,
    private: Annotated[
        bool, typer.Option("--private", "-p", help="Include private nested types")
    ] = False,
    returns: Annotated[
        bool, typer.Option("--returns", "-M", help="Follow method return types")
    ] = False,
    arguments: Annotated[
        bool, typer.Option("--arguments", "-A", help="Follow method argument types")
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-R", help="Ignore types starting with this prefix"),
    ] = None,
    exclude_name: Annotated[
        list[str] | None, typer.Option("--exclude-name", "-n", help="Ignore this exact type")
    ] = None,
    regex: Annotated[
        list[str] | None,
        typer.Option("--regex", "-r", help="Ignore types matching this regular expression"),
    ] = None,
    ignore_common: Annotated[
        bool,
        typer.Option("--ignore-common", "-C", help="Ignore common JDK types (Serializable, ...)"),
    ] = False,
    max_distance: Annotated[
        int,
        typer.Option("--max-distance", "-x", help="Max distance to the seeds (-1: unlimited)"),
    ] = UNLIMITED,
    output_format: Annotated[
        OutputFormat, typer.Option("--format", "-f", help="Output format")
    ] = OutputFormat.DOT,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Output file (default: stdout)")
    ] = None,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """Build the type graph around SEEDS and print it."""
    setup_logging(log_level)

    options = TraversalOptions(
        use_interfaces=not no_interfaces,
        use_implementors=not no_implementors,
        use_declared_types=not no_declared,
        use_private_declared_types=private,
        use_return_types=returns,
        use_argument_types=arguments,
    )
    policy = VisibilityPolicy(max_distance)

    try:
        filters = FilterChain.from_options(
            names=exclude_name or [],
            prefixes=exclude or [],
            patterns=regex or [],
            ignore_common=ignore_common,
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--regex") from e

    try:
        with ClassPath() as cp:
            builder = GraphBuilder(cp, filters, options)
            for root in classpath_roots(classpath):
                builder.add_root(root)
            seed_names = builder.expand_seeds(seeds)
            if not seed_names:
                err_console.print("[red]No seed types found[/red]")
                raise typer.Exit(code=1)

            if output is None:
                builder.scan()
                result = builder.build(seed_names)
                typer.echo(render(output_format, result, policy), nl=False)
                return

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("Scanning class path", total=None)

                def on_progress(name: str, current: int, total: int) -> None:
                    progress.update(task, total=total, completed=current)
                    progress.update(task, description=f"[cyan]{name}[/]")

                builder.scan(on_progress=on_progress)

            result = builder.build(seed_names)
            output.write_text(render(output_format, result, policy), encoding="utf-8")
            print_stats(result, builder.stats, console)
            console.print(f"  Written to [cyan]{output}[/cyan]")
    except Java2GraphError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e


@app.command()
def types(
    query: Annotated[str | None, typer.Argument(help="Substring to search for")] = None,
    classpath: ClasspathOption = None,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """List the types available on the class path."""
    setup_logging(log_level)

    with ClassPath() as cp:
        builder = GraphBuilder(cp)
        for root in classpath_roots(classpath):
            builder.add_root(root)
        names = sorted(n for n in cp.names() if query is None or query in n)

        if output_json:
            print(json.dumps(names))
            return
        if not names:
            label = f" for '[cyan]{query}[/cyan]'" if query else ""
            console.print(f"No types found{label}")
            return
        for name in names:
            java_type = cp.lookup(name)
            kind = "interface" if java_type.is_interface else "class"
            console.print(f"[cyan]{name}[/cyan] ({kind})")


if __name__ == "__main__":
    app()
