"""CLI entrypoint for the File Searcher."""

import json
import logging
import sys
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from . import __version__
from .config.parser import ConfigurationError, create_config_template, load_config
from .models.config import SearcherConfig
from .models.search_query import SearchQuery
from .searcher import FileSearcher, SearchError
from .tools.fs_access import system_roots


EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _build_config(
    config_path: Optional[str],
    producers: Optional[int],
    queue_capacity: Optional[int],
    include_hidden: bool,
    follow_symlinks: bool,
) -> SearcherConfig:
    result = load_config(config_path)
    data = result.config.to_dict()

    if producers is not None:
        data["concurrency"]["producer_count"] = producers
    if queue_capacity is not None:
        data["concurrency"]["file_queue_capacity"] = queue_capacity
    if include_hidden:
        data["skip"]["skip_hidden"] = False
    if follow_symlinks:
        data["skip"]["follow_symlinks"] = True

    return SearcherConfig.from_dict(data)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("name", required=False)
@click.argument("roots", nargs=-1, type=click.Path(file_okay=False))
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--producers", type=click.IntRange(min=1), help="Number of directory producers")
@click.option("--queue-capacity", type=click.IntRange(min=1), help="File queue capacity")
@click.option("--include-hidden", is_flag=True, help="Also search entries whose name starts with '.'")
@click.option("--follow-symlinks", is_flag=True, help="Expand symlinked directories")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--stats", "show_stats", is_flag=True, help="Print a summary line to stderr")
@click.option("--write-template", type=click.Path(dir_okay=False), help="Write a config template and exit")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.version_option(__version__, prog_name="filesearcher")
def main(
    name: Optional[str],
    roots: Tuple[str, ...],
    config_path: Optional[str],
    producers: Optional[int],
    queue_capacity: Optional[int],
    include_hidden: bool,
    follow_symlinks: bool,
    as_json: bool,
    show_stats: bool,
    write_template: Optional[str],
    verbose: int,
    quiet: bool,
) -> None:
    """Find every file called NAME under ROOTS (default: the whole filesystem)."""
    _configure_logging(verbose, quiet)

    if write_template:
        try:
            create_config_template(write_template)
        except ConfigurationError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(EXIT_ERROR)
        click.echo(f"Configuration template written to {write_template}")
        return

    if not name:
        raise click.UsageError("Missing argument 'NAME'.")

    try:
        config = _build_config(config_path, producers, queue_capacity, include_hidden, follow_symlinks)
        search_roots = list(roots) or config.roots or system_roots()
        query = SearchQuery(target_name=name, roots=search_roots)
        results = FileSearcher(config).run(query)
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(EXIT_ERROR)
    except ValidationError as e:
        click.echo(f"Invalid search: {e}", err=True)
        sys.exit(EXIT_ERROR)
    except SearchError as e:
        click.echo(f"Search failed: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if as_json:
        click.echo(json.dumps(results.to_dict(), indent=2))
    else:
        for path in results.matches:
            click.echo(path)

    if show_stats:
        click.echo(str(results), err=True)

    sys.exit(EXIT_FOUND if results.has_matches() else EXIT_NOT_FOUND)


if __name__ == "__main__":
    main()
