"""expecttree command-line interface.

Discovers the test modules below a path, runs them and prints the report.

Examples
    $ expecttree specs
    $ expecttree specs --suffix .spec.py --json
    $ expecttree specs/math.test.py -vv

Exit status is 1 when any build error was recorded or any check failed.
"""

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from expecttree.config import TesterSettings
from expecttree.tester import Tester

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(verbose_count: int) -> None:
    """WARNING by default, one level more verbose per `-v`."""
    level = max(logging.DEBUG, logging.WARNING - 10 * verbose_count)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("expecttree").setLevel(level)


@click.command(help="Run the expecttree test modules found under PATH.")
@click.argument("path", type=click.Path(exists=True, path_type=Path))
@click.option("--suffix", default=None, help="File name suffix of test modules [default: .test.py].")
@click.option("--entry", "entry_point", default=None, help="Module-level callable to run [default: run].")
@click.option("--epsilon", type=float, default=None, help="Default tolerance of fuzzy checks [default: 1e-05].")
@click.option("--json", "as_json", is_flag=True, help="Print the results as JSON instead of the text report.")
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Increase the default WARNING verbosity by one level per repetition.",
)
@click.version_option(package_name="expecttree")
@click.pass_context
def main(
    ctx: click.Context,
    path: Path,
    suffix: str | None,
    entry_point: str | None,
    epsilon: float | None,
    as_json: bool,
    verbose_count: int,
) -> None:
    configure_logging(verbose_count)

    overrides = {
        "test_suffix": suffix,
        "entry_point": entry_point,
        "fuzzy_epsilon": epsilon,
    }
    try:
        settings = TesterSettings(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as e:
        raise click.BadParameter(str(e)) from e

    tester = Tester.from_directory(path, settings)
    if not tester.modules_info:
        logger.warning("No test modules found under %s", path)

    if as_json:
        click.echo(tester.results.model_dump_json(indent=2))
    else:
        click.echo(tester.format_results())

    ctx.exit(1 if tester.results.has_failures else 0)


if __name__ == "__main__":
    main()
