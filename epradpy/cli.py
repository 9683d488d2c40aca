import logging

import click

from epradpy import EPRad


def _setup_logging(verbose: bool) -> None:
    logger = logging.getLogger("epradpy")
    if not logger.handlers:
        formatter = logging.Formatter("%(levelname)s (%(name)s): %(message)s")
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@click.group()
@click.option("--verbose", is_flag=True, help="Log per-bin details.")
def cli(verbose: bool) -> None:
    _setup_logging(verbose)


@cli.command()
@click.option(
    "--config",
    required=True,
    type=str,
    help="Specify the path to the config file to be used.",
)
@click.option(
    "--q2",
    "q2",
    required=True,
    multiple=True,
    type=float,
    help="Momentum transfer squared in MeV^2, can be given several times.",
)
def xs(config: str, q2: tuple[float, ...]) -> None:
    """Print the cross sections in nb / MeV^2."""
    handler = EPRad(config)
    table = handler.cross_sections(list(q2))
    click.echo(table.to_string(index=False))


@cli.command()
@click.option(
    "--config",
    required=True,
    type=str,
    help="Specify the path to the config file to be used.",
)
@click.option(
    "--output",
    type=str,
    default="",
    help="File path of the exported grid. Overrides the output section of the config.",
)
def grid(config: str, output: str) -> None:
    """Build the event grid and export it."""
    handler = EPRad(config)
    handler.run()
    path = handler.export(output if output else None)
    click.echo(f"{len(handler.grid.q2_bins)} Q2 bins written to {path}")
