"""CLI main entry point"""

import logging
import os

import click

from ocdg import __version__
from ocdg.util import OCDGError, RunContext, configure_logging
from ocdg.objects.ocel import import_ocel, validate_ocel, validate_ocel_verbose
from ocdg.objects.oc_dependency_graph import RelationKinds, export_ocdg, import_ocdg
from ocdg.algo.discovery.oc_dependency import apply as generate_apply
from ocdg.algo.decomposition.oc_dependency import apply as decompose_apply

OCEL_EXTENSION = ".jsonocel"
GEXF_EXTENSION = ".gexf"
DEFAULT_OUTPUT = "output.gexf"
DEFAULT_DECOMPOSED_OUTPUT = "output-decomposed.gexf"

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="ocdg-cli")
@click.option("-d", "--debug", is_flag=True, help="Generate debug text in stdout")
@click.pass_context
def cli(ctx, debug):
    """Object-centric event logs and object-centric dependency graphs (OCDG)."""
    ctx.obj = configure_logging(debug)


@cli.group("ocel")
def ocel_group():
    """Work with object-centric event logs"""


@ocel_group.command("validate")
@click.argument("path")
@click.option("-v", "--verbose", is_flag=True, help="Print every violation with its location")
def validate_cmd(path: str, verbose: bool):
    """Validate the structure of a .jsonocel log"""
    if not path.endswith(OCEL_EXTENSION):
        logger.error(f"Error: {path} file format is not supported.")
        return

    try:
        if verbose:
            violations = validate_ocel_verbose(path)
            for i, (message, location) in enumerate(violations):
                click.echo(f"Error {i + 1}: {message} at {location}")
            click.echo(f"{path}: {not violations}")
        else:
            click.echo(f"{path}: {validate_ocel(path)}")
    except (OSError, ValueError) as e:
        click.echo(f"There was an Error: {e}")


@cli.group("ocdg")
def ocdg_group():
    """Generate and decompose object-centric dependency graphs"""


@ocdg_group.command("generate")
@click.argument("path")
@click.option("-o", "--output", default=DEFAULT_OUTPUT, show_default=True, help="Output file name and location")
@click.option("-r", "--relation", "relations", multiple=True,
              type=click.Choice([kind.value for kind in RelationKinds]),
              help="Relation to compute, can be repeated. Default: all relations")
@click.pass_obj
def generate_cmd(context: RunContext, path: str, output: str, relations):
    """Generate the OCDG of a .jsonocel log"""
    if not path.endswith(OCEL_EXTENSION):
        logger.error(f"Error: {path} file format is not supported.")
        return

    selected = RelationKinds.select(relations or None)
    logger.debug(f"Importing log: {path}")
    try:
        log = import_ocel(path)
        logger.debug(f"Generating OCDG on relations: {[kind.value for kind in selected]}")
        graph = generate_apply(log, selected, context=context)
        logger.debug("Exporting the generated OCDG.")
        export_ocdg(graph, output)
    except (OCDGError, OSError, ValueError) as e:
        logger.error(f"Generating the OCDG had the following error: {e}")
        return
    logger.debug(f"Successfully exported the OCDG to: {os.path.abspath(output)}")


@ocdg_group.command("decompose")
@click.argument("path")
@click.option("-o", "--output", default=DEFAULT_DECOMPOSED_OUTPUT, show_default=True,
              help="Output file name and location")
@click.pass_obj
def decompose_cmd(context: RunContext, path: str, output: str):
    """Decompose the OCDG stored in a .gexf file"""
    if not path.endswith(GEXF_EXTENSION):
        logger.error(f"Error: {path} file format is not supported.")
        return

    logger.debug(f"Importing graph: {path}")
    try:
        graph = import_ocdg(path)
        decomposed = decompose_apply(graph, context=context)
        export_ocdg(decomposed, output)
    except (OCDGError, OSError, ValueError) as e:
        logger.error(f"Decomposing the OCDG had the following error: {e}")
        return
    logger.debug(f"Successfully exported the decomposed OCDG to: {os.path.abspath(output)}")


def main():
    cli()
