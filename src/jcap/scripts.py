# filename : scripts.py
# created  : 10/19/2026


import logging

import click

from jcap.core.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show raw components).")
@click.option(
    "-l",
    "--load-file",
    is_flag=True,
    help="Show load file data (size, AIDs, hash) instead of decoded components.",
)
@click.option(
    "--hash",
    "algorithm",
    type=click.Choice(["sha1", "sha256", "sha384", "sha512"]),
    default="sha1",
    show_default=True,
    help="Load file data block hash algorithm.",
)
def capinfo(file, verbose, load_file, algorithm):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    from jcap.app.display import format_cap_file, format_load_file
    from jcap.core.cap import CapError, decode_file, read_load_file

    lg.debug("capinfo %s", file)
    try:
        if load_file:
            click.echo(format_load_file(read_load_file(file), algorithm))
        else:
            click.echo(format_cap_file(decode_file(file)))
    except CapError as exc:
        raise click.ClickException(str(exc)) from exc
