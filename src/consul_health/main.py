"""
Command-line interface for Consul health queries.

Prints JSON for one-shot health and catalog queries, and can watch a service
with blocking queries.
"""

import json
import logging
import sys
import time
from datetime import timedelta

import click

from .config.settings import get_config
from .exceptions import ConsulHealthError, DecodeError, MissingIndexError, TransportError
from .registry import (
    BlockingOptions,
    CatalogOptions,
    CheckOptions,
    Client,
    NodeOptions,
    ServiceOptions,
    StateOptions,
)

# Set up logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

MAX_BACKOFF = 60.0


def setup_logging(verbose: bool = False):
    """Configure logging based on verbosity settings."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.WARNING)

    for logger_name in ["urllib3", "httpx", "httpcore"]:
        logging.getLogger(logger_name).setLevel(logging.INFO if verbose else logging.WARNING)


def _echo_json(value):
    if isinstance(value, list):
        value = [item.to_dict() if hasattr(item, "to_dict") else item for item in value]
    click.echo(json.dumps(value, indent=2, sort_keys=True))


def _run(ctx, query):
    """Run a one-shot query, turning library errors into a non-zero exit."""
    client = ctx.obj["client"]
    try:
        _echo_json(query(client))
    except ConsulHealthError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        client.close()


def next_backoff(current: float) -> float:
    """Double the delay, starting at one second and capped at MAX_BACKOFF."""
    return min(max(current * 2, 1.0), MAX_BACKOFF)


def next_index(previous: int, received: int) -> int:
    """Index to send on the next watch request.

    A regression means the agent state was reset, so the watch starts over
    from 0. The result is never below 1: an index of 0 would make every
    request return at once.
    """
    if received < previous:
        received = 0
    return max(received, 1)


@click.group()
@click.option("--address", "-a", help="Agent address, e.g. http://127.0.0.1:8500")
@click.option("--dc", "datacenter", help="Default datacenter for every query")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging and debug output")
@click.pass_context
def cli(ctx, address, datacenter, verbose):
    """Consul Health - query service health and catalog data."""
    setup_logging(verbose)

    ctx.ensure_object(dict)

    try:
        config = get_config()
        config.override_from_cli({"address": address, "datacenter": datacenter})
        ctx.obj["client"] = Client(config.client_config())
    except ConsulHealthError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("node")
@click.pass_context
def node(ctx, node):
    """List the checks registered on NODE."""
    _run(ctx, lambda client: client.health.node(node, NodeOptions()))


@cli.command()
@click.argument("service")
@click.option("--near", help="Sort by round-trip time from this node")
@click.option("--node-meta", help="Filter by node metadata (key:value)")
@click.pass_context
def checks(ctx, service, near, node_meta):
    """List the checks associated with SERVICE."""
    options = CheckOptions(near=near, node_meta=node_meta)
    _run(ctx, lambda client: client.health.checks(service, options))


def _service_options(near, tag, node_meta, passing) -> ServiceOptions:
    return ServiceOptions(near=near, tag=tag, node_meta=node_meta, passing=passing or None)


service_filters = [
    click.option("--near", help="Sort by round-trip time from this node"),
    click.option("--tag", help="Only instances carrying this tag"),
    click.option("--node-meta", help="Filter by node metadata (key:value)"),
    click.option("--passing", is_flag=True, help="Only instances whose checks all pass"),
]


def with_service_filters(f):
    for option in reversed(service_filters):
        f = option(f)
    return f


@cli.command()
@click.argument("service")
@with_service_filters
@click.pass_context
def service(ctx, service, near, tag, node_meta, passing):
    """List the instances of SERVICE with their checks."""
    options = _service_options(near, tag, node_meta, passing)
    _run(ctx, lambda client: client.health.service(service, options))


@cli.command()
@click.argument("service")
@with_service_filters
@click.pass_context
def connect(ctx, service, near, tag, node_meta, passing):
    """List the Connect-capable instances of SERVICE."""
    options = _service_options(near, tag, node_meta, passing)
    _run(ctx, lambda client: client.health.connect(service, options))


@cli.command()
@click.argument("state")
@click.option("--near", help="Sort by round-trip time from this node")
@click.option("--node-meta", help="Filter by node metadata (key:value)")
@click.pass_context
def state(ctx, state, near, node_meta):
    """List the checks in STATE (passing, warning, critical or any)."""
    options = StateOptions(near=near, node_meta=node_meta)
    _run(ctx, lambda client: client.health.state(state, options))


@cli.command()
@click.option("--node-meta", help="Filter by node metadata (key:value)")
@click.pass_context
def services(ctx, node_meta):
    """List every registered service with its tags."""
    _run(ctx, lambda client: client.catalog.services(CatalogOptions(node_meta=node_meta)))


@cli.command()
@click.argument("service")
@click.option("--wait", default=30, show_default=True, help="Seconds the agent may hold each query")
@click.option("--index", "start_index", default=0, show_default=True, help="Index to start from")
@click.option("--max-iterations", type=int, help="Stop after this many responses")
@with_service_filters
@click.pass_context
def watch(ctx, service, wait, start_index, max_iterations, near, tag, node_meta, passing):
    """Print SERVICE's instances every time they change."""
    client = ctx.obj["client"]
    options = BlockingOptions(
        wait=timedelta(seconds=wait),
        options=_service_options(near, tag, node_meta, passing),
    )

    index = start_index
    seen = start_index
    backoff = 0.0
    responses = 0
    try:
        while max_iterations is None or responses < max_iterations:
            try:
                result = client.health.blocking.service(index, service, options)
            except (TransportError, MissingIndexError) as e:
                # No progress was made; retry later from the same index.
                backoff = next_backoff(backoff)
                logger.warning(f"Watch on {service} failed ({e}), retrying in {backoff:.0f}s")
                time.sleep(backoff)
                continue
            except DecodeError as e:
                if e.index is None:
                    raise
                logger.error(f"Skipping undecodable response at index {e.index}: {e}")
                index = next_index(index, e.index)
                seen = e.index
                responses += 1
                continue

            backoff = 0.0
            responses += 1
            if result.index != seen:
                click.echo(
                    json.dumps(
                        {
                            "index": result.index,
                            "entries": [entry.to_dict() for entry in result.body],
                        },
                        sort_keys=True,
                    )
                )
            seen = result.index
            index = next_index(index, result.index)
    except ConsulHealthError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        client.close()


@cli.command()
@click.pass_context
def config_info(ctx):
    """Display current configuration information."""
    config = ctx.obj["client"].config

    click.echo("Consul Health Configuration")
    click.echo("=" * 27)
    click.echo(f"Address: {config.address}")
    click.echo(f"Datacenter: {config.datacenter or 'agent default'}")
    click.echo(f"Token: {'set' if config.token else 'not set'}")
    click.echo(f"Timeout: {config.timeout} seconds")
    click.echo(f"TLS verification: {'on' if config.verify else 'off'}")


if __name__ == "__main__":
    cli()
