import asyncio
import sys
from typing import List

import click
from dynaconf.validator import ValidationError as ConfigValidationError
from loguru import logger

from .connector import build_connector
from .metrics import start_metrics_server
from .poller import LogPoller
from .transport import HttpTransport
from .utils import load_config, setup_logging


async def print_events(events: List[bytes]) -> None:
    for event in events:
        click.echo(event.decode())


async def main(config_path: str, max_cycles: int | None = None) -> None:
    config = load_config(config_path)
    setup_logging(config.get('logging.file'))

    if config.get('metrics.enabled'):
        start_metrics_server(config.get('metrics.port'), addr='0.0.0.0')

    connector = build_connector(config)
    logger.info(f"Processing {config.chain.name} chain over {connector.transport_type.value}")

    async with HttpTransport(list(config.chain.rpc_urls)) as transport:
        poller = LogPoller(
            connector,
            transport,
            handler=print_events,
            poll_interval=config.get('connector.poll_interval'),
            strict_filter=config.get('connector.strict_filter'),
        )
        await poller.run(max_cycles=max_cycles)


@click.command()
@click.option("--config", "config_path", default="chains/config.yml", show_default=True,
              help="Path to the chain config file")
@click.option("--max-cycles", type=int, default=None, help="Stop after this many polls")
def run(config_path: str, max_cycles: int | None) -> None:
    """Poll a node for event logs and print each one as JSON."""
    try:
        asyncio.run(main(config_path, max_cycles))
    except KeyboardInterrupt:
        logger.info("Program interrupted by user. Exiting.")
    except (ConfigValidationError, FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"An unexpected error occurred in the main loop: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
