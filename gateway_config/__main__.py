"""
Gateway configuration GATT service.

Exposes the assert location characteristic over BlueZ, asking the miner
for assert location transactions on behalf of a connected phone.
"""
import asyncio
import logging
import signal
import sys

from .config import load_config
from .const import CONF_LOG_LEVEL
from .errors import GatewayError
from .manager import GatewayManager

logger = logging.getLogger("gateway_config")


async def main() -> int:
    """Main entry point for the gateway configuration service."""
    try:
        config = load_config()
    except GatewayError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Error loading configuration: {e}")
        return 1

    logging.basicConfig(
        level=getattr(logging, config[CONF_LOG_LEVEL]),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Create stop event for clean shutdown
    stop_event = asyncio.Event()

    def signal_handler():
        logger.info("Shutdown signal received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    manager = GatewayManager(config)
    try:
        await manager.start()
    except GatewayError as e:
        logger.error(f"Error starting gateway service: {e}")
        await manager.stop()
        return 1
    except OSError as e:
        logger.error(f"Unable to connect to D-Bus: {e}")
        return 1

    await stop_event.wait()
    await manager.stop()
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
