#!/usr/bin/env python3

import argparse
import asyncio
import logging
import sys

from federator.errors import ConfigurationError, FatalFederatorError
from federator.service import FederatorService

# Set up root logger
logger = logging.getLogger(__name__)


async def main():
    """Main entry point for the bridge federator."""
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="Bridge Federator")
    parser.add_argument(
        "--local",
        action="store_true",
        default=False,
        help="Sign votes with PRIVATE_KEY instead of through ROFL"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        default=False,
        help="Run a single pass and exit"
    )
    args = parser.parse_args()

    logger.info(f"Starting in {'LOCAL' if args.local else 'ROFL'} mode")

    try:
        service = FederatorService.from_env(local_mode=args.local)
        if args.once:
            await service.run_once()
        else:
            await service.run()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        logger.error("Required environment variables:")
        logger.error("  - SOURCE_RPC_URL: Source chain RPC endpoint")
        logger.error("  - SOURCE_BRIDGE_ADDRESS: Bridge contract emitting Cross events")
        logger.error("  - TARGET_RPC_URL: Destination chain RPC endpoint")
        logger.error("  - TARGET_BRIDGE_ADDRESS: Destination Bridge contract address")
        logger.error("  - FEDERATION_ADDRESS: Federation contract address")
        if args.local:
            logger.error("  - PRIVATE_KEY: Private key for signing votes")
        else:
            logger.error("  - FEDERATOR_ADDRESS: Address of the ROFL app key")
        sys.exit(1)
    except FatalFederatorError as e:
        logger.critical(f"Federator stopped: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
        if 'service' in locals():
            service.stop()
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
