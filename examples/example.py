"""Example usage of the Frodo Python library.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import os

from frodo import FrodoLib
from frodo.exceptions import FrodoError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def print_handler(message: object, message_type: str, newline: bool) -> None:
    logger.info("[%s] %s", message_type, message)


async def main() -> None:
    """Log in, back up journeys and scripts, then list the themes."""
    async with FrodoLib(
        os.environ.get("FRODO_HOST"),
        os.environ.get("FRODO_REALM"),
        os.environ.get("FRODO_USERNAME"),
        os.environ.get("FRODO_PASSWORD"),
        print_handler=print_handler,
    ) as frodo:
        if not await frodo.login.get_tokens():
            return

        try:
            logger.info("=== Journey Export Example ===")
            journeys = await frodo.journey.export_journeys()
            filename = frodo.utils.get_typed_filename("allJourneys", "journey")
            frodo.utils.save_json_to_file(journeys, filename)
            logger.info("Exported %s journeys to %s", len(journeys["trees"]), filename)

            logger.info("=== Script Export Example ===")
            scripts = await frodo.script.export_scripts()
            filename = frodo.utils.get_typed_filename("allScripts", "script")
            frodo.utils.save_json_to_file(scripts, filename)
            logger.info("Exported %s scripts to %s", len(scripts["script"]), filename)

            logger.info("=== Theme Example ===")
            for theme in await frodo.theme.read_themes():
                default = " (default)" if theme.get("isDefault") else ""
                logger.info("Theme %s%s", theme.get("name"), default)

        except FrodoError as e:
            logger.exception("Frodo error: %s", e.get_combined_message())


if __name__ == "__main__":
    asyncio.run(main())
