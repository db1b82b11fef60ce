"""Main entry point for the demo Homie device service."""

import asyncio

from homie_mqtt.main import main

if __name__ == "__main__":
    asyncio.run(main())
