#!/usr/bin/env python3
"""
Run script for the Aria Voice Relay
"""
import uvicorn

from aria_relay.config.settings import settings
from aria_relay.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
