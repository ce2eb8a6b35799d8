"""
Main FastAPI application entry point.

The environment is selected with ENVIRONMENT (development, production, test).
"""
import logging
import os

import uvicorn

from app.create_app import get_app

logging.basicConfig(level=logging.DEBUG)

app = get_app(f"{os.environ.get('ENVIRONMENT', 'development')}.toml")


if __name__ == "__main__":
    try:
        uvicorn.run(
            app,
            host="0.0.0.0",
            port=int(os.environ.get("PORT", 8000)),
            log_level="debug",
            loop="asyncio",
        )
    except Exception as e:
        logging.error(f"Error running FastAPI: {e}")
