"""Process runner for the customer profile service.

Starts uvicorn on the FastAPI app. The HTTP listener and the preference sync
consumer share one process and one event loop. Host and port default to
CUSTOMER_HOST / CUSTOMER_PORT.

Usage:
    python src/server.py
    python src/server.py --port 9100
"""

import argparse

import uvicorn

from customers.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Customer profile service runner")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    args = parser.parse_args()

    # Logging is configured by the app lifespan
    uvicorn.run("app:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
