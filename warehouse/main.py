#!/usr/bin/env python3
"""
warehouse server entry point

Loads the YAML config, wires the IoTDB history storage into FastAPI and
serves it with uvicorn.
"""

import argparse
import logging

import uvicorn

from .app import create_app
from .core.config import load_config_from


def main():
    """Main entry point for warehouse server."""
    parser = argparse.ArgumentParser(description="warehouse server")
    parser.add_argument("-c", "--config", help="Path to YAML config", default="config.yaml")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging level (overrides config)")
    args = parser.parse_args()

    config = load_config_from(args.config)
    if args.log_level:
        config.log_level = args.log_level

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))

    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, reload=False, access_log=False)


if __name__ == "__main__":
    main()
