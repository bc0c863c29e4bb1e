# main.py
"""
Start one of the two relay servers:

    python main.py provider            # relayer provider signs and pays (port 3000)
    python main.py local               # local relayer key signs and pays (port 3001)
"""
import argparse
import logging
import sys

import uvicorn

from errors import ConfigError
from log_config import configure_logging
from relay_config import LocalSettings, LoggingSettings, ProviderSettings, load_env_file

logger = logging.getLogger(__name__)


def build_app(variant: str):
    if variant == "provider":
        from provider_api import create_provider_app

        settings = ProviderSettings.from_env()
        return create_provider_app(settings), settings.port

    from local_api import create_local_app

    settings = LocalSettings.from_env()
    return create_local_app(settings), settings.port


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="meta-relay", description="Meta-transaction relay server")
    parser.add_argument("variant", choices=["provider", "local"])
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None, help="overrides PORT from the environment")
    parser.add_argument("--env-file", default=None, help="dotenv file (default: $RELAY_ENV_FILE or .env)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    load_env_file(args.env_file)
    configure_logging(LoggingSettings.from_env())

    try:
        app, port = build_app(args.variant)
    except ConfigError as e:
        logger.error("Startup aborted: %s", e)
        return 1

    port = args.port or port
    logger.info("Relayer (%s) running on port %s", args.variant, port)
    uvicorn.run(app, host=args.host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
