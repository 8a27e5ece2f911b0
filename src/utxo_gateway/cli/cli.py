# src/utxo_gateway/cli/cli.py
import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import uvicorn

from ..api.server import create_app
from ..config import GatewayConfig, GatewaySettings
from ..monitoring.logging_config import LogConfig

logger = logging.getLogger(__name__)

class CLI:
    def main(self, args: List[str]):
        parser = self.create_parser()
        args = parser.parse_args(args)

        if not hasattr(args, 'func'):
            parser.print_help()
            return

        args.func(args)

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='utxo-gateway CLI')
        parser.add_argument('--config', default='config/default.yaml', help='Path to YAML config')
        subparsers = parser.add_subparsers(title='commands', dest='command')

        serve = subparsers.add_parser('serve', help='Run the query gateway')
        serve.add_argument('--host', default=None, help='Bind host (overrides config)')
        serve.add_argument('--port', type=int, default=None, help='Bind port (overrides config)')
        serve.set_defaults(func=self.serve)

        check = subparsers.add_parser('check-config', help='Print the resolved settings')
        check.set_defaults(func=self.check_config)

        return parser

    def load_settings(self, args) -> GatewaySettings:
        settings = GatewayConfig(args.config).settings()
        overrides = {}
        if getattr(args, 'host', None):
            overrides['host'] = args.host
        if getattr(args, 'port', None):
            overrides['port'] = args.port
        return replace(settings, **overrides)

    def serve(self, args):
        settings = self.load_settings(args)
        LogConfig(log_dir=settings.log_dir, level=settings.log_level).setup_logging()
        logger.info(f"Starting utxo-gateway on {settings.host}:{settings.port}")
        app = create_app(settings)
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

    def check_config(self, args):
        settings = self.load_settings(args)
        print(json.dumps(settings.masked(), indent=2))

def main(argv: Optional[List[str]] = None):
    cli = CLI()
    cli.main(sys.argv[1:] if argv is None else argv)

if __name__ == "__main__":
    main()
