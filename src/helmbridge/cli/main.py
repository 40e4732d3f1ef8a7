#!/usr/bin/env python3
"""
HELMBRIDGE CLI
--------------
Routes the register / translate / deploy commands to the BridgeEngine.
This is the only place that turns errors into an exit status.
"""

import sys
import logging
import argparse
from typing import Optional, Sequence

from helmbridge.cli.formatter import VERSION, BridgeFormatter, console
from helmbridge.core.config import load_config
from helmbridge.core.engine import BridgeEngine
from helmbridge.core.errors import BridgeError

logger = logging.getLogger("helmbridge.cli")


class BridgeCLI:
    """
    CLI wrapper that translates user commands into engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="helm-bridge",
            description="helm-bridge - publish Helm release resources to the Bridge service",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = BridgeFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-v", "--version", action="version", version=f"helm-bridge v{VERSION}")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        register_parser = subparsers.add_parser("register", help="Register resources with the Bridge service")
        translate_parser = subparsers.add_parser("translate", help="Translate placeholders in the values file")
        deploy_parser = subparsers.add_parser("deploy", help="Translate placeholders and register resources")

        for sub in (register_parser, translate_parser, deploy_parser):
            sub.add_argument("--api-url", help="API URL for Bridge service (required)")
            sub.add_argument("--config", help="Config file (default: ./config.yaml)")
            sub.add_argument("--timeout", type=float, help="Network timeout in seconds (default: 30)")
            sub.add_argument("--debug", action="store_true", help="Verbose logging")

        for sub in (register_parser, deploy_parser):
            sub.add_argument("--kubeconfig", help="Kubeconfig to use outside the cluster")

        for sub in (translate_parser, deploy_parser):
            sub.add_argument("--values", help="Values file to translate (default: values.yaml)")
            sub.add_argument("--dry-run", action="store_true", help="Preview results without writing")
            sub.add_argument("--diff", action="store_true", help="Show the substitutions as a diff")

    def _build_engine(self, args: argparse.Namespace) -> BridgeEngine:
        config = load_config(
            api_url=args.api_url,
            config_file=args.config,
            values_file=getattr(args, "values", None),
            timeout=args.timeout,
            kubeconfig=getattr(args, "kubeconfig", None),
        )
        return BridgeEngine(config)

    def _show_translation(self, result, args: argparse.Namespace):
        if args.diff:
            self.formatter.display_diff(
                result["original_content"], result["translated_content"], result["file_path"]
            )
        self.formatter.print_translation(result)

    def _show_registrations(self, engine: BridgeEngine, reports):
        self.formatter.print_registration_table(reports)
        self.formatter.print_summary(engine.generate_summary(reports))

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        if not args.command:
            self.formatter.print_header("Helm Release Bridge")
            self.parser.print_help()
            return 0

        if args.debug:
            logging.getLogger("helmbridge").setLevel(logging.DEBUG)

        try:
            engine = self._build_engine(args)
            if args.command == "register":
                self.formatter.print_header("Resource Registration")
                self._show_registrations(engine, engine.register())
            elif args.command == "translate":
                self.formatter.print_header("Placeholder Translation")
                self._show_translation(engine.translate(dry_run=args.dry_run), args)
            elif args.command == "deploy":
                self.formatter.print_header("Translate & Register")
                result = engine.deploy(dry_run=args.dry_run)
                self._show_translation(result["translation"], args)
                self._show_registrations(engine, result["registrations"])
        except BridgeError as e:
            logger.debug("Command failed", exc_info=True)
            self.formatter.print_error(str(e))
            return 1
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(BridgeCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
