"""Command line front end for the routes API.

Usage:
    python -m tailnet_routes get DEVICE_ID
    python -m tailnet_routes set DEVICE_ID [PREFIX ...]

Connection parameters come from the environment (see tailnet_routes.config)
and can be overridden with --base-url, --api-key and --timeout.
"""

import argparse
import logging
import sys
from typing import List, Optional

from tailnet_routes.client import Client
from tailnet_routes.config import settings
from tailnet_routes.errors import TailscaleError
from tailnet_routes.lib.models import parse_prefix

logger = logging.getLogger("tailnet_routes")


def _prefix_arg(value: str):
    try:
        return parse_prefix(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tailnet_routes", description="Read or replace the subnet routes of a device"
    )
    parser.add_argument("--base-url", default=None, help=f"API origin (default: {settings.base_url})")
    parser.add_argument("--api-key", default=None, help="API key (default: $TAILSCALE_API_KEY)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    get_cmd = subparsers.add_parser("get", help="Show advertised and enabled routes")
    get_cmd.add_argument("device_id")

    set_cmd = subparsers.add_parser("set", help="Replace the enabled routes")
    set_cmd.add_argument("device_id")
    set_cmd.add_argument("prefixes", nargs="*", type=_prefix_arg, metavar="PREFIX")
    return parser


def main(argv: Optional[List[str]] = None, client: Optional[Client] = None) -> int:
    """
    Entry point for the command line.

    Prints the resulting route set as JSON on stdout. Returns the process
    exit status: 0 on success, 1 when the API call failed.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if client is None:
        client = Client(args.api_key, base_url=args.base_url, timeout=args.timeout)

    with client:
        try:
            if args.command == "get":
                result = client.routes(args.device_id)
            else:
                result = client.set_routes(args.device_id, args.prefixes)
        except TailscaleError as e:
            logger.error(str(e))
            return 1

    print(result.to_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
