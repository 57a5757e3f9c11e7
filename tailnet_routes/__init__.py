"""Client library for the subnet routes endpoints of the control-plane API."""

from tailnet_routes.client import Client, handle_error_response
from tailnet_routes.errors import (
    APIError,
    MalformedResponse,
    RequestConstructionError,
    TailscaleError,
    TransportError,
)
from tailnet_routes.lib.models import RouteSet, SubnetPrefix, parse_prefix
from tailnet_routes.version import __version__

__all__ = [
    # Client
    'Client',
    'handle_error_response',
    # Models
    'RouteSet',
    'SubnetPrefix',
    'parse_prefix',
    # Errors
    'TailscaleError',
    'RequestConstructionError',
    'TransportError',
    'APIError',
    'MalformedResponse',
    '__version__',
]
