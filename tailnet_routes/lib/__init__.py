"""Library module containing the wire models for the routes API."""

from tailnet_routes.lib.models import (
    ErrorResponse,
    RouteSet,
    RouteUpdateRequest,
    SubnetPrefix,
    parse_prefix,
)

__all__ = [
    'ErrorResponse',
    'RouteSet',
    'RouteUpdateRequest',
    'SubnetPrefix',
    'parse_prefix',
]
