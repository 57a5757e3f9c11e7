"""Pydantic models for the device routes API wire format."""

import ipaddress
from typing import Annotated, List, Union

from pydantic import BaseModel, Field, PlainSerializer, PlainValidator, ValidationError, field_validator

from tailnet_routes.errors import MalformedResponse

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def parse_prefix(value) -> IPNetwork:
    """
    Parse a subnet prefix in CIDR notation.

    Parameters
    ----------
    value : str | ipaddress.IPv4Network | ipaddress.IPv6Network
        CIDR text such as "10.0.0.0/24", or an already parsed network

    Returns
    -------
    ipaddress.IPv4Network | ipaddress.IPv6Network

    Raises
    ------
    ValueError
        If the value is not a string or not a valid network prefix.
        Host bits must be zero ("10.0.0.1/24" is rejected) and the prefix
        length must be a decimal bit count ("10.0.0.0/255.255.255.0" is
        rejected).
    """
    if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"prefix must be a CIDR string, got {type(value).__name__}")
    _, sep, length = value.partition("/")
    if not sep:
        raise ValueError(f"prefix {value!r} is missing a prefix length")
    # netmask forms such as "10.0.0.0/255.255.255.0" are not CIDR
    if not (length.isascii() and length.isdigit()):
        raise ValueError(f"prefix {value!r} must end in a decimal prefix length")
    return ipaddress.ip_network(value, strict=True)


SubnetPrefix = Annotated[
    IPNetwork,
    PlainValidator(parse_prefix),
    PlainSerializer(lambda net: net.with_prefixlen, return_type=str),
]


class RouteSet(BaseModel):
    """Advertised and enabled subnet routes of a single device."""

    advertised_routes: List[SubnetPrefix] = Field(
        default_factory=list,
        alias="advertisedRoutes",
        description="Routes the device announces it can serve",
        examples=[["10.0.0.0/24"]],
    )
    enabled_routes: List[SubnetPrefix] = Field(
        default_factory=list,
        alias="enabledRoutes",
        description="Routes approved by the control plane, advertised or not",
        examples=[["10.0.0.0/24", "192.168.1.0/24"]],
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "advertisedRoutes": ["10.0.0.0/24"],
                    "enabledRoutes": ["10.0.0.0/24", "192.168.1.0/24"],
                }
            ]
        },
    }

    @field_validator("advertised_routes", "enabled_routes", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        """A JSON null list decodes as an empty list."""
        return [] if v is None else v

    @classmethod
    def from_json(cls, data) -> "RouteSet":
        """Decode a response body, raising MalformedResponse on any mismatch."""
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            body = data.encode() if isinstance(data, str) else bytes(data)
            raise MalformedResponse(f"invalid routes response: {e}", body=body) from e

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class RouteUpdateRequest(BaseModel):
    """Request body for replacing the enabled routes of a device."""

    routes: List[SubnetPrefix] = Field(..., description="Complete list of routes to enable")

    model_config = {"frozen": True}

    def to_json(self) -> str:
        return self.model_dump_json()


class ErrorResponse(BaseModel):
    """Error body returned by the control plane on non-200 responses."""

    message: str = Field(default="", description="Server-provided error message")
