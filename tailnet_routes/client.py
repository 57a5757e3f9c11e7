"""HTTP client for the device routes endpoints of the control-plane API.

Two operations are exposed on ``Client``:

- ``routes(device_id)``            GET  /api/v2/device/{id}/routes
- ``set_routes(device_id, subnets)`` POST /api/v2/device/{id}/routes

Both return a fresh ``RouteSet`` on HTTP 200 and raise a ``TailscaleError``
subclass tagged with the operation name otherwise.

Typical usage:
    with Client(api_key="tskey-...") as client:
        current = client.routes("12345")
        updated = client.set_routes("12345", ["10.0.0.0/24"])
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterable, Optional, Tuple

import httpx
from pydantic import ValidationError

from tailnet_routes.config import DEFAULT_BASE_URL, settings
from tailnet_routes.errors import (
    APIError,
    MalformedResponse,
    RequestConstructionError,
    TailscaleError,
    TransportError,
)
from tailnet_routes.lib.models import ErrorResponse, RouteSet, RouteUpdateRequest, parse_prefix
from tailnet_routes.metrics import request_counter, request_latency

logger = logging.getLogger(__name__)

ROUTES_PATH = "{base_url}/api/v2/device/{device_id}/routes"

# Metric label for each error class
_OUTCOMES = {
    RequestConstructionError: "request_error",
    TransportError: "transport_error",
    APIError: "api_error",
    MalformedResponse: "malformed",
}


def handle_error_response(body: bytes, response: httpx.Response) -> APIError:
    """
    Decode the error body of a non-200 response.

    Parameters
    ----------
    body : bytes
        raw response body
    response : httpx.Response
        the response, used for its status code

    Returns
    -------
    APIError
        error carrying the server message and HTTP status. When the body is
        not a JSON error object the raw text is used as the message.
    """
    try:
        message = ErrorResponse.model_validate_json(body).message
    except ValidationError:
        message = body.decode("utf-8", errors="replace").strip()
    return APIError(message, status=response.status_code, body=body)


class Client:
    """Client for the control-plane routes API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key: str = settings.api_key if api_key is None else api_key
        self.user_agent: str = settings.user_agent if user_agent is None else user_agent
        self.timeout: float = settings.timeout if timeout is None else timeout
        self._base_url: str = settings.base_url if base_url is None else base_url

        self._owns_http_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(timeout=self.timeout)
        self._http: httpx.Client = http_client

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_http_client:
            self._http.close()

    @property
    def base_url(self) -> str:
        """API origin without a trailing slash."""
        return (self._base_url or DEFAULT_BASE_URL).rstrip("/")

    def _build_request(
        self,
        method: str,
        device_id: str,
        content: Optional[bytes] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Request:
        url = ROUTES_PATH.format(base_url=self.base_url, device_id=device_id)
        headers = {}
        if content is not None:
            headers["Content-Type"] = "application/json"
        if self.user_agent:
            headers["User-Agent"] = self.user_agent

        try:
            request = self._http.build_request(
                method,
                url,
                content=content,
                headers=headers,
                timeout=self.timeout if timeout is None else timeout,
            )
        except httpx.InvalidURL as e:
            raise RequestConstructionError(f"invalid request URL {url!r}: {e}") from e

        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestConstructionError(f"invalid request URL {url!r}: expected http(s) origin")
        return request

    def _send_request(self, request: httpx.Request) -> Tuple[bytes, httpx.Response]:
        """
        Send a request and read the whole response body.

        The status code is not inspected here. Only failures of the exchange
        itself are raised, as TransportError.
        """
        auth = httpx.BasicAuth(self.api_key, "") if self.api_key else httpx.USE_CLIENT_DEFAULT

        logger.debug(f"{request.method} {request.url}")
        try:
            response = self._http.send(request, auth=auth)
        except httpx.UnsupportedProtocol as e:
            raise RequestConstructionError(f"unsupported request URL {request.url}: {e}") from e
        except httpx.TimeoutException as e:
            raise TransportError(f"{request.method} {request.url} timed out: {e}", timed_out=True) from e
        except httpx.DecodingError as e:
            raise TransportError(f"{request.method} {request.url} body could not be decoded: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug(f"{request.method} {request.url} -> {response.status_code}")
        return response.content, response

    def _exchange(self, request: httpx.Request) -> RouteSet:
        body, response = self._send_request(request)

        # Only 200 counts as success; 201, 202 and 204 take the error path
        if response.status_code != httpx.codes.OK:
            err = handle_error_response(body, response)
            logger.warning(f"{request.method} {request.url} rejected: {err}")
            raise err

        try:
            return RouteSet.from_json(body)
        except MalformedResponse:
            logger.warning(f"{request.method} {request.url} returned a malformed routes body")
            raise

    @contextmanager
    def _operation(self, name: str):
        """Record metrics for one API call and tag any error with its name."""
        start_time = time.time()
        outcome = "success"
        try:
            yield
        except TailscaleError as e:
            outcome = _OUTCOMES.get(type(e), "error")
            raise e.with_operation(name) from e
        finally:
            request_counter.labels(operation=name, status=outcome).inc()
            request_latency.labels(operation=name).observe(time.time() - start_time)

    def routes(self, device_id: str, *, timeout: Optional[float] = None) -> RouteSet:
        """
        Retrieve the advertised and enabled subnet routes of a device.

        Enabled routes are not necessarily advertised by the device; they may
        only have been pre-approved.

        Args:
            device_id: Opaque device identifier, passed to the server as is
            timeout: Per-call timeout in seconds, overrides the client default

        Returns:
            RouteSet with the current routing state of the device

        Raises:
            RequestConstructionError, TransportError, APIError, MalformedResponse
        """
        with self._operation("tailscale.Routes"):
            request = self._build_request("GET", device_id, timeout=timeout)
            return self._exchange(request)

    def set_routes(
        self,
        device_id: str,
        subnets: Iterable,
        *,
        timeout: Optional[float] = None,
    ) -> RouteSet:
        """
        Replace the list of subnets enabled for a device.

        The submitted list is the complete set of enabled routes: any route
        left out is disabled. Subnets do not have to be advertised by the
        device yet.

        Args:
            device_id: Opaque device identifier
            subnets: Networks or CIDR strings, in the order to submit them
            timeout: Per-call timeout in seconds, overrides the client default

        Returns:
            RouteSet as updated by the server

        Raises:
            RequestConstructionError: also raised for an invalid subnet string
            TransportError, APIError, MalformedResponse
        """
        with self._operation("tailscale.SetRoutes"):
            try:
                prefixes = [parse_prefix(subnet) for subnet in subnets]
            except ValueError as e:
                raise RequestConstructionError(f"invalid subnet: {e}") from e

            params = RouteUpdateRequest(routes=prefixes)
            request = self._build_request(
                "POST", device_id, content=params.to_json().encode(), timeout=timeout
            )
            return self._exchange(request)
