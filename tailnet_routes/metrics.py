"""Prometheus collectors for control-plane API calls."""

from prometheus_client import Counter, Histogram

request_counter = Counter(
    "tailscale_api_requests_total",
    "Total number of control-plane API calls",
    ["operation", "status"],
)
request_latency = Histogram(
    "tailscale_api_request_latency_seconds",
    "Control-plane API call latency in seconds",
    ["operation"],
)
