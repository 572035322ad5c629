"""Movie catalog Python SDK."""

from .client import CatalogClient
from .config import ClientConfig
from .errors import CatalogError, HTTPError, ParseError, RequestCancelled, RetryExhausted, TransportError
from .models import ErrorEnvelope, Request, Response, RetryPolicy, RetryRule
from .pages import PageSection, load_home_page, load_movie_page
from .pipeline import RequestPipeline
from .transport import HttpxTransport, Transport

__all__ = [
    "CatalogClient",
    "ClientConfig",
    "CatalogError",
    "HTTPError",
    "ParseError",
    "RequestCancelled",
    "RetryExhausted",
    "TransportError",
    "ErrorEnvelope",
    "Request",
    "Response",
    "RetryPolicy",
    "RetryRule",
    "PageSection",
    "load_home_page",
    "load_movie_page",
    "RequestPipeline",
    "HttpxTransport",
    "Transport",
]
