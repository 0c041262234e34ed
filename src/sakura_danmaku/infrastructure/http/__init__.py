from .client_factory import create_default_http_client
from .retry_transport import RetryTransport

__all__ = ["RetryTransport", "create_default_http_client"]
