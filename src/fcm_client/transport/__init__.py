"""Transport – pluggable HTTP request execution."""
from fcm_client.transport.client import HttpResponse, HttpxTransport, Transport

__all__ = ["HttpResponse", "HttpxTransport", "Transport"]
