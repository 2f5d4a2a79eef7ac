from .client import HTTPClient, HTTPSClient

__all__ = ("HTTPClient", "HTTPSClient")
