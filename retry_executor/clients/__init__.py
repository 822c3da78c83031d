"""HTTP clients used as retryable operations."""

from .json_client import JsonClient

__all__ = ["JsonClient"]
