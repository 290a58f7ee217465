"""
Shared clients for upstream APIs, sibling edge functions and document storage.
"""

from .ai_gateway import AIGatewayClient, completion_text
from .base import BaseServiceClient
from .functions import FunctionsClient
from .storage import DocumentStore

__all__ = [
    "AIGatewayClient",
    "BaseServiceClient",
    "DocumentStore",
    "FunctionsClient",
    "completion_text",
]
