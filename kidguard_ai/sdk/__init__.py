"""
SDK for KidGuard AI.

Client for the upstream chat-completion provider.
"""

from .deepseek_client import ChatResponse, DeepSeekGateway
from .retry import BackoffPolicy

__all__ = ["BackoffPolicy", "ChatResponse", "DeepSeekGateway"]
