"""
Handy module - HTTP client and history poller for the Handy speech-to-text API.
"""

from .client import HandyClient
from .poller import HistoryPoller

__all__ = ["HandyClient", "HistoryPoller"]
