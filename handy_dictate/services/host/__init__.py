"""
Host module - adapters for the application that receives dictated text.

Factory function for creating host instances based on provider configuration.
"""

from .base import BaseHost

__all__ = ["BaseHost", "create_host"]


def create_host(provider: str, **kwargs) -> BaseHost:
    """Factory function to create a host adapter.

    Args:
        provider: Host name ("opencode", "console").
        **kwargs: Adapter-specific configuration.

    Returns:
        BaseHost implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "opencode":
        from .opencode import OpencodeHost

        return OpencodeHost(**kwargs)
    elif provider == "console":
        from .console import ConsoleHost

        return ConsoleHost(**kwargs)
    else:
        raise ValueError(f"Unknown host provider: {provider}")
