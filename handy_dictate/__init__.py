"""Toggle dictation for coding-agent prompts via the Handy speech-to-text API."""

__version__ = "0.1.0"
