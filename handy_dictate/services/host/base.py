"""
Abstract base class for host applications.

The host is the program whose prompt receives dictated text (e.g. the
opencode TUI). Implementations translate these four calls into whatever the
host exposes.
"""

from abc import ABC, abstractmethod

from handy_dictate.core.models import ToastVariant


class BaseHost(ABC):
    """Interface that every host adapter must implement."""

    @abstractmethod
    async def show_toast(
        self,
        message: str,
        variant: ToastVariant = ToastVariant.info,
        title: str | None = None,
    ) -> None:
        """Display a transient notice to the user.

        Args:
            message: Notice body.
            variant: Severity controlling the notice styling.
            title: Optional heading.
        """

    @abstractmethod
    async def append_prompt(self, text: str) -> None:
        """Append ``text`` to the host's prompt input."""

    @abstractmethod
    async def current_branch(self) -> str | None:
        """Return the version-control branch name, or None if unknown."""

    @abstractmethod
    async def modified_files(self) -> list[str]:
        """Return paths of files modified in the working tree."""
