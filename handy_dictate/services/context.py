"""Project context forwarded to Handy's post-processing step.

Each lookup is optional: a failing lookup is logged and left out, never
surfaced to the user.
"""

import logging

from handy_dictate.services.host.base import BaseHost

logger = logging.getLogger(__name__)


async def gather_context(host: BaseHost) -> str:
    """Build a context string from the host's branch and modified files.

    Returns:
        Newline-joined context sections, or "" when nothing is available.
    """
    parts: list[str] = []

    try:
        branch = await host.current_branch()
        if branch:
            parts.append(f"Current branch: {branch}")
    except Exception as exc:
        logger.warning("Branch lookup failed, omitting from context: %s", exc)

    try:
        files = [f for f in await host.modified_files() if f]
        if files:
            listing = "\n".join(f"- {f}" for f in files)
            parts.append(f"Recently modified files:\n{listing}")
    except Exception as exc:
        logger.warning("File status lookup failed, omitting from context: %s", exc)

    return "\n".join(parts)
