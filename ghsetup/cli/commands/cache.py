"""
Cache command implementation.

Lists gh installations in the tool cache.
"""

import logging

from ghsetup.core.config import default_tool_cache_dir
from ghsetup.core.tool_cache import TOOL_NAME, ToolCache

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the cache command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    if getattr(args, "cache_command", None) != "list":
        logger.error("No cache sub-command specified (try 'ghsetup cache list')")
        return 1

    root = getattr(args, "tool_cache", None) or default_tool_cache_dir()
    cache = ToolCache(root)
    versions = cache.list_versions(TOOL_NAME)

    if not versions:
        print(f"No cached {TOOL_NAME} versions in {root}")
        return 0

    for version in versions:
        print(f"{version}\t{cache.find(TOOL_NAME, version)}")
    return 0
