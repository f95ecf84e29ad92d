"""
Install command implementation.

This is the command a pipeline step runs. It reads the step inputs, runs
the setup orchestrator, and turns any failure into a failed step.
"""

import logging
from typing import Optional

from ghsetup.core.config import load_config
from ghsetup.core.exceptions import GhSetupError
from ghsetup.core.runner import Runner
from ghsetup.install.orchestrator import SetupOrchestrator

logger = logging.getLogger(__name__)


def run(args, runner: Optional[Runner] = None) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments
        runner: Pipeline runner (default: bound to the process environment)

    Returns:
        Exit code (0 for success, 1 on failure)
    """
    runner = runner or Runner()

    try:
        config = load_config(
            runner,
            config_file=getattr(args, "config", None),
            overrides={
                "version": getattr(args, "version_spec", None),
                "github_token": getattr(args, "github_token", None),
                "tool_cache_dir": getattr(args, "tool_cache", None),
            },
        )
        installed = SetupOrchestrator(config, runner).run()
    except GhSetupError as e:
        return runner.set_failed(str(e))
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        return runner.set_failed(str(e))

    logger.info(f"gh {installed.version} is ready")
    return 0
