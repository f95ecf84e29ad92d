"""
Pipeline runner integration.

Reads step inputs, publishes outputs and PATH entries, and renders log
records as workflow commands (``::debug::``, ``::group::``, ...), following
the conventions of GitHub-hosted runners:

- inputs arrive as ``INPUT_<NAME>`` environment variables
- outputs and PATH additions are appended to the files named by
  ``GITHUB_OUTPUT`` and ``GITHUB_PATH``
- ``RUNNER_DEBUG=1`` turns on diagnostic logging
"""

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import MutableMapping, Optional, TextIO, Union

from ghsetup.core.exceptions import ConfigError

logger = logging.getLogger(__name__)


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class WorkflowCommandHandler(logging.Handler):
    """
    Logging handler that writes records as workflow commands.

    DEBUG records become ``::debug::``, WARNING ``::warning::`` and ERROR or
    above ``::error::``; INFO is written as plain text.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                line = f"::error::{escape_data(message)}"
            elif record.levelno >= logging.WARNING:
                line = f"::warning::{escape_data(message)}"
            elif record.levelno >= logging.INFO:
                line = message
            else:
                line = f"::debug::{escape_data(message)}"
            stream = self.stream or sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class Runner:
    """
    Access to the hosting pipeline.

    Args:
        environ: Environment mapping (default: ``os.environ``)
        stdout: Stream for workflow commands (default: ``sys.stdout``)
    """

    def __init__(
        self,
        environ: Optional[MutableMapping[str, str]] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self._stdout = stdout

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    def _command(self, line: str):
        self.stdout.write(line + "\n")
        self.stdout.flush()

    def get_input(self, name: str, required: bool = False) -> str:
        """
        Read a step input.

        Args:
            name: Input name as declared by the step, e.g. 'github-token'
            required: Raise when the input is empty

        Returns:
            The trimmed value, or '' when unset

        Raises:
            ConfigError: If required and not supplied
        """
        value = ""
        for key in _input_keys(name):
            if self.environ.get(key):
                value = self.environ[key]
                break

        value = value.strip()
        if required and not value:
            raise ConfigError(f"Input required and not supplied: {name}")
        return value

    def set_output(self, name: str, value: str):
        """Publish a step output."""
        output_file = self.environ.get("GITHUB_OUTPUT")
        if output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            _append_line(output_file, f"{name}<<{delimiter}\n{value}\n{delimiter}")
        else:
            self._command(f"::set-output name={escape_property(name)}::{escape_data(value)}")
        logger.debug(f"Set output {name}={value}")

    def add_path(self, directory: Union[str, Path]):
        """
        Prepend a directory to PATH for this process and later steps.
        """
        directory = str(directory)
        path_file = self.environ.get("GITHUB_PATH")
        if path_file:
            _append_line(path_file, directory)
        else:
            self._command(f"::add-path::{escape_data(directory)}")

        current = self.environ.get("PATH", "")
        self.environ["PATH"] = (
            f"{directory}{os.pathsep}{current}" if current else directory
        )
        logger.debug(f"Added {directory} to PATH")

    def is_debug(self) -> bool:
        """Whether the runner asked for diagnostic output."""
        return self.environ.get("RUNNER_DEBUG") == "1"

    @contextmanager
    def group(self, name: str):
        """Fold the enclosed output into a collapsible group."""
        self._command(f"::group::{escape_data(name)}")
        try:
            yield
        finally:
            self._command("::endgroup::")

    def set_failed(self, message: str) -> int:
        """
        Report the step as failed.

        Returns:
            Exit code to terminate with
        """
        self._command(f"::error::{escape_data(message)}")
        return 1


def _input_keys(name: str):
    """Environment variable names an input may be exposed under."""
    key = f"INPUT_{name.replace(' ', '_').upper()}"
    yield key
    if "-" in key:
        yield key.replace("-", "_")


def _append_line(file_path: str, content: str):
    with open(file_path, "a", encoding="utf-8") as f:
        f.write(content + "\n")


__all__ = [
    "Runner",
    "WorkflowCommandHandler",
    "escape_data",
    "escape_property",
]
