"""
Version request parsing for ghsetup.

A user asks for one of three things:

- ``stable``: whatever the registry marks as the latest stable release
- ``latest``: the highest semantic version among recent releases,
  pre-releases included
- an exact semantic version, with or without a leading ``v``

Usage:
    from ghsetup.core.version import VersionSpecifier

    spec = VersionSpecifier("v2.40.0")
    spec.is_exact        # True
    spec.tag_name        # 'v2.40.0'
"""

import functools
import re
from enum import Enum
from typing import Optional, Tuple

from ghsetup.core.exceptions import InvalidVersionError, NotAnExactVersionError

STABLE = "stable"
LATEST = "latest"

# MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD], no leading zeros (semver.org 2.0.0)
_SEMVER_PATTERN = re.compile(
    r"^(?P<core>(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)\.(?:0|[1-9]\d*))"
    r"(?:-(?P<pre>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)


@functools.total_ordering
class CleanedVersion:
    """
    A canonical semantic version string.

    Only build through :func:`clean_version`. The string form carries no
    leading ``v`` and no build metadata; ordering follows release
    precedence, so ``2.0.0-rc1 < 2.0.0``.

    Attributes:
        version_string: Canonical version, e.g. ``'2.40.0'`` or ``'2.0.0-rc1'``
    """

    __slots__ = ("version_string", "_key")

    def __init__(self, version_string: str, key: Tuple):
        self.version_string = version_string
        self._key = key

    def __eq__(self, other) -> bool:
        if not isinstance(other, CleanedVersion):
            return NotImplemented
        return self._key == other._key

    def __lt__(self, other) -> bool:
        if not isinstance(other, CleanedVersion):
            return NotImplemented
        return self._key < other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __str__(self) -> str:
        return self.version_string

    def __repr__(self) -> str:
        return f"CleanedVersion('{self.version_string}')"


def clean_version(version: str) -> CleanedVersion:
    """
    Normalize a version string to a :class:`CleanedVersion`.

    Surrounding whitespace and any leading ``=`` or ``v`` characters are
    removed, then the remainder must be a full three-part semantic version.
    Build metadata is dropped.

    Args:
        version: Raw version or tag, e.g. ``'v2.40.0'``, ``' =1.2.3 '``

    Returns:
        CleanedVersion

    Raises:
        InvalidVersionError: If the string is not a semantic version

    Example:
        >>> clean_version("v2.0.0-rc1").version_string
        '2.0.0-rc1'
        >>> clean_version("1.2.3+build.7").version_string
        '1.2.3'
    """
    if not isinstance(version, str):
        raise InvalidVersionError(str(version))

    candidate = version.strip().lstrip("=v")
    match = _SEMVER_PATTERN.match(candidate)
    if not match:
        raise InvalidVersionError(version)

    version_string = match.group("core")
    if match.group("pre"):
        version_string = f"{version_string}-{match.group('pre')}"

    return CleanedVersion(
        version_string, _precedence_key(match.group("core"), match.group("pre"))
    )


def _precedence_key(core: str, pre: Optional[str]) -> Tuple:
    """
    Sort key implementing semver.org precedence.

    A release outranks all of its pre-releases. Pre-release identifiers
    compare left to right: numeric ones numerically and below alphanumeric
    ones, which compare as text; a shorter list of equal identifiers ranks
    lower.
    """
    numbers = tuple(int(part) for part in core.split("."))
    if not pre:
        return numbers + ((1,),)

    identifiers = tuple(
        (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
        for ident in pre.split(".")
    )
    return numbers + ((0, identifiers),)


def try_clean_version(version: str) -> Optional[CleanedVersion]:
    """Return the cleaned version, or None when ``version`` is not one."""
    try:
        return clean_version(version)
    except InvalidVersionError:
        return None


class SpecifierMode(Enum):
    """How a version request is resolved."""

    STABLE = "stable"
    LATEST = "latest"
    EXACT = "exact"


class VersionSpecifier:
    """
    A classified version request.

    The raw input is classified once, here, and nowhere else: the literal
    ``stable`` and ``latest`` select those modes, anything else must be a
    semantic version.

    Raises:
        InvalidVersionError: If the input is neither keyword nor a version
    """

    __slots__ = ("_input_version", "_mode", "_cleaned")

    def __init__(self, input_version: str):
        self._input_version = input_version
        self._cleaned: Optional[CleanedVersion] = None

        if input_version == STABLE:
            self._mode = SpecifierMode.STABLE
        elif input_version == LATEST:
            self._mode = SpecifierMode.LATEST
        else:
            self._cleaned = clean_version(input_version)
            self._mode = SpecifierMode.EXACT

    @property
    def input_version(self) -> str:
        return self._input_version

    @property
    def mode(self) -> SpecifierMode:
        return self._mode

    @property
    def is_stable(self) -> bool:
        return self._mode is SpecifierMode.STABLE

    @property
    def is_latest(self) -> bool:
        return self._mode is SpecifierMode.LATEST

    @property
    def is_exact(self) -> bool:
        return self._mode is SpecifierMode.EXACT

    @property
    def cleaned_version(self) -> CleanedVersion:
        """
        The requested version.

        Raises:
            NotAnExactVersionError: For ``stable`` and ``latest`` requests
        """
        if self._cleaned is None:
            raise NotAnExactVersionError(self._input_version)
        return self._cleaned

    @property
    def tag_name(self) -> str:
        """Release tag for the requested version, e.g. ``'v2.40.0'``."""
        return f"v{self.cleaned_version.version_string}"

    def __repr__(self) -> str:
        return f"VersionSpecifier('{self._input_version}', mode={self._mode.value})"
