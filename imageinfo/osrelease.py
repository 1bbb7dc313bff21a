"""
Parser for os-release files (KEY=VALUE lines, optionally quoted values).
"""

import logging
from typing import BinaryIO

from .errors import ParseError
from .models import OSReleaseRecord

logger = logging.getLogger(__name__)

# Only the head of the file is inspected; longer files are truncated.
READ_WINDOW = 512

OS_RELEASE_PATHS = ("etc/os-release", "usr/lib/os-release")

FIELDS = {
    "PRETTY_NAME": "pretty_name",
    "NAME": "name",
    "VERSION_ID": "version_id",
    "ID": "id",
    "HOME_URL": "home_url",
}


def _unquote(value: str) -> str:
    return value.strip().removeprefix('"').removesuffix('"')


def parse_os_release(data: bytes) -> OSReleaseRecord:
    """
    Parse os-release content into an OSReleaseRecord.

    Args:
        data: Raw file content

    Returns:
        OSReleaseRecord with the recognized fields filled in

    Raises:
        ParseError: If the content is empty or has no ID

    Example:
        >>> parse_os_release(b'ID=ubuntu\\nPRETTY_NAME="Ubuntu 22.04"\\n').pretty_name
        'Ubuntu 22.04'
    """
    if not data:
        raise ParseError("empty os-release file")

    values = {}
    # Only "\n" ends a record; str.splitlines() also breaks on \f, \x85 and friends
    for line in data.decode("utf-8", errors="replace").split("\n"):
        key, sep, value = line.rstrip("\r").partition("=")
        if not sep:
            continue
        field = FIELDS.get(key)
        if field:
            values[field] = _unquote(value)

    if not values.get("id"):
        raise ParseError("os-release ID not found")
    return OSReleaseRecord(**values)


def read_os_release(fileobj: BinaryIO) -> OSReleaseRecord:
    """Parse the first READ_WINDOW bytes of an open os-release file."""
    data = fileobj.read(READ_WINDOW)
    logger.debug(f"Read {len(data)} bytes of os-release content")
    return parse_os_release(data)
