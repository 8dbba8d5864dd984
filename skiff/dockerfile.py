"""
Static Dockerfile inspection: exposed ports and health checks.

The Dockerfile is only read, never built or executed.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import SkiffError
from .interfaces import DockerfileParserBase

logger = logging.getLogger(__name__)

DEFAULT_HEALTHCHECK_INTERVAL = timedelta(seconds=10)
DEFAULT_HEALTHCHECK_TIMEOUT = timedelta(seconds=5)
DEFAULT_HEALTHCHECK_START_PERIOD = timedelta(seconds=0)
DEFAULT_HEALTHCHECK_RETRIES = 2

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


class DockerfileError(SkiffError):
    """The Dockerfile could not be read or contains an invalid instruction."""


@dataclass
class HealthCheck:
    """A HEALTHCHECK instruction with Docker's options filled in."""
    cmd: List[str]
    interval: timedelta = DEFAULT_HEALTHCHECK_INTERVAL
    timeout: timedelta = DEFAULT_HEALTHCHECK_TIMEOUT
    start_period: timedelta = DEFAULT_HEALTHCHECK_START_PERIOD
    retries: int = DEFAULT_HEALTHCHECK_RETRIES


@dataclass
class _Parsed:
    exposed_ports: List[int] = field(default_factory=list)
    health_check: Optional[HealthCheck] = None


def parse_duration(value: str) -> timedelta:
    """
    Parse a Docker duration string such as ``30s`` or ``1m30s``.

    Raises:
        ValueError: If the string is not a valid duration
    """
    if value == "0":
        return timedelta(0)
    pos = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(value):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(value):
        raise ValueError(f"invalid duration {value!r}")
    return timedelta(seconds=seconds)


def _logical_lines(text: str) -> List[str]:
    """Join continuation lines and drop comments and blank lines."""
    lines: List[str] = []
    current = ""
    for raw in text.splitlines():
        stripped = raw.strip()
        if stripped.startswith("#"):
            continue
        if stripped.endswith("\\"):
            current += stripped[:-1].rstrip() + " "
            continue
        current += stripped
        if current.strip():
            lines.append(current.strip())
        current = ""
    if current.strip():
        lines.append(current.strip())
    return lines


def _parse_expose(args: str) -> List[int]:
    ports = []
    for token in args.split():
        if "$" in token:
            logger.debug(f"Skipping EXPOSE argument with variable: {token}")
            continue
        number = token.split("/", 1)[0]
        try:
            port = int(number)
        except ValueError:
            raise DockerfileError(f"parse EXPOSE {token}: port must be a number")
        if not 1 <= port <= 65535:
            raise DockerfileError(f"parse EXPOSE {token}: port must be between 1 and 65535")
        ports.append(port)
    return ports


def _split_healthcheck(args: str) -> Tuple[List[str], str]:
    """Split HEALTHCHECK arguments into its ``--flag=value`` options and the rest."""
    options = []
    rest = args.strip()
    while rest.startswith("--"):
        option, _, rest = rest.partition(" ")
        options.append(option)
        rest = rest.strip()
    return options, rest


def _parse_healthcheck(args: str) -> Optional[HealthCheck]:
    options, rest = _split_healthcheck(args)
    if rest.upper() == "NONE":
        return None

    keyword, _, command = rest.partition(" ")
    if keyword.upper() != "CMD" or not command.strip():
        raise DockerfileError(f"parse HEALTHCHECK {args}: expected CMD followed by a command")
    command = command.strip()
    if command.startswith("["):
        try:
            exec_form = json.loads(command)
        except json.JSONDecodeError as e:
            raise DockerfileError(f"parse HEALTHCHECK {args}: {e}") from e
        cmd = ["CMD"] + [str(arg) for arg in exec_form]
    else:
        cmd = ["CMD-SHELL", command]

    hc = HealthCheck(cmd=cmd)
    for option in options:
        key, sep, value = option[2:].partition("=")
        if not sep:
            raise DockerfileError(f"parse HEALTHCHECK option {option}: missing value")
        try:
            if key == "interval":
                hc.interval = parse_duration(value)
            elif key == "timeout":
                hc.timeout = parse_duration(value)
            elif key == "start-period":
                hc.start_period = parse_duration(value)
            elif key == "retries":
                hc.retries = int(value)
            else:
                logger.debug(f"Ignoring unsupported HEALTHCHECK option {option}")
        except ValueError as e:
            raise DockerfileError(f"parse HEALTHCHECK option {option}: {e}") from e
    return hc


class DockerfileParser(DockerfileParserBase):
    """Reads a Dockerfile once and answers questions about it."""

    def __init__(self, path: str):
        self.path = path
        self._parsed: Optional[_Parsed] = None

    def _parse(self) -> _Parsed:
        if self._parsed is not None:
            return self._parsed
        try:
            text = Path(self.path).read_text(encoding="utf-8", errors="ignore")
        except OSError as e:
            raise DockerfileError(f"read Dockerfile {self.path}: {e}") from e

        parsed = _Parsed()
        for line in _logical_lines(text):
            instruction, _, args = line.partition(" ")
            instruction = instruction.upper()
            if instruction == "EXPOSE":
                for port in _parse_expose(args):
                    if port not in parsed.exposed_ports:
                        parsed.exposed_ports.append(port)
            elif instruction == "HEALTHCHECK":
                # Only the last HEALTHCHECK takes effect.
                parsed.health_check = _parse_healthcheck(args)
        self._parsed = parsed
        return parsed

    def exposed_ports(self) -> List[int]:
        """Return the ports declared by EXPOSE, in declaration order."""
        return list(self._parse().exposed_ports)

    def health_check(self) -> Optional[HealthCheck]:
        """Return the effective HEALTHCHECK, or None if none is declared."""
        return self._parse().health_check
