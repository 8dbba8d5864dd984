"""
Validation of the flags given to ``svc init``.
"""

import os
import re

from ..errors import (
    BuildFileNotFound,
    ConflictingSource,
    InvalidName,
    InvalidServiceType,
    NoApplicationContext,
)
from ..manifest import SERVICE_TYPES
from .request import ServiceInitRequest

MAX_NAME_LENGTH = 255

_NAME_FORMAT = re.compile(r"^[a-z][a-z0-9\-]+$")

ERR_VALUE_BAD_FORMAT = "value must start with a letter and contain only lower-case letters, numbers, and hyphens"
ERR_VALUE_TOO_LONG = f"value must not exceed {MAX_NAME_LENGTH} characters"


def validate_service_type(service_type: str) -> None:
    if service_type not in SERVICE_TYPES:
        raise InvalidServiceType(service_type, SERVICE_TYPES)


def _validate_name(name: str, kind: str) -> None:
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidName(name, ERR_VALUE_TOO_LONG, kind)
    if not _NAME_FORMAT.match(name):
        raise InvalidName(name, ERR_VALUE_BAD_FORMAT, kind)


def validate_service_name(name: str) -> None:
    _validate_name(name, "service")


def validate_app_name(name: str) -> None:
    _validate_name(name, "application")


def validate(req: ServiceInitRequest) -> None:
    """
    Reject invalid input before any prompt or write happens.

    Only the Dockerfile's directory is checked on disk. Safe to call
    repeatedly.

    Raises:
        InvalidInputError: The first check that fails
    """
    if req.service_type:
        validate_service_type(req.service_type)
    if req.name:
        validate_service_name(req.name)
    if req.image and req.dockerfile_path:
        raise ConflictingSource()
    if req.dockerfile_path:
        directory = os.path.dirname(req.dockerfile_path) or "."
        if not os.path.isdir(directory):
            raise BuildFileNotFound(os.path.normpath(req.dockerfile_path))
    if not req.app_name:
        raise NoApplicationContext()
