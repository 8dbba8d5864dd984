"""
Error types raised by the skiff workflows.
"""

from typing import Iterable, Optional


class SkiffError(Exception):
    """Base class for all skiff errors."""


class InvalidInputError(SkiffError):
    """Input rejected locally before any prompt, network or disk write."""


class InvalidServiceType(InvalidInputError):
    def __init__(self, service_type: str, valid: Iterable[str]):
        self.service_type = service_type
        self.valid = list(valid)
        choices = ", ".join(f'"{v}"' for v in self.valid)
        super().__init__(f"invalid service type {service_type}: must be one of {choices}")


class InvalidName(InvalidInputError):
    def __init__(self, name: str, reason: str, kind: str = "service"):
        self.name = name
        self.reason = reason
        super().__init__(f"{kind} name {name} is invalid: {reason}")


class ConflictingSource(InvalidInputError):
    def __init__(self):
        super().__init__("--dockerfile and --image cannot be specified together")


class BuildFileNotFound(InvalidInputError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"open {path}: file does not exist")


class NoApplicationContext(InvalidInputError):
    def __init__(self):
        super().__init__(
            "could not find an application attached to this workspace, please run `app init` first"
        )


class WrappedError(SkiffError):
    """
    An error raised by a collaborator, prefixed with the step that failed.

    The original exception is kept as ``cause`` and should also be chained
    with ``raise ... from err`` by the caller.
    """

    prefix = "error"

    def __init__(self, cause: Optional[BaseException] = None, prefix: Optional[str] = None):
        self.cause = cause
        if prefix is not None:
            self.prefix = prefix
        message = self.prefix if cause is None else f"{self.prefix}: {cause}"
        super().__init__(message)


class InteractionError(WrappedError):
    """A prompt or selection failed."""


class SelectServiceTypeFailed(InteractionError):
    prefix = "select service type"


class GetServiceNameFailed(InteractionError):
    prefix = "get service name"


class SelectBuildFileFailed(InteractionError):
    prefix = "select Dockerfile"


class ResolutionError(WrappedError):
    """A value supplied interactively could not be resolved."""


class GetImageLocationFailed(ResolutionError):
    prefix = "get image location"


class GetPortFailed(ResolutionError):
    prefix = "get port"


class PersistenceError(WrappedError):
    """Reading from or writing to the store failed."""


class ListServicesFailed(PersistenceError):
    def __init__(self, app_name: str, cause: Optional[BaseException] = None):
        super().__init__(cause, prefix=f"list services for application {app_name}")


class GetApplicationFailed(PersistenceError):
    def __init__(self, app_name: str, cause: Optional[BaseException] = None):
        super().__init__(cause, prefix=f"get application {app_name}")


class SaveServiceFailed(PersistenceError):
    def __init__(self, service_name: str, cause: Optional[BaseException] = None):
        super().__init__(cause, prefix=f"saving service {service_name}")


class LinkageError(WrappedError):
    """Linking a service to its application failed."""


class AddServiceToAppFailed(LinkageError):
    def __init__(self, service_name: str, app_name: str, cause: Optional[BaseException] = None):
        super().__init__(cause, prefix=f"add service {service_name} to application {app_name}")
