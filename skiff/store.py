"""
Local store for applications and the services registered with them.
"""

import json
import logging
import os
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List

from .errors import SkiffError
from .interfaces import StoreBase

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class StoreError(SkiffError):
    """Base class for store failures."""


class ApplicationNotFound(StoreError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"couldn't find an application named {name}")


class ServiceNotFound(StoreError):
    def __init__(self, app_name: str, name: str):
        self.app_name = app_name
        self.name = name
        super().__init__(f"couldn't find service {name} in the application {app_name}")


@dataclass
class Workload:
    """A service registered with an application."""
    name: str
    app: str
    type: str


@dataclass
class Application:
    """An application that services are deployed into."""
    name: str
    account_id: str = ""
    region: str = ""
    tags: Dict[str, str] = field(default_factory=dict)


def get_skiff_home() -> Path:
    """
    Get the directory the local store lives in.

    Returns:
        Path: Value of SKIFF_HOME, defaulting to ~/.skiff
    """
    home = os.environ.get("SKIFF_HOME", os.path.join("~", ".skiff"))
    return Path(home).expanduser().resolve()


def _check_name(name: str) -> str:
    if not _SAFE_NAME.match(name):
        raise StoreError(f"invalid name {name!r}")
    return name


class LocalStore(StoreBase):
    """
    File backed store.

    Layout::

        <root>/applications/<app>.json
        <root>/applications/<app>/services/<service>.json
    """

    def __init__(self, root: Path = None):
        self.root = Path(root) if root is not None else get_skiff_home()

    def _app_file(self, app_name: str) -> Path:
        return self.root / "applications" / f"{_check_name(app_name)}.json"

    def _services_dir(self, app_name: str) -> Path:
        return self.root / "applications" / _check_name(app_name) / "services"

    def create_application(self, app: Application) -> None:
        """Create an application, leaving an existing one untouched."""
        app_file = self._app_file(app.name)
        if app_file.exists():
            logger.info(f"Application {app.name} already exists")
            return
        app_file.parent.mkdir(parents=True, exist_ok=True)
        with open(app_file, "w") as f:
            json.dump(asdict(app), f, indent=2)

    def get_application(self, name: str) -> Application:
        """
        Get an application by name.

        Raises:
            ApplicationNotFound: If no such application exists
        """
        app_file = self._app_file(name)
        if not app_file.exists():
            raise ApplicationNotFound(name)
        try:
            with open(app_file) as f:
                return Application(**json.load(f))
        except (OSError, json.JSONDecodeError, TypeError) as e:
            raise StoreError(f"read application {name}: {e}") from e

    def create_service(self, svc: Workload) -> None:
        """
        Register a service with its application.

        Registering the same service twice is a no-op; registering a
        service under an existing name with a different type is an error.
        """
        self.get_application(svc.app)
        svc_file = self._services_dir(svc.app) / f"{_check_name(svc.name)}.json"
        if svc_file.exists():
            existing = self.get_service(svc.app, svc.name)
            if existing == svc:
                logger.info(f"Service {svc.name} already registered with {svc.app}")
                return
            raise StoreError(
                f"service {svc.name} already exists in application {svc.app} with type {existing.type}"
            )
        svc_file.parent.mkdir(parents=True, exist_ok=True)
        with open(svc_file, "w") as f:
            json.dump(asdict(svc), f, indent=2)
        logger.debug(f"Wrote {svc_file}")

    def get_service(self, app_name: str, name: str) -> Workload:
        svc_file = self._services_dir(app_name) / f"{_check_name(name)}.json"
        if not svc_file.exists():
            raise ServiceNotFound(app_name, name)
        with open(svc_file) as f:
            return Workload(**json.load(f))

    def list_services(self, app_name: str) -> List[Workload]:
        """List the services of an application, sorted by name."""
        self.get_application(app_name)
        services_dir = self._services_dir(app_name)
        if not services_dir.exists():
            return []
        return [self.get_service(app_name, p.stem) for p in sorted(services_dir.glob("*.json"))]
