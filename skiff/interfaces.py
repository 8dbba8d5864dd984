"""
Collaborators the service workflows depend on.

Concrete implementations live in ``skiff.term``, ``skiff.store``,
``skiff.workspace``, ``skiff.deploy`` and ``skiff.dockerfile``; tests
substitute fakes.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional


class PrompterBase(ABC):
    @abstractmethod
    def select_one(self, message: str, help: str, options: List[str]) -> str:
        pass

    @abstractmethod
    def get(self, message: str, help: str, default: Optional[str] = None,
            validator: Optional[Callable[[str], None]] = None) -> str:
        pass


# Returned by a Dockerfile selector when the user wants a pre-built image.
USE_EXISTING_IMAGE = "Use an existing image instead"


class DockerfileSelectorBase(ABC):
    @abstractmethod
    def dockerfile(self, message: str, path_message: str, help: str, path_help: str,
                   search_root: str) -> str:
        """Return a Dockerfile path, or the "use an existing image" option."""


class DockerfileParserBase(ABC):
    @abstractmethod
    def exposed_ports(self) -> List[int]:
        pass

    @abstractmethod
    def health_check(self):
        """Return the declared health check, or None."""


class StoreBase(ABC):
    @abstractmethod
    def list_services(self, app_name: str) -> list:
        pass

    @abstractmethod
    def create_service(self, svc) -> None:
        pass

    @abstractmethod
    def get_application(self, name: str):
        pass


class AppDeployerBase(ABC):
    @abstractmethod
    def add_service_to_app(self, app, service_name: str) -> None:
        pass


class ManifestWriterBase(ABC):
    @abstractmethod
    def root_path(self) -> str:
        pass

    @abstractmethod
    def write_service_manifest(self, manifest, name: str) -> str:
        """Write the manifest and return the path it was written to."""


class ProgressBase(ABC):
    @abstractmethod
    def start(self, label: str) -> None:
        pass

    @abstractmethod
    def stop(self, label: str) -> None:
        pass
