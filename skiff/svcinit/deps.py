from dataclasses import dataclass
from typing import Callable, Optional

from ..interfaces import (
    AppDeployerBase,
    DockerfileParserBase,
    DockerfileSelectorBase,
    ManifestWriterBase,
    ProgressBase,
    PrompterBase,
    StoreBase,
)


@dataclass
class ServiceInitDeps:
    """Collaborators used by ``ask`` and ``execute``."""
    prompter: Optional[PrompterBase] = None
    selector: Optional[DockerfileSelectorBase] = None
    new_parser: Optional[Callable[[str], DockerfileParserBase]] = None
    store: Optional[StoreBase] = None
    deployer: Optional[AppDeployerBase] = None
    manifest_writer: Optional[ManifestWriterBase] = None
    progress: Optional[ProgressBase] = None

    # Where the Dockerfile selector looks for Dockerfiles.
    search_root: str = "."
