"""
Dockerfile selection.
"""

import logging
import os
from typing import List

from ..errors import SkiffError
from ..workspace import find_dockerfiles
from ..interfaces import USE_EXISTING_IMAGE, DockerfileSelectorBase, PrompterBase

logger = logging.getLogger(__name__)

DOCKERFILE_CUSTOM_PATH_OPTION = "Enter custom path for your Dockerfile"
USE_EXISTING_IMAGE_OPTION = USE_EXISTING_IMAGE


class DockerfileSelector(DockerfileSelectorBase):
    """
    Lets the user pick one of the project's Dockerfiles, type a path to
    another one, or opt for an existing image.

    ``dockerfile`` returns either a Dockerfile path or
    ``USE_EXISTING_IMAGE_OPTION``.
    """

    def __init__(self, prompter: PrompterBase):
        self.prompter = prompter

    def dockerfile(self, message: str, path_message: str, help: str, path_help: str,
                   search_root: str) -> str:
        found = find_dockerfiles(search_root)
        logger.debug(f"Found Dockerfiles under {search_root}: {found}")
        options: List[str] = found + [DOCKERFILE_CUSTOM_PATH_OPTION, USE_EXISTING_IMAGE_OPTION]

        choice = self.prompter.select_one(message, help, options)
        if choice != DOCKERFILE_CUSTOM_PATH_OPTION:
            return choice

        def exists(path: str) -> None:
            full = path if os.path.isabs(path) else os.path.join(search_root, path)
            if not os.path.isfile(full):
                raise SkiffError(f"open {path}: file does not exist")

        return self.prompter.get(path_message, path_help, validator=exists)
