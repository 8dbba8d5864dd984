"""
Terminal interaction: prompts, selectors and progress output.
"""

from .log import success_msg, error_msg
from .prompt import Prompter, PromptError
from .selector import DockerfileSelector, DOCKERFILE_CUSTOM_PATH_OPTION, USE_EXISTING_IMAGE_OPTION
from .progress import Progress

__all__ = [
    "success_msg",
    "error_msg",
    "Prompter",
    "PromptError",
    "DockerfileSelector",
    "DOCKERFILE_CUSTOM_PATH_OPTION",
    "USE_EXISTING_IMAGE_OPTION",
    "Progress",
]
