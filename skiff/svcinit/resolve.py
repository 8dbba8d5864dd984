"""
Resolvers for the values ``svc init`` asks about: image source, port and
health check.
"""

import logging
from typing import Optional

from ..dockerfile import HealthCheck
from ..errors import GetImageLocationFailed, GetPortFailed, SelectBuildFileFailed
from ..interfaces import USE_EXISTING_IMAGE, DockerfileParserBase, DockerfileSelectorBase, PrompterBase
from ..manifest import ServiceType
from .request import ServiceInitRequest

logger = logging.getLogger(__name__)

FMT_DOCKERFILE_PROMPT = "Which Dockerfile would you like to use for {}?"
FMT_DOCKERFILE_PATH_PROMPT = "What is the path to the Dockerfile for {}?"
DOCKERFILE_HELP_PROMPT = "Dockerfile to use for building your container image."
DOCKERFILE_PATH_HELP_PROMPT = "Path to Dockerfile to use for building your container image."

IMAGE_PROMPT = "What's the location of the image to use?"
IMAGE_PROMPT_HELP = (
    "The name of an existing Docker image. Images in the Docker Hub registry are available by default.\n"
    "Other repositories are specified with either repository-url/image:tag or repository-url/image@digest"
)

FMT_PORT_PROMPT = "Which {} do you want customer traffic sent to?"
PORT_PROMPT_HELP = (
    "The port will be used by the load balancer to route incoming traffic to this service.\n"
    "You should set this to the port which your Dockerfile uses to communicate with the internet."
)
DEFAULT_PORT = "80"

# Service types that cannot be created without a port.
PORT_REQUIRED = {ServiceType.LOAD_BALANCED_WEB_SERVICE.value}


def parse_port(value: str) -> int:
    """
    Parse a port number.

    Raises:
        ValueError: If the value is not an integer in [1, 65535]
    """
    value = value.strip()
    if not value.isdigit():
        raise ValueError(f"port {value!r} must be a number")
    port = int(value)
    if not 1 <= port <= 65535:
        raise ValueError(f"port {port} is out of range [1, 65535]")
    return port


def resolve_image_source(req: ServiceInitRequest, prompter: PrompterBase,
                         selector: DockerfileSelectorBase, search_root: str = ".") -> None:
    """
    Decide between building from a Dockerfile and using an existing image.

    Sets ``req.dockerfile_path`` or ``req.image``.
    """
    try:
        choice = selector.dockerfile(
            FMT_DOCKERFILE_PROMPT.format(req.name),
            FMT_DOCKERFILE_PATH_PROMPT.format(req.name),
            DOCKERFILE_HELP_PROMPT,
            DOCKERFILE_PATH_HELP_PROMPT,
            search_root,
        )
    except Exception as e:
        raise SelectBuildFileFailed(e) from e

    if choice != USE_EXISTING_IMAGE:
        req.dockerfile_path = choice
        return

    try:
        image = prompter.get(IMAGE_PROMPT, IMAGE_PROMPT_HELP, None)
    except Exception as e:
        raise GetImageLocationFailed(e) from e
    if not image or not image.strip():
        raise GetImageLocationFailed(ValueError("image location cannot be empty"))
    req.image = image.strip()


def _single_exposed_port(parser: DockerfileParserBase, path: str) -> Optional[int]:
    """Return the Dockerfile's port if it exposes exactly one."""
    try:
        ports = parser.exposed_ports()
    except Exception as e:
        logger.info(f"Couldn't read exposed ports from {path}: {e}")
        return None
    if len(ports) == 1:
        return ports[0]
    logger.info(f"Dockerfile {path} exposes {len(ports)} ports, not choosing one")
    return None


def resolve_port(req: ServiceInitRequest, prompter: PrompterBase,
                 parser: Optional[DockerfileParserBase]) -> None:
    """
    Set ``req.port``.

    An explicit port wins. Otherwise a Dockerfile exposing exactly one port
    is used without asking. Otherwise the user is prompted, unless the
    service type can do without a port.
    """
    if req.port:
        return

    if req.dockerfile_path and parser is not None:
        port = _single_exposed_port(parser, req.dockerfile_path)
        if port:
            logger.info(f"Using port {port} exposed by {req.dockerfile_path}")
            req.port = port
            return

    if req.service_type not in PORT_REQUIRED:
        return

    try:
        answer = prompter.get(
            FMT_PORT_PROMPT.format("port"),
            PORT_PROMPT_HELP,
            DEFAULT_PORT,
            parse_port,
        )
        req.port = parse_port(answer)
    except Exception as e:
        raise GetPortFailed(e) from e


def resolve_health_check(req: ServiceInitRequest,
                         parser: Optional[DockerfileParserBase]) -> Optional[HealthCheck]:
    """
    Read the HEALTHCHECK of the resolved Dockerfile into ``req.health_check``.

    A missing or unreadable health check leaves the field unset.
    """
    if not req.dockerfile_path or parser is None:
        return None
    try:
        hc = parser.health_check()
    except Exception as e:
        logger.info(f"Couldn't read the health check from {req.dockerfile_path}: {e}")
        hc = None
    if hc is None:
        logger.info(f"No HEALTHCHECK found in {req.dockerfile_path}")
    req.health_check = hc
    return hc
