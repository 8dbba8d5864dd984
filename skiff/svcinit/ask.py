"""
The Ask phase of ``svc init``: prompt for everything the flags left out.
"""

import logging

from ..errors import GetServiceNameFailed, SelectServiceTypeFailed
from ..manifest import SERVICE_TYPES
from .deps import ServiceInitDeps
from .request import ServiceInitRequest
from .resolve import resolve_health_check, resolve_image_source, resolve_port
from .validate import validate_service_name

logger = logging.getLogger(__name__)

FMT_SVC_TYPE_PROMPT = "Which {} best represents your service's architecture?"
SVC_TYPE_HELP_PROMPT = (
    "A Load Balanced Web Service is an internet-facing service that's behind a load balancer.\n"
    "A Backend Service is a private service that can only be reached by other services in the application."
)
FMT_NAME_PROMPT = "What do you want to name this {}?"
FMT_NAME_HELP_PROMPT = "The name will uniquely identify this {} within your app {}."


def ask_service_type(req: ServiceInitRequest, deps: ServiceInitDeps) -> None:
    if req.service_type:
        return
    try:
        req.service_type = deps.prompter.select_one(
            FMT_SVC_TYPE_PROMPT.format("service type"),
            SVC_TYPE_HELP_PROMPT,
            SERVICE_TYPES,
        )
    except Exception as e:
        raise SelectServiceTypeFailed(e) from e


def ask_service_name(req: ServiceInitRequest, deps: ServiceInitDeps) -> None:
    if req.name:
        return
    try:
        req.name = deps.prompter.get(
            FMT_NAME_PROMPT.format(req.service_type),
            FMT_NAME_HELP_PROMPT.format(req.service_type, req.app_name),
            None,
            validate_service_name,
        )
    except Exception as e:
        raise GetServiceNameFailed(e) from e


def ask(req: ServiceInitRequest, deps: ServiceInitDeps) -> None:
    """
    Fill in the service type, name, image source, port and health check.

    Steps already answered by flags are skipped. The first failing step
    aborts the phase.
    """
    ask_service_type(req, deps)
    ask_service_name(req, deps)

    if not req.image and not req.dockerfile_path:
        resolve_image_source(req, deps.prompter, deps.selector, deps.search_root)

    parser = None
    if req.dockerfile_path and deps.new_parser is not None:
        parser = deps.new_parser(req.dockerfile_path)

    resolve_port(req, deps.prompter, parser)
    resolve_health_check(req, parser)
    logger.debug(f"Resolved service init request: {req}")
