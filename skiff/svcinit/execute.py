"""
The Execute phase of ``svc init``: write the manifest and register the service.
"""

import logging

from ..errors import AddServiceToAppFailed, GetApplicationFailed, SaveServiceFailed
from ..store import Workload
from ..term.log import error_msg, success_msg
from .deps import ServiceInitDeps
from .manifest_builder import build_manifest
from .request import ServiceInitRequest

logger = logging.getLogger(__name__)

FMT_ADD_SVC_TO_APP_START = "Creating ECR repositories for service {}."
FMT_ADD_SVC_TO_APP_FAILED = "Failed to create ECR repositories for service {}.\n"
FMT_ADD_SVC_TO_APP_COMPLETE = "Created ECR repositories for service {}.\n"


def execute(req: ServiceInitRequest, deps: ServiceInitDeps) -> str:
    """
    Write the service's manifest, record it in the store and link it to
    its application.

    Steps run in order and stop at the first failure. Nothing is undone:
    a manifest written before a failed store write stays on disk, and
    running the command again overwrites it.

    Returns:
        str: Path of the written manifest
    """
    manifest = build_manifest(req, deps.store)

    root = deps.manifest_writer.root_path()
    path = deps.manifest_writer.write_service_manifest(manifest, req.name)
    logger.info(f"Wrote the manifest for service {req.name} at {path} (workspace {root})")

    try:
        app = deps.store.get_application(req.app_name)
    except Exception as e:
        raise GetApplicationFailed(req.app_name, e) from e

    try:
        deps.store.create_service(Workload(name=req.name, app=req.app_name, type=req.service_type))
    except Exception as e:
        raise SaveServiceFailed(req.name, e) from e

    deps.progress.start(FMT_ADD_SVC_TO_APP_START.format(req.name))
    try:
        deps.deployer.add_service_to_app(app, req.name)
    except Exception as e:
        deps.progress.stop(error_msg(FMT_ADD_SVC_TO_APP_FAILED.format(req.name)))
        raise AddServiceToAppFailed(req.name, req.app_name, e) from e
    deps.progress.stop(success_msg(FMT_ADD_SVC_TO_APP_COMPLETE.format(req.name)))
    return path
