"""
Build the manifest for a fully resolved ``svc init`` request.
"""

import logging
from typing import Optional

from ..dockerfile import HealthCheck
from ..errors import ListServicesFailed
from ..interfaces import StoreBase
from ..manifest import (
    BackendService,
    ContainerHealthCheck,
    HTTPConfig,
    LoadBalancedWebService,
    Manifest,
    ServiceType,
    image_config,
)
from .request import ServiceInitRequest

logger = logging.getLogger(__name__)

ROOT_PATH = "/"


def container_health_check(hc: Optional[HealthCheck]) -> Optional[ContainerHealthCheck]:
    """Convert a Dockerfile HEALTHCHECK into the manifest's healthcheck section."""
    if hc is None:
        return None
    return ContainerHealthCheck(
        command=list(hc.cmd),
        interval=hc.interval,
        retries=hc.retries,
        timeout=hc.timeout,
        start_period=hc.start_period,
    )


def routing_path(app_name: str, name: str, store: StoreBase) -> str:
    """
    Pick the HTTP path a new Load Balanced Web Service listens on.

    The first Load Balanced Web Service of an application gets "/"; any
    later one gets its own name.
    """
    try:
        services = store.list_services(app_name)
    except Exception as e:
        raise ListServicesFailed(app_name, e) from e
    for svc in services:
        if svc.type == ServiceType.LOAD_BALANCED_WEB_SERVICE.value and svc.name != name:
            logger.debug(f"Service {svc.name} already serves {ROOT_PATH} for {app_name}")
            return name
    return ROOT_PATH


def new_load_balanced_web_service_manifest(req: ServiceInitRequest, store: StoreBase) -> LoadBalancedWebService:
    return LoadBalancedWebService(
        name=req.name,
        http=HTTPConfig(path=routing_path(req.app_name, req.name, store)),
        image=image_config(
            dockerfile=req.dockerfile_path,
            image=req.image,
            port=req.port,
            healthcheck=container_health_check(req.health_check),
        ),
    )


def new_backend_service_manifest(req: ServiceInitRequest) -> BackendService:
    return BackendService(
        name=req.name,
        image=image_config(
            dockerfile=req.dockerfile_path,
            image=req.image,
            port=req.port,
            healthcheck=container_health_check(req.health_check),
        ),
    )


def build_manifest(req: ServiceInitRequest, store: StoreBase) -> Manifest:
    """
    Build the manifest variant matching ``req.service_type``.

    Only Load Balanced Web Services query the store. Nothing is written.
    """
    if req.service_type == ServiceType.LOAD_BALANCED_WEB_SERVICE.value:
        return new_load_balanced_web_service_manifest(req, store)
    if req.service_type == ServiceType.BACKEND_SERVICE.value:
        return new_backend_service_manifest(req)
    raise ValueError(f"unknown service type {req.service_type}")
