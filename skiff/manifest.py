"""
Typed service manifests and their YAML rendering.
"""

from __future__ import annotations

import os
from datetime import timedelta
from enum import Enum
from typing import List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_serializer, model_validator


class ServiceType(str, Enum):
    LOAD_BALANCED_WEB_SERVICE = "Load Balanced Web Service"
    BACKEND_SERVICE = "Backend Service"


# Ordered as presented to users.
SERVICE_TYPES: List[str] = [t.value for t in ServiceType]

DEFAULT_CPU = 256
DEFAULT_MEMORY = 512
DEFAULT_COUNT = 1


def format_duration(value: timedelta) -> str:
    """Render a duration the way manifests spell them, e.g. ``1m30s``."""
    total_ms = round(value.total_seconds() * 1000)
    if total_ms == 0:
        return "0s"
    total, millis = divmod(total_ms, 1000)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if seconds:
        out += f"{seconds}s"
    if millis:
        out += f"{millis}ms"
    return out


class BuildArgs(BaseModel):
    dockerfile: Optional[str] = None
    context: Optional[str] = None


class ContainerHealthCheck(BaseModel):
    command: List[str]
    interval: Optional[timedelta] = None
    retries: Optional[int] = None
    timeout: Optional[timedelta] = None
    start_period: Optional[timedelta] = None

    @field_serializer("interval", "timeout", "start_period")
    def _serialize_duration(self, value: Optional[timedelta]) -> Optional[str]:
        if value is None:
            return None
        return format_duration(value)


class ImageConfig(BaseModel):
    build: Optional[BuildArgs] = None
    location: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    healthcheck: Optional[ContainerHealthCheck] = None

    @model_validator(mode="after")
    def _one_source(self) -> "ImageConfig":
        if self.build is not None and self.location:
            raise ValueError("image build and location are mutually exclusive")
        return self


class HTTPConfig(BaseModel):
    path: str = Field(min_length=1)


class LoadBalancedWebService(BaseModel):
    name: str
    type: Literal[ServiceType.LOAD_BALANCED_WEB_SERVICE] = ServiceType.LOAD_BALANCED_WEB_SERVICE
    http: HTTPConfig
    image: ImageConfig
    cpu: int = DEFAULT_CPU
    memory: int = DEFAULT_MEMORY
    count: int = DEFAULT_COUNT


class BackendService(BaseModel):
    name: str
    type: Literal[ServiceType.BACKEND_SERVICE] = ServiceType.BACKEND_SERVICE
    image: ImageConfig
    cpu: int = DEFAULT_CPU
    memory: int = DEFAULT_MEMORY
    count: int = DEFAULT_COUNT


Manifest = Union[LoadBalancedWebService, BackendService]


def image_config(dockerfile: Optional[str] = None, image: Optional[str] = None,
                 port: Optional[int] = None,
                 healthcheck: Optional[ContainerHealthCheck] = None) -> ImageConfig:
    """
    Build the image section of a manifest.

    A Dockerfile becomes a build block whose context is the Dockerfile's
    directory; an image becomes a plain location reference.
    """
    build = None
    if dockerfile:
        context = os.path.dirname(dockerfile) or "."
        build = BuildArgs(dockerfile=dockerfile, context=context)
    return ImageConfig(
        build=build,
        location=image or None,
        port=port or None,
        healthcheck=healthcheck,
    )


def to_yaml(manifest: Manifest) -> str:
    """Render a manifest as YAML, omitting unset fields."""
    data = manifest.model_dump(mode="json", exclude_none=True)
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
