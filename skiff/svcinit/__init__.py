"""
The ``svc init`` workflow: validate, ask, execute.
"""

from .request import ServiceInitRequest
from .deps import ServiceInitDeps
from .validate import validate
from .ask import ask
from .execute import execute
from .manifest_builder import build_manifest, routing_path

__all__ = [
    "ServiceInitRequest",
    "ServiceInitDeps",
    "validate",
    "ask",
    "execute",
    "build_manifest",
    "routing_path",
]
