from dataclasses import dataclass
from typing import Optional

from ..dockerfile import HealthCheck


@dataclass
class ServiceInitRequest:
    """
    Everything known about the service being initialized.

    Empty strings and a port of 0 mean "not provided"; the Ask phase fills
    them in.
    """
    app_name: str = ""
    service_type: str = ""
    name: str = ""
    dockerfile_path: str = ""
    image: str = ""
    port: int = 0

    # Resolved from the Dockerfile during the Ask phase.
    health_check: Optional[HealthCheck] = None
