"""
Application deployer: provisions the per-service resources an application needs.
"""

import logging
import os
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import SkiffError
from .interfaces import AppDeployerBase
from .store import Application

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-west-2"


class DeployError(SkiffError):
    """A remote call made while deploying failed."""


def repository_name(app_name: str, service_name: str) -> str:
    """Name of the image repository holding a service's images."""
    return f"{app_name}/{service_name}"


def resource_tags(app_name: str, service_name: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """
    Tags applied to every resource created for a service.

    Args:
        app_name: Application name
        service_name: Service name
        extra: Additional tags, e.g. the application's own tags

    Returns:
        Dictionary of tags
    """
    tags = dict(extra or {})
    tags.update({
        "skiff-application": app_name,
        "skiff-service": service_name,
    })
    return tags


class AppDeployer(AppDeployerBase):
    """Creates a service's ECR repository in the application's region."""

    def __init__(self, session: Optional[boto3.session.Session] = None):
        self.session = session or boto3.session.Session()

    def _ecr(self, app: Application):
        return self.session.client("ecr", region_name=app.region or DEFAULT_REGION)

    def add_service_to_app(self, app: Application, service_name: str) -> None:
        """
        Link a service to an application by creating its image repository.

        A repository that already exists is reused.

        Raises:
            DeployError: If the repository could not be created
        """
        name = repository_name(app.name, service_name)
        tags = resource_tags(app.name, service_name, app.tags)
        try:
            ecr = self._ecr(app)
            ecr.create_repository(
                repositoryName=name,
                imageScanningConfiguration={"scanOnPush": True},
                tags=[{"Key": k, "Value": v} for k, v in tags.items()],
            )
            logger.info(f"Created ECR repository {name}")
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "RepositoryAlreadyExistsException":
                logger.info(f"ECR repository {name} already exists")
                return
            raise DeployError(f"create ECR repository {name}: {e}") from e
        except BotoCoreError as e:
            raise DeployError(f"create ECR repository {name}: {e}") from e


def get_region() -> str:
    """Region for new applications: SKIFF_REGION, then AWS_DEFAULT_REGION."""
    return os.environ.get("SKIFF_REGION") or os.environ.get("AWS_DEFAULT_REGION") or DEFAULT_REGION


def caller_account_id(session: Optional[boto3.session.Session] = None) -> str:
    """
    Return the AWS account of the current credentials, or '' if they can't be read.
    """
    session = session or boto3.session.Session()
    try:
        return session.client("sts").get_caller_identity()["Account"]
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Couldn't determine the AWS account ID: {e}")
        return ""
