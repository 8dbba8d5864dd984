"""Main CLI entrypoint for Skiff."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..deploy import AppDeployer, caller_account_id, get_region
from ..dockerfile import DockerfileParser
from ..errors import SkiffError
from ..manifest import SERVICE_TYPES
from ..store import Application, LocalStore
from ..svcinit import ServiceInitDeps, ServiceInitRequest, ask, execute, validate
from ..svcinit.validate import validate_app_name
from ..term import DockerfileSelector, Progress, Prompter, error_msg, success_msg
from ..workspace import Workspace, WorkspaceNotFound

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Show debug logs')
@click.pass_context
def main(ctx, verbose):
    """Skiff - Deploy containerized services to AWS."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    click.echo(error_msg(message), err=True)
    sys.exit(1)


def _find_workspace() -> Optional[Workspace]:
    try:
        return Workspace.find()
    except WorkspaceNotFound as e:
        logger.debug(str(e))
        return None


@main.group()
def app():
    """Commands for applications."""


@app.command('init')
@click.argument('name')
def app_init(name):
    """Create an application and attach the current directory to it."""
    try:
        validate_app_name(name)
        store = LocalStore()
        store.create_application(Application(
            name=name,
            account_id=caller_account_id(),
            region=get_region(),
        ))
        ws = _find_workspace()
        Workspace.create(ws.project_root if ws else Path.cwd(), name)
    except SkiffError as e:
        _fail(str(e))
    click.echo(success_msg(f"The directory is now part of application {name}."))


@main.group()
def svc():
    """Commands for services."""


@svc.command('init')
@click.option('--name', '-n', default='', help='Name of the service.')
@click.option('--svc-type', '-t', default='', help=f'Type of service to create. Must be one of: {", ".join(SERVICE_TYPES)}')
@click.option('--dockerfile', '-d', default='', help='Path to the Dockerfile. Mutually exclusive with --image.')
@click.option('--image', '-i', default='', help='The location of an existing Docker image. Mutually exclusive with --dockerfile.')
@click.option('--port', type=click.IntRange(0, 65535), default=0, help='The port on which your service listens.')
def svc_init(name, svc_type, dockerfile, image, port):
    """Create a new service in an application."""
    ws = _find_workspace()
    prompter = Prompter()
    deps = ServiceInitDeps(
        prompter=prompter,
        selector=DockerfileSelector(prompter),
        new_parser=DockerfileParser,
        store=LocalStore(),
        deployer=AppDeployer(),
        manifest_writer=ws,
        progress=Progress(),
        search_root='.',
    )
    try:
        req = ServiceInitRequest(
            app_name=ws.app_name() if ws else '',
            service_type=svc_type,
            name=name,
            dockerfile_path=dockerfile,
            image=image,
            port=port,
        )
        validate(req)
        ask(req, deps)
        if req.dockerfile_path:
            req.dockerfile_path = ws.relative_path(req.dockerfile_path)
        path = execute(req, deps)
    except (SkiffError, OSError) as e:
        _fail(str(e))

    click.echo(success_msg(f"Wrote the manifest for service {req.name} at {path}"))
    click.echo("Your manifest contains configurations like your container size and port.")
    click.echo(f"Recommended follow-up: edit {path} to fit your needs, then deploy the service.")


@svc.command('ls')
@click.option('--json', 'output_json', is_flag=True, help='Output machine-readable JSON')
def svc_ls(output_json):
    """List the services of the workspace's application."""
    ws = _find_workspace()
    try:
        app_name = ws.app_name() if ws else ''
        if not app_name:
            _fail("could not find an application attached to this workspace, please run `app init` first")
        services = LocalStore().list_services(app_name)
    except SkiffError as e:
        _fail(str(e))

    if output_json:
        click.echo(json.dumps({'services': [
            {'name': s.name, 'app': s.app, 'type': s.type} for s in services
        ]}))
        return
    for s in services:
        click.echo(f"{s.name}\t{s.type}")
