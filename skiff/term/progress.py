"""Progress reporting for long running steps."""

import logging

import click

from ..interfaces import ProgressBase

logger = logging.getLogger(__name__)


class Progress(ProgressBase):
    """Prints a start line and a final line for a step."""

    def __init__(self, err: bool = True):
        self.err = err
        self._active = None

    def start(self, label: str) -> None:
        self._active = label
        logger.debug(f"Started: {label}")
        click.echo(f"- {label}", err=self.err)

    def stop(self, label: str) -> None:
        logger.debug(f"Stopped: {self._active}")
        self._active = None
        click.echo(label, err=self.err, nl=not label.endswith("\n"))
