"""
Interactive prompts backed by click.
"""

from typing import Callable, List, Optional

import click

from ..errors import SkiffError
from ..interfaces import PrompterBase

Validator = Callable[[str], None]


class PromptError(SkiffError):
    """The user aborted a prompt or no answer could be read."""


class Prompter(PrompterBase):
    """
    Asks the user questions on the terminal.

    ``select_one`` shows a numbered list; ``get`` reads free text and keeps
    asking until the optional validator accepts the answer.
    """

    def select_one(self, message: str, help: str, options: List[str]) -> str:
        if not options:
            raise PromptError("no options to select from")
        click.echo(message)
        if help:
            click.echo(click.style(help, dim=True))
        for idx, option in enumerate(options, 1):
            click.echo(f"  [{idx}] {option}")
        try:
            choice = click.prompt("Choice", type=click.IntRange(1, len(options)), default=1)
        except click.Abort as e:
            raise PromptError("prompt aborted") from e
        return options[choice - 1]

    def get(self, message: str, help: str, default: Optional[str] = None,
            validator: Optional[Validator] = None) -> str:
        def value_proc(value: str) -> str:
            if validator is not None:
                try:
                    validator(value)
                except (ValueError, SkiffError) as e:
                    raise click.BadParameter(str(e))
            return value

        if help:
            click.echo(click.style(help, dim=True))
        try:
            return click.prompt(message, default=default, value_proc=value_proc)
        except click.Abort as e:
            raise PromptError("prompt aborted") from e
