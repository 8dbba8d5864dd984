"""Formatting for user facing status lines."""

import click

SUCCESS_MARK = "✔"
ERROR_MARK = "✘"


def success_msg(message: str) -> str:
    return click.style(SUCCESS_MARK, fg="green") + " " + message


def error_msg(message: str) -> str:
    return click.style(ERROR_MARK, fg="red") + " " + message
