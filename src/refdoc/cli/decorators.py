from __future__ import annotations

import functools
from typing import TYPE_CHECKING, ParamSpec, TypeVar

import click

from refdoc import exceptions

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")


def handle_refdoc_error(e: exceptions.RefdocError) -> click.ClickException:
    """Convert RefdocError to user-friendly ClickException."""
    message = e.format_user_message()
    if suggestion := e.get_suggestion():
        message = f"{message}\n\nTip: {suggestion}"
    return click.ClickException(message)


def with_error_handling(func: Callable[P, R]) -> Callable[P, R]:
    """Wrap a command so refdoc errors become clean CLI failures.

    Apply below ``@click.command()`` so it wraps the undecorated callback.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except exceptions.RefdocError as e:
            raise handle_refdoc_error(e) from e
        except Exception as e:
            raise click.ClickException(repr(e)) from e

    return wrapper
