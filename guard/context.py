"""
Ambient coercion default for the module-level helpers.

``guard.parse``, ``guard.safe_parse`` and ``guard.validate`` take a
``coerce`` argument. When it is left as None they fall back to the flag set
by the innermost ``validation_context()``, which is off outside any context.
The flag lives in a ContextVar, so threads and asyncio tasks each see their
own setting.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_coerce_default: ContextVar[bool] = ContextVar("guard_coerce_default", default=False)


def is_coercing() -> bool:
    return _coerce_default.get()


@contextmanager
def validation_context(*, coerce: bool = False) -> Iterator[None]:
    """
    Set the coercion default for the duration of a ``with`` block.

    Useful at boundaries where every input is text, such as environment
    variables or query strings:

        Settings = Object({"port": Int(), "debug": Boolean()})

        with validation_context(coerce=True):
            settings = parse(Settings, dict(os.environ))

    Nested contexts restore the outer setting on exit, including when the
    block raises. Schema methods (``parse``, ``coerce``, ...) always keep
    their own fixed behavior.
    """
    token = _coerce_default.set(coerce)
    try:
        yield
    finally:
        _coerce_default.reset(token)
