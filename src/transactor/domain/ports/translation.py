"""Translation port used to render human-readable transaction texts."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Translator(Protocol):
    """Render ``message`` for ``locale`` interpolating ``{placeholder}`` arguments."""

    def __call__(self, message: str, /, *, locale: str | None = None, **args: object) -> str: ...


class FormatTranslator:
    """Translator that keeps the source language and only interpolates arguments."""

    def __call__(self, message: str, /, *, locale: str | None = None, **args: object) -> str:
        _ = locale
        return message.format(**args) if args else message
