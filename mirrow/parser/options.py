"""Parser modes and configuration options."""

from dataclasses import dataclass, replace
from enum import Enum


class ParseMode(str, Enum):
    """Top-level parser behavior profile."""

    STRICT = "strict"
    RECOVER = "recover"


@dataclass(frozen=True)
class ParserOptions:
    """Flags controlling error recovery and parser limits."""

    recover: bool = False
    max_arguments: int = 255
    filename: str = "<string>"

    @property
    def mode(self) -> ParseMode:
        return ParseMode.RECOVER if self.recover else ParseMode.STRICT

    @staticmethod
    def for_mode(mode: ParseMode, **overrides) -> "ParserOptions":
        if mode == ParseMode.RECOVER:
            return replace(ParserOptions(recover=True), **overrides)

        return replace(ParserOptions(recover=False), **overrides)
