from __future__ import annotations
from dataclasses import dataclass, field
from re import compile as re_compile, Pattern

WILDCARD = '*'
QUALITY_PARAMETER = 'q'

TOKEN_PATTERN: Pattern = re_compile(pattern=r"[!#$%&'*+\-.0-9A-Z^_`a-z|~]+")


@dataclass
class MediaType:
    type: str
    subtype: str
    parameters: dict[str, str | float] = field(default_factory=dict)

    @property
    def full_type(self) -> str:
        return f'{self.type}/{self.subtype}'

    @property
    def quality(self) -> float | None:
        """
        The normalized quality value of the media range.

        :return: The quality value, or `None` if the record has not been normalized as a media range.
        """

        quality = self.parameters.get(QUALITY_PARAMETER)
        if isinstance(quality, bool) or not isinstance(quality, int | float):
            return None

        return float(quality)

    @property
    def is_wildcard(self) -> bool:
        return self.type == WILDCARD or self.subtype == WILDCARD

    def __str__(self) -> str:
        parts: list[str] = [self.full_type]

        for name, value in self.parameters.items():
            value = format(value, 'g') if isinstance(value, float) else value
            if not TOKEN_PATTERN.fullmatch(string=value):
                value = f'"{value}"'
            parts.append(f'{name}={value}')

        return ';'.join(parts)
