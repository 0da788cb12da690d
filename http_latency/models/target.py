"""Normalized request target."""

from dataclasses import dataclass, field
from typing import Literal

Scheme = Literal["http", "https"]

DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}


@dataclass(frozen=True, kw_only=True)
class Target:
    """A fully specified HTTP endpoint derived from one raw input string.

    ``raw`` keeps the user's original text for reporting and does not take part
    in equality, so normalizing ``str(target)`` yields an equal target.
    """

    scheme: Scheme
    host: str
    port: int
    path: str = "/"
    query: str = ""
    raw: str = field(default="", compare=False)

    @property
    def url(self) -> str:
        """Canonical URL used for the request.

        The port is elided when it is the scheme's conventional one.
        """
        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = host if DEFAULT_PORTS[self.scheme] == self.port else f"{host}:{self.port}"
        query = f"?{self.query}" if self.query else ""
        return f"{self.scheme}://{netloc}{self.path}{query}"

    def __str__(self) -> str:
        return self.url
