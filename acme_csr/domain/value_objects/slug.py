import re
import unicodedata
from dataclasses import dataclass

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")

RESERVED_SUBDOMAINS = frozenset({"www", "api", "admin", "app", "mail", "static"})


def slugify(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    normalized = re.sub(r"[^a-zA-Z0-9]+", "-", normalized).strip("-").lower()
    return re.sub(r"-{2,}", "-", normalized)


@dataclass(frozen=True)
class Slug:
    value: str

    def __post_init__(self):
        if not self.value or not _SLUG_PATTERN.match(self.value):
            raise ValueError(f"Invalid slug: {self.value!r}")

    @classmethod
    def from_text(cls, text: str) -> "Slug":
        return cls(slugify(text))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Subdomain:
    value: str

    def __post_init__(self):
        value = (self.value or "").strip().lower()
        if not _SUBDOMAIN_PATTERN.match(value):
            raise ValueError(f"Invalid subdomain: {self.value!r}")
        if value in RESERVED_SUBDOMAINS:
            raise ValueError(f"Subdomain '{value}' is reserved")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value
