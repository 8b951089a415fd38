"""Request locale resolution"""

from typing import Optional

from .config import settings
from .context import current_locale


def _supported(tag: str) -> Optional[str]:
    tag = tag.strip().lower().replace("_", "-")
    if not tag:
        return None
    if tag in settings.SUPPORTED_LOCALES:
        return tag
    primary = tag.split("-", 1)[0]
    return primary if primary in settings.SUPPORTED_LOCALES else None


def parse_accept_language(header: Optional[str]) -> Optional[str]:
    """First supported tag, honouring q-values"""
    if not header:
        return None
    candidates = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.partition(";")
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        candidates.append((-quality, position, tag))
    for _, _, tag in sorted(candidates):
        locale = _supported(tag)
        if locale:
            return locale
    return None


def resolve_locale(query_locale: Optional[str] = None, accept_language: Optional[str] = None) -> str:
    if query_locale:
        locale = _supported(query_locale)
        if locale:
            return locale
    return parse_accept_language(accept_language) or settings.FALLBACK_LOCALE


def active_locale() -> str:
    return current_locale() or settings.FALLBACK_LOCALE
