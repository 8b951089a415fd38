"""Translatable text value object backing the JSON translatable columns"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

DEFAULT_FALLBACK_LOCALE = "en"


@dataclass(frozen=True)
class TranslatableText:
    translations: Dict[str, str] = field(default_factory=dict)
    fallback_locale: str = DEFAULT_FALLBACK_LOCALE

    def __post_init__(self):
        cleaned = {}
        for locale, text in (self.translations or {}).items():
            if not locale:
                raise ValueError("Locale cannot be empty")
            if text is None:
                continue
            cleaned[locale.lower()] = str(text)
        object.__setattr__(self, "translations", cleaned)

    @classmethod
    def of(cls, value: Union["TranslatableText", Mapping[str, str], str, None], locale: str = DEFAULT_FALLBACK_LOCALE) -> "TranslatableText":
        """Accept a plain string (stored under locale), a mapping or an instance"""
        if isinstance(value, TranslatableText):
            return value
        if value is None:
            return cls({})
        if isinstance(value, str):
            return cls({locale: value})
        return cls(dict(value))

    def get(self, locale: Optional[str] = None) -> str:
        if locale and locale.lower() in self.translations:
            return self.translations[locale.lower()]
        if self.fallback_locale in self.translations:
            return self.translations[self.fallback_locale]
        for text in self.translations.values():
            return text
        return ""

    def has(self, locale: str) -> bool:
        return locale.lower() in self.translations

    def with_translation(self, locale: str, text: str) -> "TranslatableText":
        updated = dict(self.translations)
        updated[locale.lower()] = text
        return TranslatableText(updated, self.fallback_locale)

    def merge(self, other: "TranslatableText") -> "TranslatableText":
        updated = dict(self.translations)
        updated.update(other.translations)
        return TranslatableText(updated, self.fallback_locale)

    def is_blank(self) -> bool:
        return not any(text.strip() for text in self.translations.values())

    def locales(self):
        return list(self.translations.keys())

    def to_dict(self) -> Dict[str, str]:
        return dict(self.translations)

    def __str__(self) -> str:
        return self.get()
