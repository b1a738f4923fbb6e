from __future__ import annotations

import unicodedata
from functools import lru_cache
from typing import Callable, Optional, TypeVar

from pyuca import Collator as _UcaCollator

from ..core.constants import DEFAULT_COLLATION_LOCALE, SUPPORTED_COLLATION_LOCALES
from ..core.exceptions import ValidationError

T = TypeVar("T")


@lru_cache(maxsize=1)
def _uca() -> _UcaCollator:
    # Loading the DUCET table is slow; share one per process.
    return _UcaCollator()


def collation_language(locale: Optional[str]) -> str:
    """``ja_JP`` / ``ja-JP.UTF-8`` -> ``ja``."""
    text = (locale or "").strip().lower()
    return text.split(".")[0].replace("_", "-").split("-")[0]


class Collator:
    """Locale-parameterized string ordering.

    Uses the Unicode Collation Algorithm so ordering does not depend on the
    host's installed OS locales. Text is NFKC-normalized first so half-width
    katakana sorts with its full-width form.

    Only languages whose ordering the root DUCET table already gives are
    accepted (Japanese kana fall in gojuon order there). Locales that need a
    tailoring, such as Swedish placing Ä and Ö after Z, are rejected.
    """

    def __init__(self, locale: str = DEFAULT_COLLATION_LOCALE):
        language = collation_language(locale)
        if language not in SUPPORTED_COLLATION_LOCALES:
            raise ValidationError(f"unsupported collation locale: {locale}")
        self.locale = language

    def sort_key(self, text: Optional[str]) -> tuple:
        normalized = unicodedata.normalize("NFKC", text or "")
        return (_uca().sort_key(normalized), normalized)

    def sorted(self, items: list[T], key: Callable[[T], Optional[str]], *, reverse: bool = False) -> list[T]:
        return sorted(items, key=lambda item: self.sort_key(key(item)), reverse=reverse)
