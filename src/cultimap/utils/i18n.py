"""
CultiMap - Translations

Binds the ``cultimap`` gettext domain and exposes ``_`` for UI strings.
Without an installed catalog, strings pass through untranslated.
"""

import gettext
import os
import sys
from collections.abc import Callable

DOMAIN = "cultimap"


def _find_locale_dir() -> str | None:
    for locale_dir in (os.path.join(sys.prefix, "share", "locale"), "/usr/share/locale"):
        if os.path.isdir(locale_dir):
            return locale_dir
    return None


_translation = gettext.translation(DOMAIN, localedir=_find_locale_dir(), fallback=True)
_: Callable[[str], str] = _translation.gettext
