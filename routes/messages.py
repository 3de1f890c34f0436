"""
Translated flash messages.

Routes flash translation keys; the text is resolved in the language of
the current session.
"""

from flask import flash, session

from modules.i18n import DEFAULT_LANGUAGE, translate


def current_language() -> str:
    return session.get("language", DEFAULT_LANGUAGE)


def t(key: str, **kwargs) -> str:
    """Translate a key in the session language."""
    return translate(key, lang=current_language(), **kwargs)


def flash_t(key: str, category: str = "info", **kwargs) -> None:
    """Flash a translated message."""
    flash(t(key, **kwargs), category)
