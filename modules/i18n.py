"""
Internationalization (i18n) Module

Provides multi-language support for the PackingListWeb user interface.
Printed documents are not translated: they receive already-resolved data.

Supported languages:
- Portuguese (pt) - default
- English (en)

Usage in templates:
    {{ _('packing_list.title') }}

Usage in Python:
    from modules.i18n import translate
    message = translate('packing_list.flash.saved', lang='en', code=code)
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Supported languages
SUPPORTED_LANGUAGES = {
    'pt': {'name': 'Português', 'flag_emoji': 'PT'},
    'en': {'name': 'English', 'flag_emoji': 'GB'},
}

DEFAULT_LANGUAGE = 'pt'

class I18nManager:
    """Manages translation loading and lookup."""

    def __init__(self, translations_dir: Optional[Path] = None):
        """
        Initialize i18n manager.

        Args:
            translations_dir: Path to translations directory.
                            Defaults to ./translations in the project root.
        """
        if translations_dir is None:
            translations_dir = Path(__file__).parent.parent / 'translations'

        self.translations_dir = translations_dir
        self._translations: Dict[str, Dict[str, Any]] = {}
        self._load_all_translations()

    def _load_all_translations(self) -> None:
        """Load all translation files from translations directory."""
        if not self.translations_dir.exists():
            logger.warning(f"Translations directory not found: {self.translations_dir}")
            for lang_code in SUPPORTED_LANGUAGES:
                self._translations[lang_code] = {}
            return

        for lang_code in SUPPORTED_LANGUAGES:
            self._load_translation(lang_code)

    def _load_translation(self, lang_code: str) -> None:
        """
        Load translation file for a specific language.

        A missing or malformed file leaves the language with no keys, so
        lookups fall back to the key itself.

        Args:
            lang_code: Language code (e.g., 'pt', 'en')
        """
        translation_file = self.translations_dir / f'{lang_code}.json'

        if not translation_file.exists():
            logger.warning(
                f"Translation file not found: {translation_file}. "
                f"Using empty translations for {lang_code}."
            )
            self._translations[lang_code] = {}
            return

        try:
            with open(translation_file, 'r', encoding='utf-8') as f:
                self._translations[lang_code] = json.load(f)
            logger.info(
                f"Loaded {len(self._translations[lang_code])} translation sections "
                f"for language: {lang_code}"
            )
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load translation file {translation_file}: {e}")
            self._translations[lang_code] = {}

    def get_translation(
        self,
        key: str,
        lang: str = DEFAULT_LANGUAGE,
        **kwargs
    ) -> str:
        """
        Get translated string for a key.

        Supports nested keys using dot notation: 'section.subsection.key'
        Supports variable substitution: "Saved {code}" with code='LOMPL...'

        Args:
            key: Translation key (supports dot notation)
            lang: Language code
            **kwargs: Variables for string formatting

        Returns:
            Translated string, or key if translation not found
        """
        if lang not in self._translations:
            logger.warning(f"Language not loaded: {lang}. Using default: {DEFAULT_LANGUAGE}")
            lang = DEFAULT_LANGUAGE

        value: Any = self._translations.get(lang, {})
        for k in key.split('.'):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                value = None
                break

        if not isinstance(value, str):
            logger.debug(f"Translation key not found: {key} (lang: {lang})")
            return key

        if kwargs:
            try:
                return value.format(**kwargs)
            except KeyError as e:
                logger.warning(
                    f"Missing variable in translation: {e} "
                    f"(key: {key}, lang: {lang})"
                )
                return value
        return value

    def get_all_languages(self) -> Dict[str, Dict[str, str]]:
        """Get all supported languages with metadata."""
        return SUPPORTED_LANGUAGES

    def is_language_supported(self, lang_code: str) -> bool:
        return lang_code in SUPPORTED_LANGUAGES


# Global i18n manager instance
i18n_manager = I18nManager()


def translate(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Translate a key to the specified language.

    Example:
        >>> translate('nav.clients', lang='en')
        'Clients'
        >>> translate('nav.clients', lang='pt')
        'Clientes'
    """
    return i18n_manager.get_translation(key, lang, **kwargs)


def get_supported_languages() -> Dict[str, Dict[str, str]]:
    """Get all supported languages."""
    return i18n_manager.get_all_languages()


def is_language_supported(lang_code: str) -> bool:
    return i18n_manager.is_language_supported(lang_code)


def create_translation_filter(current_language: str):
    """
    Create a translation function bound to one language.

    Usage in Flask:
        @app.context_processor
        def inject_translator():
            lang = session.get('language', DEFAULT_LANGUAGE)
            return {'_': create_translation_filter(lang)}
    """
    def translation_filter(key: str, **kwargs) -> str:
        return translate(key, lang=current_language, **kwargs)

    return translation_filter
