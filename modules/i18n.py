"""
Internationalization (i18n) Module

Labels and messages for the quote workflow and the operator email.

Supported languages:
- English (en)
- Arabic (ar)

Usage in Python:
    from modules.i18n import translate
    label = translate('delivery.normal', lang='ar', rate='5')
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# Supported languages
SUPPORTED_LANGUAGES = {
    'en': {'name': 'English', 'direction': 'ltr'},
    'ar': {'name': 'العربية', 'direction': 'rtl'},
}

DEFAULT_LANGUAGE = 'en'


class I18nManager:
    """Loads translation files and resolves dotted keys."""

    def __init__(self, translations_dir: Optional[Path] = None):
        """
        Initialize i18n manager.

        Args:
            translations_dir: Path to translations directory.
                            Defaults to the translations directory next to this module.
        """
        if translations_dir is None:
            translations_dir = Path(__file__).parent / 'translations'

        self.translations_dir = translations_dir
        self._translations: Dict[str, Dict[str, Any]] = {}
        self._load_all_translations()

    def _load_all_translations(self) -> None:
        """Load all translation files from translations directory."""
        if not self.translations_dir.exists():
            logger.warning(f"Translations directory not found: {self.translations_dir}")
            return

        for lang_code in SUPPORTED_LANGUAGES.keys():
            self._load_translation(lang_code)

    def _load_translation(self, lang_code: str) -> None:
        """
        Load translation file for a specific language.

        Args:
            lang_code: Language code (e.g., 'en', 'ar')
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
            logger.info(f"Loaded translations for language: {lang_code}")
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load translation file {translation_file}: {e}")
            self._translations[lang_code] = {}

    def _lookup(self, key: str, lang: str) -> Optional[str]:
        value: Any = self._translations.get(lang, {})
        for k in key.split('.'):
            if not isinstance(value, dict):
                return None
            value = value.get(k)
        return value if isinstance(value, str) else None

    def get_translation(
        self,
        key: str,
        lang: str = DEFAULT_LANGUAGE,
        **kwargs
    ) -> str:
        """
        Get translated string for a key.

        Supports nested keys using dot notation: 'section.key'
        Supports variable substitution: "Order: {file_name}"

        Falls back to the default language, then to the key itself.

        Args:
            key: Translation key (supports dot notation)
            lang: Language code
            **kwargs: Variables for string formatting

        Returns:
            Translated string, or key if translation not found
        """
        if lang not in SUPPORTED_LANGUAGES:
            logger.warning(f"Unsupported language: {lang}. Using default: {DEFAULT_LANGUAGE}")
            lang = DEFAULT_LANGUAGE

        value = self._lookup(key, lang)
        if value is None and lang != DEFAULT_LANGUAGE:
            value = self._lookup(key, DEFAULT_LANGUAGE)

        if value is None:
            logger.debug(f"Translation key not found: {key} (lang: {lang})")
            return key

        if kwargs:
            try:
                return value.format(**kwargs)
            except KeyError as e:
                logger.warning(f"Missing variable in translation: {e} (key: {key}, lang: {lang})")
        return value


# Global i18n manager instance
i18n_manager = I18nManager()


def translate(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Translate a key to the specified language.

    Example:
        >>> translate('services.translation', lang='en')
        'Translation'
        >>> translate('email.subject', lang='en', file_name='essay.docx')
        'New order: essay.docx'
    """
    return i18n_manager.get_translation(key, lang, **kwargs)


def create_translator(lang: str):
    """
    Bind ``translate`` to one language.

    Usage:
        _ = create_translator('ar')
        _('workflow.analyzing')
    """
    def translator(key: str, **kwargs) -> str:
        return translate(key, lang=lang, **kwargs)

    return translator
