# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Localized messages for errors, warnings and information output."""

import functools
import json
import logging
from importlib import resources

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
ALLOWED_LOCALES = ("en", "fr")


@functools.cache
def _load_catalog(locale: str) -> dict[str, str]:
    """Loads the message catalog of a locale from package resources.

    Args:
        locale: Two-letter locale code.

    Returns:
        Dictionary mapping message keys to printf-style templates.
    """
    catalog_ref = (
        resources.files("pdffontmaker") / "resources" / "i18n" / f"{locale}.json"
    )
    return json.loads(catalog_ref.read_text(encoding="utf-8"))


def is_allowed_locale(locale: str) -> bool:
    """Returns True if a message catalog exists for the locale."""
    return locale in ALLOWED_LOCALES


class Translator:
    """Renders message keys in a given locale.

    Messages of a non-default locale are merged over the English
    catalog, so a key missing from a translation still renders.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        """Initializes the Translator.

        Args:
            locale: Requested locale. Unknown locales fall back to English.
        """
        self.locale = DEFAULT_LOCALE
        self._messages = dict(_load_catalog(DEFAULT_LOCALE))
        if locale != DEFAULT_LOCALE:
            if is_allowed_locale(locale):
                self._messages.update(_load_catalog(locale))
                self.locale = locale
            else:
                logger.debug("Unsupported locale '%s', using English", locale)

    def get(self, key: str) -> str:
        """Returns the raw template for a key.

        Falls back to the 'error_unknown' message, then to the key itself.
        """
        return self._messages.get(key) or self._messages.get("error_unknown") or key

    def format(self, key: str, *values: object) -> str:
        """Returns the message for a key with the values substituted.

        Args:
            key: Message key.
            *values: Values for the template placeholders.

        Returns:
            The formatted message.
        """
        template = self.get(key)
        if not values:
            return template
        try:
            return template % values
        except (TypeError, ValueError):
            # Fallback template without matching placeholders
            return template


@functools.cache
def get_translator(locale: str = DEFAULT_LOCALE) -> Translator:
    """Returns a shared Translator for the locale."""
    return Translator(locale)
