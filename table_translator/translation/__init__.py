"""
Translation package for table-translator.
"""

from table_translator.translation.client import (
    TranslationClient,
    TranslationResponse,
    Translator,
)

__all__ = [
    "TranslationClient",
    "TranslationResponse",
    "Translator",
]
