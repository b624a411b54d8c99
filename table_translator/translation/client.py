"""
HTTP client for the translation endpoint.

The endpoint takes one or more `list` query parameters and answers with
`{"original_text": [...], "translated_text": [...]}` in the same order.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, runtime_checkable

import requests
from pydantic import BaseModel, Field, ValidationError

from table_translator.errors import TranslationApiError
from table_translator.utils.logging import get_logger

log = get_logger(__name__)

# Keep error messages readable when the endpoint returns an HTML error page.
_BODY_PREVIEW = 2000


class TranslationResponse(BaseModel):
    original_text: List[str] = Field(default_factory=list)
    translated_text: List[str]


@runtime_checkable
class Translator(Protocol):
    """
    Anything that turns an ordered list of texts into translations, same order.
    """

    def translate(self, texts: Sequence[str]) -> List[str]:
        ...


class TranslationClient:
    """
    One GET per call; no retry, and no timeout unless one is configured.
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def translate(self, texts: Sequence[str]) -> List[str]:
        if not texts:
            return []

        params = [("list", text) for text in texts]
        try:
            resp = self._session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TranslationApiError(f"error making translation request: {exc}") from exc

        body = resp.text
        if resp.status_code != 200:
            raise TranslationApiError(
                f"API returned non-200 status code: {resp.status_code}, body: {body[:_BODY_PREVIEW]}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            payload = TranslationResponse.model_validate_json(body)
        except ValidationError as exc:
            raise TranslationApiError(
                f"error decoding response: {exc.error_count()} error(s), body: {body[:_BODY_PREVIEW]}",
                status_code=resp.status_code,
                body=body,
            ) from exc

        log.debug(
            "Translation response received",
            extra={"requested": len(texts), "returned": len(payload.translated_text)},
        )
        return payload.translated_text

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "TranslationClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["TranslationClient", "TranslationResponse", "Translator"]
