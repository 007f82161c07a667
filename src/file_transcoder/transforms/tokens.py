"""Card-number tokenization.

A token is a compact JWS signed with the caller's secret key. This is a
signature, not encryption: the payload can be read back by anyone holding
the token, and only its integrity is protected.
"""
from __future__ import annotations

from typing import Any

import jwt
from jwt.exceptions import InvalidTokenError

from file_transcoder.constants import TOKEN_ALGORITHM, TEXT_ENCODING
from file_transcoder.logging_setup import get_logger

log = get_logger(__name__)


class CardTokenizer:
    def __init__(self, secret_key: str, algorithm: str = TOKEN_ALGORITHM):
        if not secret_key:
            raise ValueError("A secret key is required to tokenize card values")
        self.secret_key = secret_key
        self.algorithm = algorithm

    def tokenize(self, value: Any) -> str:
        """Sign ``value``; identical value and key always give the same token."""
        payload = str(value).encode(TEXT_ENCODING)
        return jwt.api_jws.encode(payload, self.secret_key, algorithm=self.algorithm)

    def detokenize(self, token: Any) -> Any:
        """Verify ``token`` and return its payload.

        A value that is not a valid token for this key is returned as-is.
        """
        if not isinstance(token, str) or not token:
            return token
        try:
            payload = jwt.api_jws.decode(
                token, self.secret_key, algorithms=[self.algorithm]
            )
        except InvalidTokenError as e:
            log.warning("Token verification failed", error=str(e))
            return token
        return payload.decode(TEXT_ENCODING)
