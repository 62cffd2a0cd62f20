"""Token counting utilities using tiktoken.

Chunk records carry a token count so the embedding side can batch against
model limits. The encoder is loaded on first use and owned by the
TokenCounter instance; construct one per run and pass it where needed.
"""

from __future__ import annotations

import tiktoken


class TokenCounter:
    """Counts tokens with a tiktoken encoding.

    Args:
        encoding_name: tiktoken encoding (default: cl100k_base, used by
            text-embedding-3 models)
    """

    def __init__(self, encoding_name: str = "cl100k_base") -> None:
        self.encoding_name = encoding_name
        self._encoder: tiktoken.Encoding | None = None

    def _get_encoder(self) -> tiktoken.Encoding:
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.encoding_name)
        return self._encoder

    def count(self, text: str) -> int:
        """Count tokens in text.

        Args:
            text: Text to count tokens for

        Returns:
            Number of tokens (0 for empty string)
        """
        if not text:
            return 0
        return len(self._get_encoder().encode(text))
