# src/periscope/utils/tokenizer.py
import logging

import tiktoken

logger = logging.getLogger(__name__)


class Tokenizer:
    _encoding = None

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            cls._encoding = tiktoken.get_encoding("cl100k_base")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Estimates the token count of a file's content."""
        try:
            encoding = Tokenizer.get_encoding()
            return len(encoding.encode(text, disallowed_special=()))
        except Exception as e:
            # Encoding data unavailable (e.g. offline first run)
            logger.debug("tiktoken unavailable, estimating: %s", e)
            return len(text) // 4
