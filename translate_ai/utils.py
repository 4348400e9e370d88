"""
Utility functions used across the scanner, orchestrator and CLI.

Functions:
    retry_with_backoff: Call a function until it succeeds, waiting exponentially longer
    chunked: Split a sequence into consecutive chunks
    sanitize_for_log: Shorten text for log lines
    normalize_language_code / is_valid_language_code: Language code helpers

Example:
    >>> from translate_ai.utils import chunked, normalize_language_code
    >>> chunked([1, 2, 3, 4, 5], 2)
    [[1, 2], [3, 4], [5]]
    >>> normalize_language_code(" FR ")
    'fr'
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LANGUAGE_CODE = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")


def retry_with_backoff(
    fn: Callable[[], T],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: Optional[float] = None,
    should_retry: Optional[Callable[[Exception], bool]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call `fn` up to `max_attempts` times with exponential backoff.
    
    After the k-th failed attempt the wait is base_delay * 2**(k-1),
    capped at max_delay. The last error is re-raised when every attempt
    fails, or immediately when `should_retry` rejects it.
    
    Args:
        fn: Zero-argument callable to run
        max_attempts: Total number of attempts (at least 1)
        base_delay: Wait in seconds after the first failure
        max_delay: Upper bound for a single wait (None = unbounded)
        should_retry: Predicate deciding whether an error is worth retrying
        sleep: Sleep function (injectable for tests)
        
    Returns:
        Whatever `fn` returns on its first successful attempt
        
    Example:
        >>> calls = []
        >>> def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 2:
        ...         raise RuntimeError("boom")
        ...     return "ok"
        >>> retry_with_backoff(flaky, base_delay=0)
        'ok'
    """
    attempts = max(1, max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except Exception as e:
            if attempt == attempts:
                raise
            if should_retry is not None and not should_retry(e):
                raise
            delay = base_delay * (2 ** (attempt - 1))
            if max_delay is not None:
                delay = min(delay, max_delay)
            logger.info("Attempt %d failed (%s), retrying in %.2fs", attempt, e, delay)
            sleep(delay)
    # Unreachable: the loop either returns or raises
    raise RuntimeError("retry_with_backoff exhausted without result")


def chunked(items: Sequence[T], size: Optional[int]) -> list[list[T]]:
    """Split items into consecutive chunks of `size` (one chunk when size is falsy)."""
    if not items:
        return []
    if not size or size <= 0:
        return [list(items)]
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def sanitize_for_log(text: str, max_length: int = 100) -> str:
    """Shorten text for log output."""
    if len(text) > max_length:
        return f"{text[:max_length]}..."
    return text


def normalize_language_code(lang: str) -> str:
    return lang.strip().lower()


def is_valid_language_code(lang: str) -> bool:
    """Basic ISO 639-1 check, optionally with a region (e.g. 'pt-BR')."""
    return bool(_LANGUAGE_CODE.match(lang))


def parse_language_list(value: str) -> list[str]:
    """Split a comma/space separated language list, dropping blanks and duplicates."""
    languages: list[str] = []
    for part in re.split(r"[,\s]+", value or ""):
        part = part.strip()
        if part and part not in languages:
            languages.append(part)
    return languages
