"""Shared helpers for renovator (retry backoff, repository identity).

Used by the GitHub client, the search step and the config layer.
"""

from __future__ import annotations

from urllib.parse import urlparse

# --- Retry ---


def fibonacci_backoff_sequence(max_total_seconds: int = 300) -> list[int]:
    """Generate Fibonacci backoff sequence (seconds) up to max_total_seconds."""
    sequence: list[int] = []
    total = 0
    a, b = 1, 1
    while total + a <= max_total_seconds:
        sequence.append(a)
        total += a
        a, b = b, a + b
    return sequence


def backoff_wait(sequence: list[int], attempt: int) -> int:
    """Wait time for a zero-based attempt; reuses the last step once the sequence runs out."""
    if attempt < len(sequence):
        return sequence[attempt]
    return sequence[-1] if sequence else 1


# --- Repository identity ---


def split_repository_url(url: str) -> tuple[str, str]:
    """Return (owner, repo) from a REST repository URL or a PR/repo HTML URL.

    Accepts https://api.github.com/repos/{owner}/{repo} and
    https://github.com/{owner}/{repo}[/pull/N]. Raises ValueError when no
    owner/repo pair can be found.
    """
    parts = [p for p in urlparse(url or "").path.split("/") if p]
    if "repos" in parts:
        parts = parts[parts.index("repos") + 1 :]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        msg = f"Cannot derive repository from URL: {url!r}"
        raise ValueError(msg)
    return parts[0], parts[1]
