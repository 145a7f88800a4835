"""Detection of the bot-mitigation interstitial page.

The upstream answers blocked requests with HTTP 403 and an HTML page instead
of JSON. Matching is a substring heuristic: add a new entry to
``CHALLENGE_SIGNATURES`` when the page changes.
"""

from __future__ import annotations

CHALLENGE_SIGNATURES: tuple[str, ...] = (
    "PXlJuB4eTB",  # obfuscated PerimeterX app identifier
    "blockScript",
    "captcha.js",
)


def is_challenge(body: str, signatures: tuple[str, ...] = CHALLENGE_SIGNATURES) -> bool:
    """Return True if ``body`` looks like the challenge page rather than API data."""
    return any(signature in body for signature in signatures)
