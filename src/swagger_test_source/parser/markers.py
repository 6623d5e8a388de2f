"""Marker classifier.

Operation descriptions carry fixed marker substrings (``@loadtest``,
``@customer``, ...) that tell which tests and which authentication
apply. Matching is case-sensitive and ignores word boundaries.
"""

from .base import (
    AUTHENTICATION_TYPE_MARKERS,
    TEST_TYPE_MARKERS,
    AuthenticationType,
    TestType,
)

# Only these two markers make an operation part of the mapped output.
GATE_TEST_TYPES = (TestType.LOAD_TEST, TestType.INTEGRATION_TEST)


def classify_test_types(description: str | None) -> list[TestType]:
    """Return the test types whose marker occurs in the description."""
    if not description:
        return []
    return [t for t, marker in TEST_TYPE_MARKERS.items() if marker in description]


def classify_authentication_types(description: str | None) -> list[AuthenticationType]:
    """Return the authentication types whose marker occurs in the description."""
    if not description:
        return []
    return [a for a, marker in AUTHENTICATION_TYPE_MARKERS.items() if marker in description]


def is_testable(description: str | None) -> bool:
    """Whether an operation qualifies for mapping at all."""
    if not description:
        return False
    return any(t.marker in description for t in GATE_TEST_TYPES)
