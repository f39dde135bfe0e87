"""
Semantic version helpers.

Thin layer over ``semantic_version`` that applies npm's conventions:
versions may carry a leading ``v`` or ``=``, and ranges use npm syntax
(``^``, ``~``, x-ranges, hyphen ranges, ``||``).
"""

import re
from typing import Iterable, List, Optional

import semantic_version

_LOOSE_PREFIX = re.compile(r"^[=v]+")


def clean_version(spec: Optional[str]) -> Optional[str]:
    """
    Normalize a version string.

    Args:
        spec: Version string, possibly prefixed with ``v`` or ``=``

    Returns:
        Canonical version string, or None if ``spec`` is not a valid
        semantic version

    Example:
        >>> clean_version(" v10.2.0 ")
        '10.2.0'
        >>> clean_version("^10.2.0") is None
        True
    """
    if not spec:
        return None
    text = _LOOSE_PREFIX.sub("", spec.strip())
    try:
        return str(semantic_version.Version(text))
    except ValueError:
        return None


def is_canonical_version(name: Optional[str]) -> bool:
    """
    Check whether ``name`` is a version already in canonical form.

    Example:
        >>> is_canonical_version("10.2.0"), is_canonical_version("v10.2.0")
        (True, False)
    """
    return bool(name) and clean_version(name) == name


def parse_range(spec: Optional[str]) -> Optional[semantic_version.NpmSpec]:
    """
    Parse an npm version range.

    Exact versions are valid ranges that match only themselves.

    Returns:
        Parsed range, or None if ``spec`` is not a valid npm range
    """
    if spec is None:
        return None
    text = clean_version(spec) or spec.strip()
    if not text:
        return None
    try:
        return semantic_version.NpmSpec(text)
    except ValueError:
        return None


def version_key(version: str) -> semantic_version.Version:
    """
    Comparable projection of a version string.

    Raises:
        ValueError: If ``version`` is not a valid semantic version
    """
    cleaned = clean_version(version)
    if cleaned is None:
        raise ValueError(f"Not a semantic version: {version!r}")
    return semantic_version.Version(cleaned)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Sort version strings in ascending semantic order (not lexical order)."""
    return sorted(versions, key=version_key)


def max_satisfying(candidates: Iterable[str], spec: str) -> Optional[str]:
    """
    Select the greatest candidate satisfying an npm range.

    Candidates that are not valid versions are skipped.

    Args:
        candidates: Version strings, possibly ``v``-prefixed
        spec: npm range or exact version

    Returns:
        The best match as a cleaned version string, or None

    Example:
        >>> max_satisfying(["1.0.0", "2.0.0", "2.5.3"], "^2.0.0")
        '2.5.3'
    """
    version_range = parse_range(spec)
    if version_range is None:
        return None

    parsed = []
    for candidate in candidates:
        cleaned = clean_version(candidate)
        if cleaned is not None:
            parsed.append(semantic_version.Version(cleaned))

    best = version_range.select(parsed)
    return str(best) if best is not None else None


def version_gte(version: str, threshold: str) -> bool:
    """Check ``version >= threshold`` in semantic order."""
    return version_key(version) >= version_key(threshold)
