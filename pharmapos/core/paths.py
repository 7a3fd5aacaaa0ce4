# pharmapos/core/paths.py
from typing import Iterable


def starts_with_segments(path: str, prefix: str) -> bool:
    """
    Préfixe de chemin par segments complets :
    /api/auth couvre /api/auth et /api/auth/login, pas /api/authors.
    """
    prefix = prefix.rstrip("/")
    if not prefix:
        return path == "/"
    return path == prefix or path.startswith(prefix + "/")


def matches_any_prefix(path: str, prefixes: Iterable[str]) -> bool:
    return any(starts_with_segments(path, prefix) for prefix in prefixes)
