"""Cache key derivation for city lookups."""

CACHE_KEY_PREFIX = "weather:"


def normalize_city_key(raw: str) -> str:
    """Return the canonical cache key for a pre-validated city string."""
    return f"{CACHE_KEY_PREFIX}{raw.strip().lower()}"


def city_from_key(key: str) -> str:
    """Strip the cache prefix from a key produced by `normalize_city_key`."""
    if key.startswith(CACHE_KEY_PREFIX):
        return key[len(CACHE_KEY_PREFIX):]
    return key
