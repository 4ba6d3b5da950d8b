import os
from enum import Enum

from pydantic import BaseModel, Field


DEFAULT_CACHE_CAPACITY = 20


class CachePolicy(str, Enum):
    """Eviction order of the annotation cache."""

    FIFO = "fifo"
    LRU = "lru"


class CacheKeying(str, Enum):
    """How cache keys built from (query, context, candidates) are compared."""

    CONTENT = "content"
    IDENTITY = "identity"


def get_default_cache_capacity() -> int:
    """
    Return the cache capacity from ALLELEJOIN_CACHE_CAPACITY or the built-in default.

    Invalid or non-positive values fall back to the default.
    """
    env_value = os.getenv("ALLELEJOIN_CACHE_CAPACITY")
    if env_value is not None:
        try:
            value = int(env_value)
            if value >= 1:
                return value
        except ValueError:
            pass
    return DEFAULT_CACHE_CAPACITY


def get_default_cache_policy() -> CachePolicy:
    env_value = os.getenv("ALLELEJOIN_CACHE_POLICY", CachePolicy.FIFO.value).strip().lower()
    try:
        return CachePolicy(env_value)
    except ValueError:
        return CachePolicy.FIFO


def get_default_cache_keying() -> CacheKeying:
    env_value = os.getenv("ALLELEJOIN_CACHE_KEYS", CacheKeying.CONTENT.value).strip().lower()
    try:
        return CacheKeying(env_value)
    except ValueError:
        return CacheKeying.CONTENT


class EngineSettings(BaseModel):
    """Tunables of a VcfAnnotationEngine. Unset values come from the environment."""

    cache_capacity: int = Field(default_factory=get_default_cache_capacity, ge=1,
                                description="Maximum number of cached annotation results (eviction happens on reaching it)")
    cache_policy: CachePolicy = Field(default_factory=get_default_cache_policy,
                                      description="fifo evicts by insertion order, lru by access order")
    cache_keys: CacheKeying = Field(default_factory=get_default_cache_keying,
                                    description="content compares records structurally, identity by object")
