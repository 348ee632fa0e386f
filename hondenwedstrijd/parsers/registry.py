from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hondenwedstrijd.parsers.base import BaseStrategy

# key -> (priority, class); lower priority runs first
STRATEGY_REGISTRY: dict[str, tuple[int, type[BaseStrategy]]] = {}


def register_strategy(key: str, priority: int):
    """Decorator to register a strategy class under a key and priority."""
    def decorator(cls):
        cls.name = key
        STRATEGY_REGISTRY[key] = (priority, cls)
        return cls
    return decorator


def _instantiate(cls: type[BaseStrategy], options: dict) -> BaseStrategy:
    # Strategies only receive the options they declare (table: min_columns)
    accepted = {k: v for k, v in options.items() if k in getattr(cls, "OPTIONS", ())}
    return cls(**accepted)


def get_strategy(key: str, **options) -> BaseStrategy:
    """Return a strategy instance for the given key."""
    if key not in STRATEGY_REGISTRY:
        raise KeyError(f"Unknown strategy '{key}'")
    return _instantiate(STRATEGY_REGISTRY[key][1], options)


def list_strategy_keys() -> list[str]:
    """Return registered strategy keys in priority order."""
    return [key for key, _ in sorted(STRATEGY_REGISTRY.items(), key=lambda item: item[1][0])]


def get_strategies(**options) -> list[BaseStrategy]:
    """Instantiate every registered strategy in priority order."""
    return [get_strategy(key, **options) for key in list_strategy_keys()]
