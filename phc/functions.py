"""
PHC Function Registry
=====================
Maps function names to numeric kernels of fixed arity.

The registry is the only extension point of the evaluator: the default
table covers the usual real functions plus `primeharm`, a harmonic sum
over a prime basis. Callers may build their own registry and inject it.
Lookups are case-insensitive.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Iterator, Optional

from .config import DEFAULT_CONFIG, EngineConfig


@dataclass(frozen=True)
class FunctionInfo:
    """
    A named numeric kernel.

    Each entry carries:
      - name:           Lowercase lookup name
      - arity:          Minimum number of arguments consumed
      - kernel:         The function itself, called with `arity` floats
      - description:    One line for help tables
      - domain:         Optional predicate on the first argument
      - domain_message: Raised with DomainError when `domain` rejects
    """
    name: str
    arity: int
    kernel: Callable[..., float]
    description: str = ""
    domain: Optional[Callable[[float], bool]] = None
    domain_message: str = ""


# ─────────────────────────────────────────────────────────────
#  Prime Harmonic Kernel
# ─────────────────────────────────────────────────────────────

def is_prime(n: int) -> bool:
    """6k ± 1 trial division."""
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True


@lru_cache(maxsize=16)
def prime_basis(count: int) -> tuple[int, ...]:
    """The first `count` primes."""
    primes = []
    n = 2
    while len(primes) < count:
        if is_prime(n):
            primes.append(n)
        n += 1
    return tuple(primes)


def prime_harmonic(t: float, count: int = DEFAULT_CONFIG.prime_count) -> float:
    """Sum of p^(-1/2) * cos(t * ln p) over the first `count` primes.

    Each prime contributes a wave with amplitude 1/sqrt(p) and frequency
    ln p. No claim is made about the mathematical meaning of the sum.
    """
    return sum(math.cos(t * math.log(p)) / math.sqrt(p) for p in prime_basis(count))


# ─────────────────────────────────────────────────────────────
#  Registry
# ─────────────────────────────────────────────────────────────

class FunctionRegistry:
    """
    Name -> FunctionInfo table.

    Usage:
        registry = default_registry()
        registry.register_function("double", lambda x: 2 * x)
        info = registry.get("DOUBLE")
    """

    def __init__(self, functions: list[FunctionInfo] | None = None):
        self._functions: dict[str, FunctionInfo] = {}
        for info in functions or []:
            self.register(info)

    def register(self, info: FunctionInfo) -> None:
        if info.arity < 0:
            raise ValueError(f"Arity must be >= 0 for {info.name!r}")
        self._functions[info.name.lower()] = info

    def register_function(self, name: str, kernel: Callable[..., float],
                          arity: int = 1, description: str = "",
                          domain: Callable[[float], bool] | None = None,
                          domain_message: str = "") -> FunctionInfo:
        info = FunctionInfo(
            name=name.lower(), arity=arity, kernel=kernel,
            description=description, domain=domain, domain_message=domain_message,
        )
        self.register(info)
        return info

    def unregister(self, name: str) -> None:
        self._functions.pop(name.lower(), None)

    def get(self, name: str) -> FunctionInfo | None:
        return self._functions.get(name.lower())

    def names(self) -> list[str]:
        return sorted(self._functions)

    def copy(self) -> FunctionRegistry:
        return FunctionRegistry(list(self._functions.values()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._functions

    def __iter__(self) -> Iterator[FunctionInfo]:
        return iter(self._functions[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._functions)


def default_registry(config: EngineConfig = DEFAULT_CONFIG) -> FunctionRegistry:
    """Build the standard table. `primeharm` uses `config.prime_count` primes."""
    count = config.prime_count
    return FunctionRegistry([
        FunctionInfo("sin", 1, math.sin, "Sine (radians)"),
        FunctionInfo("cos", 1, math.cos, "Cosine (radians)"),
        FunctionInfo("tan", 1, math.tan, "Tangent (radians)"),
        FunctionInfo("exp", 1, math.exp, "e raised to x"),
        FunctionInfo(
            "log", 1, math.log, "Natural logarithm",
            domain=lambda x: x > 0, domain_message="log domain error",
        ),
        FunctionInfo(
            "sqrt", 1, math.sqrt, "Square root",
            domain=lambda x: x >= 0, domain_message="sqrt domain error",
        ),
        FunctionInfo("abs", 1, abs, "Absolute value"),
        FunctionInfo(
            "primeharm", 1, lambda t: prime_harmonic(t, count),
            f"Prime harmonic sum over {count} primes",
        ),
        FunctionInfo("hypot", 2, math.hypot, "Magnitude of (re, im)"),
        FunctionInfo("phase", 2, lambda re, im: math.atan2(im, re), "Phase angle of (re, im)"),
    ])


def describe_all(registry: FunctionRegistry) -> str:
    """Return a formatted table of all functions for REPL help."""
    lines = [
        "╔════════════╦═══════╦══════════════════════════════════════╗",
        "║ Function   ║ Arity ║ Description                          ║",
        "╠════════════╬═══════╬══════════════════════════════════════╣",
    ]
    for info in registry:
        name = info.name[:10].ljust(10)
        arity = str(info.arity).center(5)
        desc = info.description[:36].ljust(36)
        lines.append(f"║ {name} ║ {arity} ║ {desc} ║")
    lines.append("╚════════════╩═══════╩══════════════════════════════════════╝")
    return "\n".join(lines)
