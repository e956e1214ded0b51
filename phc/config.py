"""
PHC Engine Configuration
========================
Tunables shared by the parser, evaluators and sessions.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for a PHC engine instance.

    Only the values that matter to a caller need to be set; the defaults
    are what the REPL and CLI use.
    """

    max_depth: int = 100           # Nesting limit for parse and evaluation
    truth_epsilon: float = 1e-9    # |value| must exceed this to be true
    prime_count: int = 64          # Prime basis size for primeharm

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.truth_epsilon < 0:
            raise ValueError(f"truth_epsilon must be >= 0, got {self.truth_epsilon}")
        if self.prime_count < 1:
            raise ValueError(f"prime_count must be positive, got {self.prime_count}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> EngineConfig:
        """Build a config from PHC_MAX_DEPTH, PHC_TRUTH_EPSILON and PHC_PRIME_COUNT."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get("PHC_MAX_DEPTH"):
            kwargs["max_depth"] = int(env["PHC_MAX_DEPTH"])
        if env.get("PHC_TRUTH_EPSILON"):
            kwargs["truth_epsilon"] = float(env["PHC_TRUTH_EPSILON"])
        if env.get("PHC_PRIME_COUNT"):
            kwargs["prime_count"] = int(env["PHC_PRIME_COUNT"])
        return cls(**kwargs)

    def with_overrides(self, **overrides) -> EngineConfig:
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


DEFAULT_CONFIG = EngineConfig()
