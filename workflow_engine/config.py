"""
Engine Configuration.

This module provides configuration options for the execution engine,
allowing customization of pacing, dispatch policy, and external calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from workflow_engine.util.const import (
    POLICY_ERROR,
    POLICY_FALLBACK,
    POLICY_LAST_WINS,
)


@dataclass
class EngineConfig:
    """
    Configuration for an ExecutionEngine instance.

    Attributes:
        speed_ms: Pause inserted after every executed node (visual pacing)
        unknown_type_policy: 'fallback' dispatches unknown node types to
            the fallback processor, 'error' raises ConfigurationError
        fallback_type: Node type used by the 'fallback' policy
        handle_collision_policy: 'last_wins' lets the later edge win when
            two edges deliver into the same handle, 'error' rejects the
            graph before the run starts
        request_timeout: Total timeout for external calls, in seconds
        default_delay_ms: Delay used by the process node when delayMs is unset
        debug: Log redacted processor inputs/outputs at DEBUG level
    """

    speed_ms: int = 1000
    unknown_type_policy: str = POLICY_FALLBACK
    fallback_type: str = "process"
    handle_collision_policy: str = POLICY_LAST_WINS
    request_timeout: float = 30.0
    default_delay_ms: int = 1000
    debug: bool = False

    def __post_init__(self):
        if self.speed_ms < 0:
            raise ValueError(f"speed_ms must be >= 0, got {self.speed_ms}")
        if self.unknown_type_policy not in (POLICY_FALLBACK, POLICY_ERROR):
            raise ValueError(
                f"Invalid unknown_type_policy '{self.unknown_type_policy}'. "
                f"Must be '{POLICY_FALLBACK}' or '{POLICY_ERROR}'"
            )
        if self.handle_collision_policy not in (POLICY_LAST_WINS, POLICY_ERROR):
            raise ValueError(
                f"Invalid handle_collision_policy '{self.handle_collision_policy}'. "
                f"Must be '{POLICY_LAST_WINS}' or '{POLICY_ERROR}'"
            )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        """
        Create an EngineConfig from a dictionary (e.g., from JSON).

        A ``preset`` key selects the base configuration; the remaining
        keys override it. Unknown keys are ignored.

        ```json
        {"preset": "strict", "speed_ms": 250}
        ```
        """
        if not data:
            return cls()

        data = dict(data)
        preset_name = data.pop("preset", None)
        base_config = get_preset(preset_name) if preset_name else cls()

        return cls(
            speed_ms=int(data.get("speed_ms", base_config.speed_ms)),
            unknown_type_policy=data.get("unknown_type_policy", base_config.unknown_type_policy),
            fallback_type=data.get("fallback_type", base_config.fallback_type),
            handle_collision_policy=data.get("handle_collision_policy", base_config.handle_collision_policy),
            request_timeout=float(data.get("request_timeout", base_config.request_timeout)),
            default_delay_ms=int(data.get("default_delay_ms", base_config.default_delay_ms)),
            debug=bool(data.get("debug", base_config.debug)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed_ms": self.speed_ms,
            "unknown_type_policy": self.unknown_type_policy,
            "fallback_type": self.fallback_type,
            "handle_collision_policy": self.handle_collision_policy,
            "request_timeout": self.request_timeout,
            "default_delay_ms": self.default_delay_ms,
            "debug": self.debug,
        }


def default_config() -> EngineConfig:
    return EngineConfig()


def fast_config() -> EngineConfig:
    """No pacing between nodes; useful for tests and batch runs."""
    return EngineConfig(speed_ms=0, default_delay_ms=0)


def strict_config() -> EngineConfig:
    """
    Reject unknown node types and fan-in handle collisions instead of
    silently falling back or overwriting.
    """
    return EngineConfig(
        unknown_type_policy=POLICY_ERROR,
        handle_collision_policy=POLICY_ERROR,
    )


PRESETS = {
    "default": default_config,
    "fast": fast_config,
    "strict": strict_config,
}


def get_preset(name: str) -> EngineConfig:
    """
    Get a preset configuration by name.

    Raises:
        ValueError: If preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(
            f"Unknown preset '{name}'. Available: {list(PRESETS.keys())}"
        )
    return PRESETS[name]()
