import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from workflow_engine.config import EngineConfig, PRESETS, fast_config, get_preset


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.speed_ms == 1000
        assert config.unknown_type_policy == "fallback"
        assert config.handle_collision_policy == "last_wins"
        assert config.default_delay_ms == 1000

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            EngineConfig(speed_ms=-1)
        with pytest.raises(ValueError):
            EngineConfig(unknown_type_policy="ignore")
        with pytest.raises(ValueError):
            EngineConfig(handle_collision_policy="first_wins")

    def test_presets(self):
        assert set(PRESETS) == {"default", "fast", "strict"}
        assert fast_config().speed_ms == 0
        strict = get_preset("strict")
        assert strict.unknown_type_policy == "error"
        assert strict.handle_collision_policy == "error"
        with pytest.raises(ValueError):
            get_preset("turbo")

    def test_from_dict_with_preset(self):
        config = EngineConfig.from_dict({"preset": "strict", "speed_ms": 250, "unknown": 1})
        assert config.speed_ms == 250
        assert config.unknown_type_policy == "error"

    def test_from_dict_empty(self):
        assert EngineConfig.from_dict(None) == EngineConfig()

    def test_round_trip_dict(self):
        config = EngineConfig(speed_ms=10, debug=True)
        assert EngineConfig.from_dict(config.to_dict()) == config
