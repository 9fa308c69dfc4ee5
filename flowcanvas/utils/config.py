#!/usr/bin/env python3
"""
Unified configuration management for flowcanvas.
Handles the agent service endpoint and execution engine tuning.
"""
import os
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict, field

logger = logging.getLogger(__name__)


@dataclass
class AgentConfig:
    """Configuration for the external agent query service"""
    api_url: str = "http://localhost:8001"
    timeout: float = 30.0


@dataclass
class EngineConfig:
    """Configuration for workflow execution"""
    pacing_delay: float = 0.5  # seconds, after each node
    pool_watch_delay: float = 0.8
    max_workers: int = 1


@dataclass
class ToolkitConfig:
    """Main configuration"""
    agent: AgentConfig = field(default_factory=AgentConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "agent": asdict(self.agent),
            "engine": asdict(self.engine)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolkitConfig":
        """Create from dictionary"""
        return cls(
            agent=AgentConfig(**data.get("agent", {})),
            engine=EngineConfig(**data.get("engine", {}))
        )


# Environment variable -> (section, field, type)
ENV_OVERRIDES = {
    "FLOWCANVAS_AGENT_API_URL": ("agent", "api_url", str),
    "FLOWCANVAS_AGENT_TIMEOUT": ("agent", "timeout", float),
    "FLOWCANVAS_PACING_DELAY": ("engine", "pacing_delay", float),
    "FLOWCANVAS_POOL_WATCH_DELAY": ("engine", "pool_watch_delay", float),
    "FLOWCANVAS_MAX_WORKERS": ("engine", "max_workers", int),
}


class ConfigManager:
    """Loads configuration from the config file, then applies environment overrides"""

    CONFIG_FILE = Path.home() / ".flowcanvas" / "config.json"

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file) if config_file else self.CONFIG_FILE
        self.config: Optional[ToolkitConfig] = None

    def load(self) -> ToolkitConfig:
        """Load configuration from file and environment"""
        config = ToolkitConfig()
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    config = ToolkitConfig.from_dict(json.load(f))
            except (OSError, ValueError, TypeError) as e:
                logger.warning("Could not load config file %s: %s", self.config_file, e)

        self._apply_env(config)
        self.config = config
        return config

    def _apply_env(self, config: ToolkitConfig):
        for var, (section, name, cast) in ENV_OVERRIDES.items():
            raw = os.environ.get(var)
            if raw is None or raw == "":
                continue
            try:
                setattr(getattr(config, section), name, cast(raw))
            except ValueError:
                logger.warning("Ignoring invalid value for %s: %r", var, raw)

    def save(self, config: Optional[ToolkitConfig] = None):
        """Save configuration to file"""
        if config:
            self.config = config

        if not self.config:
            return

        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(self.config.to_dict(), f, indent=2)
        # Set restrictive permissions
        self.config_file.chmod(0o600)

    def get_config(self) -> ToolkitConfig:
        """Loaded configuration; the file is read once, call load() to re-read it"""
        return self.config or self.load()

    def get_agent_config(self) -> AgentConfig:
        return self.get_config().agent

    def get_engine_config(self) -> EngineConfig:
        return self.get_config().engine


# Global instance
_config_manager = None

def get_config_manager() -> ConfigManager:
    """Get global config manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
