"""
flowcanvas utilities

Shared helpers and configuration management.
"""
from .config import get_config_manager, ConfigManager, ToolkitConfig, AgentConfig, EngineConfig
from .common import (
    utc_timestamp,
    random_id,
    print_section,
    save_json,
    load_json,
)

__all__ = [
    'get_config_manager',
    'ConfigManager',
    'ToolkitConfig',
    'AgentConfig',
    'EngineConfig',
    'utc_timestamp',
    'random_id',
    'print_section',
    'save_json',
    'load_json',
]
