"""
Configuration Management System

This module provides centralized configuration management using YAML and JSON files.
Supports dot-notation access.

Environment variables (loaded from .env via python-dotenv):
    DATABASE_URL        -> SQLAlchemy URL of the row store (unset = store unconfigured)
    TAFWEEJ_CONFIG_DIR  -> directory holding *.yaml / *.json config files
"""

import os
import yaml
import json
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class ConfigManager:
    """
    Manage application configuration from YAML and JSON files

    Provides:
    - Load all config files on startup
    - Dot notation access: config.get('crowd.thresholds.low')
    - Default values for missing keys

    Each file becomes a top-level section named after the file stem,
    so config/crowd.yaml is reached through 'crowd.*'.
    """

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to config directory (default: $TAFWEEJ_CONFIG_DIR
                        or project_root/config)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        elif os.getenv("TAFWEEJ_CONFIG_DIR"):
            self.config_dir = Path(os.environ["TAFWEEJ_CONFIG_DIR"])
        else:
            # Find config dir relative to this file
            self.config_dir = Path(__file__).parent.parent / "config"

        self.configs: Dict[str, Any] = {}
        self._load_all_configs()

    def _load_all_configs(self):
        """Load all configuration files from config directory"""
        if not self.config_dir.exists():
            print(f"   [CONFIG] No config directory at {self.config_dir}, using defaults")
            return

        # Load YAML configs
        for yaml_file in sorted(self.config_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r') as f:
                    config_name = yaml_file.stem
                    self.configs[config_name] = yaml.safe_load(f) or {}
                    print(f"   [CONFIG] Loaded: {yaml_file.name}")
            except (OSError, yaml.YAMLError) as e:
                print(f"   [WARN] Failed to load {yaml_file.name}: {e}")

        # Load JSON configs
        for json_file in sorted(self.config_dir.glob("*.json")):
            try:
                with open(json_file, 'r') as f:
                    config_name = json_file.stem
                    self.configs[config_name] = json.load(f)
                    print(f"   [CONFIG] Loaded: {json_file.name}")
            except (OSError, json.JSONDecodeError) as e:
                print(f"   [WARN] Failed to load {json_file.name}: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key

        Examples:
            config.get('crowd.stalenessMinutes')
            config.get('routing.walkingSpeedKmh')

        Args:
            key: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self.configs

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_crowd_config(self) -> Dict[str, Any]:
        """Get crowd model configuration section"""
        return self.configs.get('crowd', {})

    def get_routing_config(self) -> Dict[str, Any]:
        """Get routing configuration section"""
        return self.configs.get('routing', {})

    def get_dashboard_config(self) -> Dict[str, Any]:
        """Get dashboard configuration section"""
        return self.configs.get('dashboard', {})

    def get_database_url(self) -> Optional[str]:
        """
        Resolve the row store URL

        DATABASE_URL wins over 'database.url' in config files.
        Returns None when neither is set.
        """
        return os.getenv("DATABASE_URL") or self.get('database.url') or None


_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the process-wide configuration instance (loaded on first use)"""
    global _config
    if _config is None:
        _config = ConfigManager()
    return _config
