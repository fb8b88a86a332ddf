"""
Configuration system for sorty
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sorty.core.diagnostics import Level

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".sorty.yaml"
TRUTHY = ["true", "1", "yes"]


@dataclass
class LintConfig:
    """Configuration for the declaration order lint"""

    level: str = "warn"  # allow, warn, deny or forbid


@dataclass
class DiscoveryConfig:
    """Configuration for finding source files"""

    recursive: bool = True
    extensions: list[str] = field(default_factory=lambda: [".rs"])
    exclude: list[str] = field(default_factory=lambda: ["target/**", ".git/**"])


@dataclass
class OutputConfig:
    """Configuration for reporting diagnostics"""

    format: str = "text"  # text or json
    color: bool = True
    show_suggestions: bool = True
    fail_on_warning: bool = False


@dataclass
class Config:
    """Main configuration class for sorty"""

    # General settings
    verbose: bool = False
    quiet: bool = False

    # Sub-configurations
    lint: LintConfig = field(default_factory=LintConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    config_file: str | None = None

    @property
    def level(self) -> Level:
        return Level(self.lint.level)

    @classmethod
    def from_file(cls, filepath: Path) -> "Config":
        """Load configuration from YAML or JSON file"""
        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return cls()

        try:
            with open(filepath, "r") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f) or {}
                elif filepath.suffix == ".json":
                    data = json.load(f)
                else:
                    logger.error(f"Unsupported config file format: {filepath.suffix}")
                    return cls()

            config = cls._from_dict(data)
            config.config_file = str(filepath)
            return config
        except Exception as e:
            logger.error(f"Error loading config file: {e}")
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config instance from dictionary"""
        config = cls()

        for key in ["verbose", "quiet"]:
            if key in data:
                setattr(config, key, data[key])

        if "lint" in data:
            config.lint = LintConfig(**data["lint"])
        if "discovery" in data:
            config.discovery = DiscoveryConfig(**data["discovery"])
        if "output" in data:
            config.output = OutputConfig(**data["output"])

        return config

    @classmethod
    def load_hierarchy(cls, project_dir: Path | None = None) -> "Config":
        """Load configuration from hierarchy: global -> project -> env vars"""
        config = cls()

        # 1. Load global config
        global_config = Path.home() / ".sorty" / "config.yaml"
        if global_config.exists():
            config = cls.from_file(global_config)
            logger.debug(f"Loaded global config from {global_config}")

        # 2. Load project config
        if project_dir:
            project_config = project_dir / PROJECT_CONFIG_NAME
            if project_config.exists():
                project_data = cls.from_file(project_config)
                config.merge(project_data)
                logger.debug(f"Loaded project config from {project_config}")

        # 3. Apply environment variables
        config.apply_env_vars()

        return config

    def merge(self, other: "Config") -> None:
        """Merge another config into this one (other takes precedence)"""
        if other.config_file:
            self.config_file = other.config_file

        # Merge boolean flags (only if explicitly set to True)
        for flag in ["verbose", "quiet"]:
            if getattr(other, flag):
                setattr(self, flag, True)

        self._merge_dataclass(self.lint, other.lint)
        self._merge_dataclass(self.discovery, other.discovery)
        self._merge_dataclass(self.output, other.output)

    def _merge_dataclass(self, target: Any, source: Any) -> None:
        """Merge source dataclass into target"""
        for field_name in source.__dataclass_fields__:
            source_value = getattr(source, field_name)
            if source_value != getattr(target.__class__(), field_name):
                setattr(target, field_name, source_value)

    def apply_env_vars(self) -> None:
        """Apply environment variables to configuration"""
        # SORTY_LEVEL
        if level := os.environ.get("SORTY_LEVEL"):
            self.lint.level = level.lower()

        # SORTY_FORMAT
        if output_format := os.environ.get("SORTY_FORMAT"):
            self.output.format = output_format.lower()

        # SORTY_VERBOSE
        if os.environ.get("SORTY_VERBOSE", "").lower() in TRUTHY:
            self.verbose = True

        # SORTY_FAIL_ON_WARNING
        if os.environ.get("SORTY_FAIL_ON_WARNING", "").lower() in TRUTHY:
            self.output.fail_on_warning = True

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        valid_levels = [level.value for level in Level]
        if self.lint.level not in valid_levels:
            errors.append(f"Invalid lint level: {self.lint.level}")

        if self.output.format not in ["text", "json"]:
            errors.append(f"Invalid output format: {self.output.format}")

        for extension in self.discovery.extensions:
            if not extension.startswith("."):
                errors.append(f"Invalid file extension: {extension}")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "verbose": self.verbose,
            "quiet": self.quiet,
            "lint": asdict(self.lint),
            "discovery": asdict(self.discovery),
            "output": asdict(self.output),
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to file"""
        data = self.to_dict()

        with open(filepath, "w") as f:
            if filepath.suffix in [".yaml", ".yml"]:
                yaml.safe_dump(data, f, default_flow_style=False)
            elif filepath.suffix == ".json":
                json.dump(data, f, indent=2)
            else:
                raise ValueError(f"Unsupported config file format: {filepath.suffix}")
