"""
Central configuration for the Tethari engine.
Pydantic models for type-safe configuration management.
"""
from __future__ import annotations

import os
import json
import logging
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field, field_validator


ConfigDict = Dict[str, Any]


class EngineSettings(BaseModel):
    """Search engine configuration settings."""

    default_depth: int = Field(default=3, ge=1, le=8, description="Default search depth in plies")
    time_limit_ms: Optional[int] = Field(default=None, ge=1, description="Optional search time budget, checked at node entry")
    seed: Optional[int] = Field(default=None, description="Seed for the tie-break random source")

    @field_validator('default_depth', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class GameRulesSettings(BaseModel):
    """Game rules and draw thresholds."""

    repetition_limit: int = Field(default=3, ge=2, description="Occurrences of a position that end the game as a draw")
    no_event_limit: int = Field(default=100, ge=1, description="Half-moves without capture or isolation death that end the game as a draw")
    allow_undo: bool = Field(default=True, description="Allow undoing moves in a session")

    @field_validator('allow_undo', mode='before')
    @classmethod
    def validate_bool_fields(cls, v):
        return bool(v)


class SessionSettings(BaseModel):
    """Human-vs-computer session settings."""

    human_side: str = Field(default="white", description="Side played by the human (white or black)")

    @field_validator('human_side', mode='before')
    @classmethod
    def validate_side(cls, v):
        v_lower = str(v).lower()
        if v_lower not in ('white', 'black'):
            raise ValueError("human_side must be 'white' or 'black'")
        return v_lower


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_to_file: bool = Field(default=False, description="Write logs to file")
    log_file_path: str = Field(default="tethari.log", description="Log file path")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class TethariConfig(BaseModel):
    """Main configuration model for the Tethari engine."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    rules: GameRulesSettings = Field(default_factory=GameRulesSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    # Metadata
    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'TethariConfig':
        """Create configuration from environment variables."""
        time_limit = os.getenv('TETHARI_TIME_LIMIT_MS')
        seed = os.getenv('TETHARI_SEED')
        return cls(
            engine=EngineSettings(
                default_depth=int(os.getenv('TETHARI_DEPTH', '3')),
                time_limit_ms=int(time_limit) if time_limit else None,
                seed=int(seed) if seed else None,
            ),
            rules=GameRulesSettings(
                repetition_limit=int(os.getenv('TETHARI_REPETITION_LIMIT', '3')),
                no_event_limit=int(os.getenv('TETHARI_NO_EVENT_LIMIT', '100')),
                allow_undo=os.getenv('TETHARI_ALLOW_UNDO', 'true').lower() == 'true',
            ),
            session=SessionSettings(
                human_side=os.getenv('TETHARI_HUMAN_SIDE', 'white'),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('TETHARI_LOG_LEVEL', 'INFO'),
                log_to_file=os.getenv('TETHARI_LOG_FILE', 'false').lower() == 'true',
            )
        )

    def to_dict(self) -> ConfigDict:
        """Convert configuration to dictionary."""
        return {
            'engine': self.engine.model_dump(),
            'rules': self.rules.model_dump(),
            'session': self.session.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'TethariConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            engine=EngineSettings(**data.get('engine', {})),
            rules=GameRulesSettings(**data.get('rules', {})),
            session=SessionSettings(**data.get('session', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )

    def update_from_dict(self, updates: ConfigDict) -> None:
        """Update configuration from dictionary."""
        for section, settings in updates.items():
            if hasattr(self, section) and isinstance(settings, dict):
                section_model = getattr(self, section)
                for key, value in settings.items():
                    if hasattr(section_model, key):
                        setattr(section_model, key, value)


# Global configuration instance
_config: Optional[TethariConfig] = None


def get_config() -> TethariConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = TethariConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> TethariConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = TethariConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_engine_settings() -> EngineSettings:
    """Get engine configuration settings."""
    return get_config().engine


def get_game_rules() -> GameRulesSettings:
    """Get game rules configuration settings."""
    return get_config().rules


def get_session_settings() -> SessionSettings:
    """Get session configuration settings."""
    return get_config().session


def get_logging_settings() -> LoggingSettings:
    """Get logging configuration settings."""
    return get_config().logging


def setup_logging() -> None:
    """Configure root logging once, controlled by the logging settings."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = get_logging_settings()
    level: int = getattr(logging, settings.log_level, logging.INFO)
    handlers = [logging.StreamHandler()]
    if settings.log_to_file:
        handlers.append(logging.FileHandler(settings.log_file_path))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
