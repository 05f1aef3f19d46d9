"""
Configuration management for the 9x9 Go engine.

Loads configuration from config.yaml and provides typed access.
Every setting has a default, so the file is optional.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .ai import Tier
from .board import DEFAULT_BOARD_SIZE
from .scoring import DEFAULT_KOMI


@dataclass
class GameConfig:
    """New-game parameters."""
    board_size: int = DEFAULT_BOARD_SIZE
    komi: float = DEFAULT_KOMI


@dataclass
class AIConfig:
    """Computer opponent configuration."""
    tier: str = Tier.HARD.value
    seed: Optional[int] = None


@dataclass
class ApiConfig:
    """HTTP server configuration."""
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class AppConfig:
    """Main application configuration."""
    game: GameConfig = field(default_factory=GameConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def _find_config() -> Optional[Path]:
    search_paths = [
        Path.cwd() / "config.yaml",
        get_project_root() / "config.yaml",
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml. If None, searches in:
                     1. Current directory
                     2. Project root (relative to this file)
                     and falls back to defaults when neither exists.

    Returns:
        AppConfig instance

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If config file is invalid
    """
    if config_path is None:
        found = _find_config()
        if found is None:
            return AppConfig()
        config_path = str(found)
    elif not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if not data:
        raise ValueError(f"Config file is empty: {config_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    # Parse game config (optional, has defaults)
    game_data = data.get("game") or {}
    game_config = GameConfig(
        board_size=int(game_data.get("board_size", DEFAULT_BOARD_SIZE)),
        komi=float(game_data.get("komi", DEFAULT_KOMI)),
    )

    # Parse AI config; reject unknown tiers early
    ai_data = data.get("ai") or {}
    seed = ai_data.get("seed")
    ai_config = AIConfig(
        tier=Tier.parse(ai_data.get("tier", Tier.HARD.value)).value,
        seed=int(seed) if seed is not None else None,
    )

    api_data = data.get("api") or {}
    api_config = ApiConfig(
        host=str(api_data.get("host", "127.0.0.1")),
        port=int(api_data.get("port", 8000)),
    )

    return AppConfig(
        game=game_config,
        ai=ai_config,
        api=api_config,
    )
