"""TOML configuration loader for pantry-vision."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class OpenAIVisionConfig:
    api_key: str = ""
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 60.0


@dataclass
class GeminiVisionConfig:
    api_key: str = ""
    model: str = "gemini-2.5-flash"


@dataclass
class ClaudeVisionConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class VisionConfig:
    providers: list[str] = field(default_factory=lambda: ["openai", "gemini"])
    min_confidence: float = 0.5
    mock_fallback: bool = True
    openai: OpenAIVisionConfig = field(default_factory=OpenAIVisionConfig)
    gemini: GeminiVisionConfig = field(default_factory=GeminiVisionConfig)
    claude: ClaudeVisionConfig = field(default_factory=ClaudeVisionConfig)


@dataclass
class PantryConfig:
    vision: VisionConfig = field(default_factory=VisionConfig)


def _env_key(*names: str) -> str:
    for name in names:
        value = os.environ.get(name, "")
        if value:
            return value
    return ""


def load_config(path: str | Path | None = None) -> PantryConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables; the
    ``EXPO_PUBLIC_*`` names used by the mobile app's ``.env`` are accepted.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    vis = raw.get("vision", {})
    openai_cfg = vis.get("openai", {})
    gemini_cfg = vis.get("gemini", {})
    claude_cfg = vis.get("claude", {})

    # Resolve API keys: config file → environment variable
    openai_api_key = openai_cfg.get("api_key", "") or _env_key(
        "OPENAI_API_KEY", "EXPO_PUBLIC_OPENAI_API_KEY"
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or _env_key(
        "GEMINI_API_KEY", "EXPO_PUBLIC_GEMINI_API_KEY"
    )
    claude_api_key = claude_cfg.get("api_key", "") or _env_key(
        "ANTHROPIC_API_KEY"
    )

    return PantryConfig(
        vision=VisionConfig(
            providers=list(vis.get("providers", ["openai", "gemini"])),
            min_confidence=vis.get("min_confidence", 0.5),
            mock_fallback=vis.get("mock_fallback", True),
            openai=OpenAIVisionConfig(
                api_key=openai_api_key,
                model=openai_cfg.get("model", "gpt-4o-mini"),
                base_url=openai_cfg.get("base_url", "https://api.openai.com/v1"),
                timeout=float(openai_cfg.get("timeout", 60.0)),
            ),
            gemini=GeminiVisionConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.5-flash"),
            ),
            claude=ClaudeVisionConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
        ),
    )
