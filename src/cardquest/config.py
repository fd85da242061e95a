"""Environment loading and shared defaults."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Files checked (in order) when no explicit env file is given
DEFAULT_ENV_FILES = (Path("keyholder.env"), Path(".env"))

# Notion API
NOTION_API_URL = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"

# Groq serves an OpenAI-compatible endpoint
GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Provider -> environment variable holding its key
API_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "google": "GEMINI_API_KEY",
}


def load_environment(env_path: Optional[Path] = None) -> Optional[Path]:
    """
    Load environment variables from a dotenv file.

    Args:
        env_path: Explicit env file. When omitted, the first existing
            default file in the working directory is used.

    Returns:
        The file that was loaded, or None if nothing was found.
    """
    if env_path:
        load_dotenv(env_path)
        return Path(env_path)

    for path in DEFAULT_ENV_FILES:
        if path.exists():
            load_dotenv(path)
            return path
    return None


def require_env(name: str, value: Optional[str] = None) -> str:
    """
    Resolve a required setting, preferring an explicit value.

    Raises:
        ValueError: If the setting is neither given nor in the environment.
    """
    resolved = value or os.getenv(name)
    if not resolved:
        raise ValueError(f"{name} not found in environment")
    return resolved
