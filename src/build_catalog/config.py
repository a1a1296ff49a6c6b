"""YAML configuration loader for catalog builds."""

import re
from dataclasses import dataclass, field, fields
from pathlib import Path

from dotenv import load_dotenv

from common.config import ConfigSingleton, find_config_path, load_yaml
from index_posts.index_posts import DEFAULT_PAGE_SIZE
from ingest_posts.ingest_posts import DEFAULT_EXCERPT_CHARS
from ingest_posts.split_segments.split import DEFAULT_SEPARATOR_PATTERN

# Load .env file if it exists
load_dotenv()

# Config directory relative to this file
CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "configs"
CONFIG_ENV_VAR = "CATALOG_CONFIG"


@dataclass
class BuildConfig:
    input_dir: str = ""
    output_dir: str = ""
    page_size: int = DEFAULT_PAGE_SIZE
    include_drafts: bool = False
    separator_pattern: str = DEFAULT_SEPARATOR_PATTERN
    max_workers: int = 4
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS
    extensions: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("page_size", "max_workers", "excerpt_chars"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"Invalid {name}: {value!r}. Must be a positive integer")

        if not isinstance(self.include_drafts, bool):
            raise ValueError(f"Invalid include_drafts: {self.include_drafts!r}. Must be true or false")

        try:
            re.compile(self.separator_pattern)
        except (re.error, TypeError) as exc:
            raise ValueError(f"Invalid separator_pattern: {self.separator_pattern!r} ({exc})") from exc

        if not isinstance(self.extensions, list) or not all(isinstance(e, str) for e in self.extensions):
            raise ValueError(f"Invalid extensions: {self.extensions!r}. Must be a list of suffixes")


def load_config(name: str | None = None) -> BuildConfig:
    """Load build config by name (e.g. 'default') or path.

    Falls back to the CATALOG_CONFIG environment variable, then to built-in
    defaults when neither is set.

    Args:
        name: Config name without extension, or path to a YAML file

    Returns:
        BuildConfig instance

    Raises:
        FileNotFoundError: If the named config file doesn't exist
        ValueError: If the file has unknown keys or invalid values
    """
    config_path = find_config_path(name, CONFIG_DIR, env_var=CONFIG_ENV_VAR)
    if config_path is None:
        return BuildConfig()

    data = load_yaml(config_path)
    known = {f.name for f in fields(BuildConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")
    return BuildConfig(**data)


_manager = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
