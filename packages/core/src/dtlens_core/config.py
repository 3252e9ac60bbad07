import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "registry_url": "https://registry.npmjs.org",
    "registry_timeout": 10.0,
    "known_authors": {},  # header author URL -> list of GitHub handles, merged over the built-in table
}


def _parse_handles(url, handles) -> list[str]:
    """Normalise one known_authors value to a non-empty list of handle strings."""
    if isinstance(handles, str):
        handles = [handles]
    if not isinstance(handles, list) or not all(isinstance(h, str) and h for h in handles):
        raise ValueError(f"known_authors[{url!r}] must be a handle or a list of handles, got {handles!r}.")
    if not handles:
        raise ValueError(f"known_authors[{url!r}] must list at least one handle.")
    return handles


def load_config(config_path: str = ".dtlens.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .dtlens.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "known_authors": dict(DEFAULT_CONFIG["known_authors"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    known = config.get("known_authors") or {}
    if not isinstance(known, dict):
        raise ValueError("known_authors must be a mapping of author URL to a list of handles.")
    config["known_authors"] = {url: _parse_handles(url, handles) for url, handles in known.items()}

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
