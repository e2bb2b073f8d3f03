"""
Environment Configuration.

The environment is determined by `SAMPLE_APP_ENV` and controls which .env files
every settings class loads.
"""

import os


def get_env_files() -> tuple[str, ...]:
    """
    Returns the .env files to load, lowest priority first (later overrides earlier).
    """
    env = os.getenv("SAMPLE_APP_ENV", "development")
    return (
        ".env",
        ".env.local",
        f".env.{env}",
        f".env.{env}.local",
    )
