"""
Environment Variable Handling.

STRUCTDOC_* overrides and ${VAR} references may live in a .env file kept
out of version control; python-dotenv reads it into os.environ once per
process.
"""

from pathlib import Path

from dotenv import load_dotenv

_dotenv_loaded: bool = False


def ensure_dotenv_loaded(env_file: str = ".env") -> bool:
    """Read `env_file` into os.environ on first use.

    Variables already set in the process environment are left untouched.
    Later calls are no-ops until reset_environment() is called.

    Returns:
        True if a .env file was read by this or an earlier call
    """
    global _dotenv_loaded

    if _dotenv_loaded:
        return True
    _dotenv_loaded = True

    path = Path(env_file)
    if not path.is_absolute():
        path = Path.cwd() / path
    if not path.is_file():
        return False
    load_dotenv(path, override=False)
    return True


def reset_environment() -> None:
    """Allow the next ensure_dotenv_loaded() call to read .env again."""
    global _dotenv_loaded
    _dotenv_loaded = False
