"""Locating the project root and the .quizcrawl state directory."""

from pathlib import Path

STATE_DIR = '.quizcrawl'


def get_project_root() -> Path:
    """Find the project root by searching upwards from the current working directory.

    Stops at the first directory containing a marker file.
    """
    current_path = Path.cwd()
    markers = {'.git', 'pyproject.toml', STATE_DIR, 'requirements.txt'}

    for parent in [current_path, *current_path.parents]:
        if any((parent / marker).exists() for marker in markers):
            return parent

    # No markers (e.g. running in /tmp): use the current directory
    return current_path


def get_state_path() -> Path:
    """Return the path to the .quizcrawl directory."""
    return get_project_root() / STATE_DIR


def get_logs_path() -> Path:
    """Return the path to the logs directory in .quizcrawl."""
    return get_state_path() / 'logs'


def get_output_path() -> Path:
    """Return the path to the extracted question output directory."""
    return get_state_path() / 'output'


def init_quizcrawl(storage_name: str = 'selectors') -> Path:
    """Create the .quizcrawl directory layout and return the requested storage path.

    Args:
        storage_name: Sub-directory to return (created if missing)

    Returns:
        Path to ``.quizcrawl/<storage_name>``.

    """
    state_dir = get_state_path()
    storage_dir = state_dir / storage_name

    for directory in (storage_dir, state_dir / 'logs', state_dir / 'output'):
        directory.mkdir(parents=True, exist_ok=True)

    # Keep generated files out of source control
    gitignore = state_dir / '.gitignore'
    if not gitignore.exists():
        gitignore.write_text('# Automatically created by quizcrawl\n*\n')

    return storage_dir
