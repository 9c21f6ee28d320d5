"""Utility components for quizcrawl."""

from quizcrawl.utils.files import get_project_root, init_quizcrawl
from quizcrawl.utils.headers import build_headers
from quizcrawl.utils.logging import setup_local_logging
from quizcrawl.utils.retry import get_retryer, log_retry

__all__ = [
    'build_headers',
    'get_project_root',
    'get_retryer',
    'init_quizcrawl',
    'log_retry',
    'setup_local_logging',
]
