"""Handles saving and loading selector configs and extracted questions."""

import hashlib
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import logfire
from pydantic import ValidationError

from quizcrawl.config import SITE_CONFIGS, extract_domain
from quizcrawl.exceptions import ConfigLoadError
from quizcrawl.models import Question, SelectorConfig
from quizcrawl.outputs import load_json, save_formatted_content
from quizcrawl.utils.files import init_quizcrawl


def load_config_file(path: str | Path) -> SelectorConfig:
    """Read a single selector config from a JSON file.

    The file may hold the config itself or a stored entry with a
    ``selectors`` key.

    Args:
        path: Path to the JSON file

    Returns:
        The parsed SelectorConfig.

    Raises:
        ConfigLoadError: If the file is missing, not JSON, or not a valid config

    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigLoadError(str(path), str(e)) from e

    if isinstance(data, dict) and isinstance(data.get('selectors'), dict):
        data = data['selectors']

    try:
        return SelectorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(str(path), str(e)) from e


class SelectorStorage:
    """Manages per-domain selector configs and question output files.

    Attributes:
        storage_dir: Directory where selector files are stored
        content_dir: Directory where extracted questions are stored

    """

    def __init__(self, storage_dir: str | Path | None = None, content_dir: str | Path | None = None):
        """Initialize the storage manager.

        Args:
            storage_dir: Directory for selector files. Defaults to .quizcrawl/selectors.
            content_dir: Directory for question output. Defaults to .quizcrawl/output.

        """
        self.storage_dir = str(storage_dir) if storage_dir else str(init_quizcrawl('selectors'))
        self.content_dir = str(content_dir) if content_dir else str(init_quizcrawl('output'))
        os.makedirs(self.storage_dir, exist_ok=True)
        os.makedirs(self.content_dir, exist_ok=True)

    def save_config(self, domain: str, config: SelectorConfig) -> str:
        """Save a selector config for a domain.

        Args:
            domain: Host name or URL the config applies to
            config: Selector configuration

        Returns:
            Path to the saved file.

        """
        domain = extract_domain(domain) or domain
        filepath = self._get_filepath(domain)
        data = {
            'domain': domain,
            'saved_at': datetime.now().isoformat(),
            'selectors': config.to_dict(),
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logfire.info('Saved selectors', domain=domain, path=filepath)
        return filepath

    def load_config(self, domain: str) -> SelectorConfig | None:
        """Load the stored selector config for a domain.

        Args:
            domain: Host name (e.g., 'example.com') or URL

        Returns:
            The stored config, or None if missing or unreadable.

        """
        filepath = self._get_filepath(extract_domain(domain) or domain)
        if not os.path.exists(filepath):
            return None

        try:
            return load_config_file(filepath)
        except ConfigLoadError as e:
            logfire.warn('Ignoring unreadable selector file', path=filepath, error=e.reason)
            return None

    def config_exists(self, domain: str) -> bool:
        """Check whether a selector config is stored for a domain."""
        return os.path.exists(self._get_filepath(extract_domain(domain) or domain))

    def delete_config(self, domain: str) -> bool:
        """Delete the stored config for a domain.

        Returns:
            True if a file was removed.

        """
        filepath = self._get_filepath(extract_domain(domain) or domain)
        if not os.path.exists(filepath):
            return False
        os.remove(filepath)
        return True

    def list_domains(self) -> list[str]:
        """List all domains with stored selector configs.

        Returns:
            Sorted list of domain names.

        """
        if not os.path.exists(self.storage_dir):
            return []

        domains = []
        for filename in os.listdir(self.storage_dir):
            if not (filename.startswith('selectors_') and filename.endswith('.json')):
                continue
            data = self._load_file_data(os.path.join(self.storage_dir, filename))
            domain = data.get('domain') if data else None
            domains.append(domain or filename[10:-5].replace('_', '.'))

        return sorted(domains)

    def load_registry(self, include_builtin: bool = True) -> dict[str, SelectorConfig]:
        """Build a resolver registry from stored configs.

        Stored entries take precedence over the built-in SITE_CONFIGS.

        Args:
            include_builtin: Whether to start from SITE_CONFIGS. Defaults to True.

        Returns:
            Mapping of host name to configuration.

        """
        registry: dict[str, SelectorConfig] = dict(SITE_CONFIGS) if include_builtin else {}
        for domain in self.list_domains():
            config = self.load_config(domain)
            if config is not None:
                registry[domain] = config
        return registry

    def save_questions(self, source: str, questions: list[Question], output_format: str = 'json') -> str:
        """Save extracted questions for a URL or local file.

        Args:
            source: URL or file path the questions came from
            questions: Extracted questions
            output_format: 'json' or 'markdown'. Defaults to 'json'.

        Returns:
            Path to the saved file.

        """
        filepath = self.get_content_filepath(source, output_format)
        url = source if urlparse(source).scheme in ('http', 'https') else None
        save_formatted_content(filepath, url, extract_domain(url) if url else None, questions, output_format)
        logfire.info('Saved questions', source=source, path=filepath, count=len(questions))
        return filepath

    def load_questions(self, source: str) -> list[Question] | None:
        """Load previously saved questions for a URL or local file.

        Returns:
            The questions, or None if nothing was saved or the file is unreadable.

        """
        filepath = self.get_content_filepath(source)
        if not os.path.exists(filepath):
            return None

        try:
            return load_json(filepath)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logfire.warn('Ignoring unreadable question file', path=filepath, error=str(e))
            return None

    def get_content_filepath(self, source: str, output_format: str = 'json') -> str:
        """Get the output path for a URL's or file's questions.

        URLs are grouped by domain and named after their path; local files
        are named after their stem.

        Args:
            source: URL or file path
            output_format: 'json' or 'markdown'. Defaults to 'json'.

        Returns:
            Full file path for the output file.

        """
        extension = 'md' if output_format == 'markdown' else 'json'
        parsed = urlparse(source)

        if parsed.scheme not in ('http', 'https'):
            stem = Path(source).stem or 'document'
            return os.path.join(self.content_dir, 'local', f'{stem}.{extension}')

        domain = (extract_domain(source) or 'unknown').replace('.', '_')
        if parsed.path and parsed.path != '/':
            filename = parsed.path.strip('/').replace('/', '_')[:100]
        else:
            url_hash = hashlib.md5(source.encode()).hexdigest()[:8]
            filename = f'homepage_{url_hash}'

        return os.path.join(self.content_dir, domain, f'{filename}.{extension}')

    def _get_filepath(self, domain: str) -> str:
        safe_domain = domain.replace('.', '_').replace('/', '_')
        return os.path.join(self.storage_dir, f'selectors_{safe_domain}.json')

    def _load_file_data(self, filepath: str) -> dict[str, Any] | None:
        try:
            with open(filepath, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            return None
        return data if isinstance(data, dict) else None
