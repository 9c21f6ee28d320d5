"""Built-in selector configurations and the policy that picks one per input."""

from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import urlparse

import logfire

from quizcrawl.models import AnswerSelectors, SelectorConfig

# Layout used by hamexam.org, also the fallback for unknown sites
DEFAULT_CONFIG = SelectorConfig(
    container='.question',
    question_text='.questionText',
    answers=AnswerSelectors(correct='.correctAnswer', incorrect='.answer:not(.correctAnswer)'),
    explanation='.explanation',
    paragraph='.paragraph',
    image='img',
)

SITE_CONFIGS: Mapping[str, SelectorConfig] = MappingProxyType(
    {
        'hamexam.org': DEFAULT_CONFIG,
        'example.com': SelectorConfig(
            container='.question-block',
            question_text='.question-title',
            answers=AnswerSelectors(correct='.correct', incorrect='.answer:not(.correct)'),
            explanation='.explanation',
            paragraph='.paragraph',
            image='img',
        ),
    }
)


def extract_domain(source_key: str | None) -> str | None:
    """Derive a registry key from a URL or bare host name.

    Lower-cases the host and removes a leading ``www.``.

    Args:
        source_key: URL (``https://www.example.com/quiz``) or host (``example.com``)

    Returns:
        Host name, or None if nothing usable could be parsed.

    """
    if not source_key or not source_key.strip():
        return None

    candidate = source_key.strip()
    if '//' not in candidate:
        candidate = f'//{candidate}'

    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return None

    if not host:
        return None
    if host.startswith('www.'):
        host = host[4:]
    return host


class SelectorResolver:
    """Chooses the selector configuration for one extraction call.

    Precedence is override, then the registry entry for the source host,
    then the default. Resolution never fails.

    Attributes:
        registry: Read-only mapping of host name to configuration
        default: Configuration used when nothing else applies

    """

    def __init__(
        self,
        registry: Mapping[str, SelectorConfig] | None = None,
        default: SelectorConfig = DEFAULT_CONFIG,
    ):
        """Initialize the resolver.

        Args:
            registry: Host name to configuration table. Defaults to SITE_CONFIGS.
            default: Fallback configuration. Defaults to DEFAULT_CONFIG.

        """
        if registry is None:
            registry = SITE_CONFIGS
        self.registry: Mapping[str, SelectorConfig] = MappingProxyType(
            {key.lower(): value for key, value in registry.items()}
        )
        self.default = default

    def resolve(self, override: SelectorConfig | None = None, source_key: str | None = None) -> SelectorConfig:
        """Return the configuration to apply.

        Args:
            override: Caller supplied configuration, returned as-is when given
            source_key: Originating address of the document

        Returns:
            The selected SelectorConfig.

        """
        if override is not None:
            return override

        domain = extract_domain(source_key)
        if domain:
            config = self.registry.get(domain)
            if config is not None:
                logfire.debug('Using registry selectors for {domain}', domain=domain)
                return config

        return self.default


_default_resolver = SelectorResolver()


def resolve_config(override: SelectorConfig | None = None, source_key: str | None = None) -> SelectorConfig:
    """Resolve against the built-in SITE_CONFIGS registry."""
    return _default_resolver.resolve(override, source_key)
