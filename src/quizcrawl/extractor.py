"""Extracts question records from HTML using a selector configuration."""

import re
from collections.abc import Callable, Iterable, Mapping

import logfire
from bs4 import Tag

from quizcrawl.config import SelectorResolver
from quizcrawl.dom import check_selector, inner_html, parse_document, select_all
from quizcrawl.exceptions import InvalidSelectorError
from quizcrawl.images import ImageResolver
from quizcrawl.models import Answer, Question, SelectorConfig
from quizcrawl.normalizer import answer_label, normalize_answer
from quizcrawl.sanitizer import sanitize

# "Explanation:" followed by everything up to the end of the block
EXPLANATION_MARKER = re.compile(r'Explanation:(.*)$', re.IGNORECASE | re.DOTALL)

# A strategy looks at one container and returns a value, or None to pass
Strategy = Callable[[Tag], str | None]


def first_result(strategies: Iterable[Strategy], node: Tag) -> str | None:
    """Run strategies in order and return the first value that is not None."""
    for strategy in strategies:
        value = strategy(node)
        if value is not None:
            return value
    return None


def from_selector(selector: str | None) -> Strategy:
    """Strategy: sanitized inner content of the first match of ``selector``."""

    def strategy(node: Tag) -> str | None:
        if not selector:
            return None
        match = node.select_one(selector)
        if match is None:
            return None
        return sanitize(inner_html(match))

    return strategy


def own_content(node: Tag) -> str:
    """Strategy: sanitized inner content of the container itself."""
    return sanitize(inner_html(node))


def explanation_marker(node: Tag) -> str | None:
    """Strategy: text after an inline ``Explanation:`` marker, if present."""
    match = EXPLANATION_MARKER.search(node.decode_contents())
    if not match:
        return None
    return sanitize(match.group(1).strip())


class QuestionExtractor:
    """Turns a document into an ordered list of Question records.

    The extractor keeps no per-call state, so one instance can serve
    concurrent calls on independent documents.

    Attributes:
        image_resolver: Collaborator used when a config has an image selector

    """

    def __init__(self, image_resolver: ImageResolver | None = None):
        """Initialize the extractor.

        Args:
            image_resolver: Image collaborator. Defaults to an ImageResolver
                backed by HTTP downloads.

        """
        self.image_resolver = image_resolver or ImageResolver()

    def extract(
        self,
        document: str | bytes | Tag,
        config: SelectorConfig,
        base_url: str | None = None,
    ) -> list[Question]:
        """Extract every question block in document order.

        Args:
            document: HTML text/bytes or a parsed tree
            config: Selectors to apply
            base_url: Address of the page, used for relative image sources

        Returns:
            One Question per matched container that could be extracted.

        Raises:
            DocumentParseError: If the document cannot be parsed
            InvalidSelectorError: If the container selector does not compile

        """
        soup = parse_document(document)

        with logfire.span('extract_questions', container=config.container, base_url=base_url):
            containers = select_all(soup, config.container, 'container')
            config = self._drop_invalid_selectors(config)

            questions: list[Question] = []
            for index, container in enumerate(containers, 1):
                try:
                    questions.append(self._extract_question(index, container, config, base_url))
                except Exception as e:
                    logfire.error('Skipping question block', index=index, error=str(e))

            logfire.info(
                'Extracted {count} questions',
                count=len(questions),
                containers=len(containers),
            )
            return questions

    def _extract_question(self, index: int, container: Tag, config: SelectorConfig, base_url: str | None) -> Question:
        """Build the record for one container."""
        question_text = first_result((from_selector(config.question_text), own_content), container)

        correct_nodes = container.select(config.answers.correct)
        incorrect_nodes = container.select(config.answers.incorrect)

        # Labels follow match positions; incorrect answers continue after every correct match
        answers: list[Answer] = []
        matches = [(True, node) for node in correct_nodes] + [(False, node) for node in incorrect_nodes]
        for position, (is_correct, node) in enumerate(matches):
            text = normalize_answer(sanitize(inner_html(node)))
            if text:
                answers.append(Answer(label=answer_label(position), text=text, is_correct=is_correct))

        explanation = first_result((from_selector(config.explanation), explanation_marker), container)
        paragraph = first_result((from_selector(config.paragraph),), container)

        image = None
        if config.image:
            image = self.image_resolver.resolve(container, config.image, base_url)

        return Question(
            id=str(index),
            question_number=f'Question {index}',
            question_text=question_text or '',
            answers=tuple(answers),
            explanation=explanation or None,
            paragraph=paragraph or None,
            image=image,
            has_multiple_correct=len(correct_nodes) > 1,
        )

    def _drop_invalid_selectors(self, config: SelectorConfig) -> SelectorConfig:
        """Return a copy of ``config`` with uncompilable optional selectors unset.

        Broken answer selectors are replaced by one that matches nothing.
        """
        updates: dict = {}
        for field_name in ('question_text', 'explanation', 'paragraph', 'image'):
            selector = getattr(config, field_name)
            if selector and not self._selector_ok(selector, field_name):
                updates[field_name] = None

        answer_updates = {}
        for field_name in ('correct', 'incorrect'):
            selector = getattr(config.answers, field_name)
            if not self._selector_ok(selector, f'answers.{field_name}'):
                answer_updates[field_name] = ':not(*)'
        if answer_updates:
            updates['answers'] = config.answers.model_copy(update=answer_updates)

        return config.model_copy(update=updates) if updates else config

    @staticmethod
    def _selector_ok(selector: str, field_name: str) -> bool:
        try:
            check_selector(selector, field_name)
        except InvalidSelectorError as e:
            logfire.warn('Ignoring invalid selector', field=field_name, selector=selector, error=e.reason)
            return False
        return True


def extract_questions(
    html: str | bytes | Tag,
    url: str | None = None,
    config: SelectorConfig | None = None,
    registry: Mapping[str, SelectorConfig] | None = None,
    image_resolver: ImageResolver | None = None,
) -> list[Question]:
    """Resolve the selector config for ``url`` and extract questions from ``html``.

    Args:
        html: Document to extract from
        url: Originating address, used for the registry lookup and images
        config: Explicit configuration overriding the registry
        registry: Host name to configuration table. Defaults to SITE_CONFIGS.
        image_resolver: Image collaborator passed to the extractor. When omitted,
            an HTTP-backed resolver is created and closed within the call.

    Returns:
        Ordered list of questions.

    """
    resolved = SelectorResolver(registry).resolve(config, url)
    if image_resolver is not None:
        return QuestionExtractor(image_resolver).extract(html, resolved, base_url=url)

    with ImageResolver() as owned_resolver:
        return QuestionExtractor(owned_resolver).extract(html, resolved, base_url=url)
