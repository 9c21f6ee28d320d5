"""
quizcrawl - Selector-driven quiz question extraction
=====================================================

Extract quiz questions from semi-structured HTML using CSS selectors,
then normalize them into clean, consistent records.

Main Components:
    - SelectorResolver: Picks the selector config for a page
    - QuestionExtractor: Extracts Question records from a document
    - sanitize / normalize_answer: Markup and answer clean-up
    - ImageResolver: Embeds question illustrations as data URIs
    - ExtractionPipeline: Fetch, extract and save in one call

Example:
    >>> from quizcrawl import extract_questions
    >>> questions = extract_questions(html, url='https://hamexam.org/exam/1')
    >>> questions[0].answers[0].label
    'A'
"""

__version__ = '0.1.0'

from quizcrawl.config import DEFAULT_CONFIG, SITE_CONFIGS, SelectorResolver, resolve_config
from quizcrawl.exceptions import (
    AssetFetchError,
    ConfigLoadError,
    DocumentParseError,
    FetchError,
    InvalidSelectorError,
    QuizCrawlError,
)
from quizcrawl.extractor import QuestionExtractor, extract_questions
from quizcrawl.fetcher import FetchResult, PageFetcher
from quizcrawl.images import AssetFetcher, FetchedAsset, HTTPAssetFetcher, ImageResolver
from quizcrawl.models import Answer, AnswerSelectors, Question, SelectorConfig
from quizcrawl.normalizer import answer_label, normalize_answer
from quizcrawl.pipeline import ExtractionPipeline
from quizcrawl.sanitizer import ALLOWED_TAGS, sanitize
from quizcrawl.storage import SelectorStorage, load_config_file

__all__ = [
    # Core components
    'SelectorResolver',
    'QuestionExtractor',
    'ImageResolver',
    'ExtractionPipeline',
    'SelectorStorage',
    'extract_questions',
    'resolve_config',
    'sanitize',
    'normalize_answer',
    'answer_label',
    'load_config_file',
    # Collaborators
    'AssetFetcher',
    'FetchedAsset',
    'HTTPAssetFetcher',
    'FetchResult',
    'PageFetcher',
    # Models
    'Answer',
    'AnswerSelectors',
    'Question',
    'SelectorConfig',
    # Defaults
    'ALLOWED_TAGS',
    'DEFAULT_CONFIG',
    'SITE_CONFIGS',
    # Exceptions
    'QuizCrawlError',
    'AssetFetchError',
    'ConfigLoadError',
    'DocumentParseError',
    'FetchError',
    'InvalidSelectorError',
]
