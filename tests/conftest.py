import logfire
import pytest

from quizcrawl.images import FetchedAsset, ImageResolver
from quizcrawl.models import AnswerSelectors, SelectorConfig

logfire.configure(send_to_logfire=False, console=False)


class FakeAssetFetcher:
    """Asset fetcher returning canned bytes or raising, recording every call."""

    def __init__(self, content: bytes = b'\x89PNG fake', content_type: str | None = 'image/png', error=None):
        self.content = content
        self.content_type = content_type
        self.error = error
        self.calls: list[tuple[str, float]] = []

    def fetch(self, url: str, timeout: float) -> FetchedAsset:
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return FetchedAsset(content=self.content, content_type=self.content_type)


@pytest.fixture
def fake_fetcher():
    return FakeAssetFetcher()


@pytest.fixture
def image_resolver(fake_fetcher):
    return ImageResolver(fake_fetcher, timeout=5.0)


@pytest.fixture
def quiz_html():
    return """
    <!DOCTYPE html>
    <html>
    <head><title>Practice Exam</title></head>
    <body>
        <div class="question">
            <div class="questionText"><script>x</script>What is 2+2?</div>
            <div class="answer correctAnswer">A. four</div>
            <div class="answer">B) five</div>
            Explanation: basic arithmetic
        </div>
        <div class="question">
            <div class="paragraph">Read the <b>passage</b> first.</div>
            <div class="questionText">Which of these are <i>prime</i>?</div>
            <div class="answer correctAnswer">A. two</div>
            <div class="answer correctAnswer">B. three</div>
            <div class="answer">C. four</div>
            <div class="answer">D. six</div>
            <div class="answer">5) nine</div>
            <div class="explanation">Primes have exactly <strong>two</strong> divisors.</div>
            <img src="/img/primes.png" alt="primes">
        </div>
    </body>
    </html>
    """


@pytest.fixture
def block_config():
    return SelectorConfig(
        container='.question-block',
        question_text='.question-title',
        answers=AnswerSelectors(correct='.correct', incorrect='.answer:not(.correct)'),
        explanation='.explanation',
        paragraph='.paragraph',
        image='img',
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""
    for item in items:
        file_path = str(item.path)
        if '/tests/integration/' in file_path:
            item.add_marker(pytest.mark.integration)
        elif '/tests/unit/' in file_path:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def make_fetcher():
    return FakeAssetFetcher
