import io
import json

import pytest
from rich.console import Console

from quizcrawl.exceptions import FetchError
from quizcrawl.fetcher import FetchResult, PageFetcher
from quizcrawl.models import SelectorConfig
from quizcrawl.pipeline import THEME, ExtractionPipeline
from quizcrawl.storage import SelectorStorage


@pytest.fixture
def storage(tmp_path):
    return SelectorStorage(storage_dir=tmp_path / 'selectors', content_dir=tmp_path / 'output')


@pytest.fixture
def console():
    return Console(theme=THEME, file=io.StringIO(), width=120)


@pytest.fixture
def page_fetcher(mocker, quiz_html):
    fetcher = mocker.Mock(spec=PageFetcher)
    fetcher.fetch.side_effect = lambda url: FetchResult(url=url, html=quiz_html, status_code=200, fetch_time=0.1)
    return fetcher


@pytest.fixture
def pipeline(storage, page_fetcher, image_resolver, console):
    return ExtractionPipeline(storage=storage, fetcher=page_fetcher, image_resolver=image_resolver, console=console)


def test_process_url(pipeline, storage, fake_fetcher):
    url = 'https://hamexam.org/exam/technician'

    questions = pipeline.process_url(url)

    assert [question.id for question in questions] == ['1', '2']
    assert questions[1].image.startswith('data:image/png;base64,')
    assert fake_fetcher.calls[0][0] == 'https://hamexam.org/img/primes.png'

    with open(storage.get_content_filepath(url), encoding='utf-8') as f:
        data = json.load(f)
    assert data['count'] == 2
    assert data['questions'][0]['answers'] == [
        {'text': 'Four.', 'correct': True},
        {'text': 'Five.', 'correct': False},
    ]
    assert storage.load_questions(url) is not None


def test_process_url_fetch_failure(pipeline, page_fetcher, storage):
    page_fetcher.fetch.side_effect = FetchError('https://hamexam.org/down', 'Service Unavailable', status_code=503)

    assert pipeline.process_url('https://hamexam.org/down') is None
    assert storage.load_questions('https://hamexam.org/down') is None


def test_process_url_without_saving(pipeline, storage):
    url = 'https://hamexam.org/exam/general'

    assert len(pipeline.process_url(url, save=False)) == 2
    assert storage.load_questions(url) is None


def test_process_url_uses_stored_selectors(storage, page_fetcher, image_resolver, console):
    storage.save_config('hamexam.org', SelectorConfig(container='.questionText'))
    pipeline = ExtractionPipeline(storage=storage, fetcher=page_fetcher, image_resolver=image_resolver, console=console)

    questions = pipeline.process_url('https://hamexam.org/exam', save=False)

    assert [question.question_text for question in questions] == ['What is 2+2?', 'Which of these are <i>prime</i>?']
    assert 'registry entry for hamexam.org' in console.file.getvalue()


def test_process_file(pipeline, storage, tmp_path, quiz_html):
    path = tmp_path / 'exam1.html'
    path.write_text(quiz_html, encoding='utf-8')

    questions = pipeline.process_file(path, output_format='markdown')

    assert len(questions) == 2
    assert questions[1].image is not None
    markdown = (tmp_path / 'output' / 'local' / 'exam1.md').read_text(encoding='utf-8')
    assert '- **A.** Four. ✓' in markdown


def test_process_file_with_custom_config(pipeline, tmp_path):
    path = tmp_path / 'blocks.html'
    path.write_text(
        '<div class="item"><p class="q">Custom?</p><span class="ok">yes</span><span class="no">no</span></div>'
    )
    config = SelectorConfig.model_validate(
        {'container': '.item', 'questionText': '.q', 'answers': {'correct': '.ok', 'incorrect': '.no'}}
    )

    [question] = pipeline.process_file(path, config, save=False)

    assert question.question_text == 'Custom?'
    assert [(answer.label, answer.text, answer.is_correct) for answer in question.answers] == [
        ('A', 'Yes.', True),
        ('B', 'No.', False),
    ]
    assert 'custom config' in pipeline.console.file.getvalue()


def test_process_sources(pipeline, page_fetcher, tmp_path, quiz_html):
    page = tmp_path / 'page.html'
    page.write_text(quiz_html)

    def fetch(url):
        if 'broken' in url:
            raise FetchError(url, 'boom')
        return FetchResult(url=url, html=quiz_html, status_code=200)

    page_fetcher.fetch.side_effect = fetch

    results = pipeline.process_sources(
        ['https://hamexam.org/ok', 'https://hamexam.org/broken', str(page), str(tmp_path / 'missing.html')],
        save=False,
    )

    assert results['successful'] == ['https://hamexam.org/ok', str(page)]
    assert results['failed'] == ['https://hamexam.org/broken', str(tmp_path / 'missing.html')]


def test_process_sources_invalid_container(pipeline, tmp_path, quiz_html):
    page = tmp_path / 'page.html'
    page.write_text(quiz_html)

    results = pipeline.process_sources([str(page)], SelectorConfig(container='div[['), save=False)

    assert results['failed'] == [str(page)]


def test_show_questions_and_summary(pipeline, storage):
    storage.save_config('quiz.test', SelectorConfig(container='.quiz-item'))
    pipeline = ExtractionPipeline(
        storage=storage,
        fetcher=pipeline.fetcher,
        image_resolver=pipeline.extractor.image_resolver,
        console=pipeline.console,
    )

    pipeline.show_questions(pipeline.process_url('https://hamexam.org/exam', save=False))
    pipeline.show_summary()

    output = pipeline.console.file.getvalue()
    assert 'Extracted Questions' in output
    assert 'quiz.test' in output
    assert 'stored' in output
    assert 'Total domains: 3' in output


def test_redirected_page_resolves_images_against_final_address(pipeline, page_fetcher, fake_fetcher, quiz_html):
    page_fetcher.fetch.side_effect = lambda url: FetchResult(
        url='https://mirror.hamexam.net/exam/1', html=quiz_html, status_code=200
    )

    questions = pipeline.process_url('https://hamexam.org/exam/1', save=False)

    assert questions[1].image.startswith('data:image/png;base64,')
    assert fake_fetcher.calls[0][0] == 'https://mirror.hamexam.net/img/primes.png'


def test_close_releases_sessions_it_created(storage, console, mocker):
    pipeline = ExtractionPipeline(storage=storage, console=console)
    mock_page_close = mocker.patch.object(pipeline.fetcher, 'close')
    mock_image_close = mocker.patch.object(pipeline.extractor.image_resolver.fetcher, 'close')

    with pipeline:
        pass

    mock_page_close.assert_called_once()
    mock_image_close.assert_called_once()


def test_close_leaves_injected_collaborators_open(pipeline, page_fetcher, mocker):
    mock_resolver_close = mocker.patch.object(pipeline.extractor.image_resolver, 'close')

    pipeline.close()

    page_fetcher.close.assert_not_called()
    mock_resolver_close.assert_not_called()
