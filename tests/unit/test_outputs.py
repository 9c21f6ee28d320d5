import json

import pytest

from quizcrawl.models import Answer, Question
from quizcrawl.outputs import OUTPUT_FORMATS, format_content, load_json, save_formatted_content
from quizcrawl.outputs.json_output import question_from_export
from quizcrawl.outputs.markdown_output import format_markdown


@pytest.fixture
def questions():
    return [
        Question(
            id='1',
            question_number='Question 1',
            question_text='Which are <i>prime</i>?',
            answers=(
                Answer(label='A', text='Two.', is_correct=True),
                Answer(label='B', text='Three.', is_correct=True),
                Answer(label='C', text='Four.', is_correct=False),
            ),
            paragraph='Read first.',
            image='data:image/png;base64,AAAA',
            has_multiple_correct=True,
        ),
        Question(id='2', question_number='Question 2', question_text='Open ended'),
    ]


def test_format_json(questions):
    data = format_content('https://hamexam.org/exam', 'hamexam.org', questions, 'json')

    assert data['url'] == 'https://hamexam.org/exam'
    assert data['domain'] == 'hamexam.org'
    assert data['count'] == 2
    assert 'extracted_at' in data
    assert data['questions'][0]['answers'][1] == {'text': 'Three.', 'correct': True}
    assert data['questions'][1]['paragraph'] == {'text': None}


def test_format_markdown(questions):
    content = format_markdown('https://hamexam.org/exam', 'hamexam.org', questions)

    assert content.startswith('# Questions from hamexam.org')
    assert '**Source:** https://hamexam.org/exam' in content
    assert '## Question 1' in content
    assert '> Read first.' in content
    assert '![Question 1](data:image/png;base64,AAAA)' in content
    assert '- **B.** Three. ✓' in content
    assert '- **C.** Four.\n' in content
    assert '**Explanation:**' not in content


def test_format_content_dispatches_markdown(questions):
    assert isinstance(format_content(None, None, questions, 'markdown'), str)


def test_save_unknown_format(tmp_path, questions):
    with pytest.raises(ValueError, match='Unknown output format'):
        save_formatted_content(str(tmp_path / 'out.csv'), None, None, questions, 'csv')


@pytest.mark.parametrize('output_format', OUTPUT_FORMATS)
def test_save_creates_parent_directories(tmp_path, questions, output_format):
    filepath = str(tmp_path / 'nested' / 'dir' / 'out')

    assert save_formatted_content(filepath, None, None, questions, output_format) == filepath
    assert (tmp_path / 'nested' / 'dir' / 'out').exists()


def test_load_json_round_trip(tmp_path, questions):
    filepath = str(tmp_path / 'questions.json')
    save_formatted_content(filepath, None, None, questions)

    assert load_json(filepath) == questions


def test_load_json_accepts_bare_list(tmp_path):
    filepath = tmp_path / 'bare.json'
    filepath.write_text(json.dumps([{'text': 'Q?', 'answers': [{'text': 'Yes.', 'correct': True}]}]))

    [question] = load_json(str(filepath))

    assert question.id == '1'
    assert question.answers[0].label == 'A'
    assert question.has_multiple_correct is False


def test_question_from_export_tolerates_missing_fields():
    question = question_from_export(3, {'text': 'Bare', 'paragraph': 'plain string'})

    assert question.question_number == 'Question 3'
    assert question.answers == ()
    assert question.paragraph == 'plain string'
    assert question.explanation is None
