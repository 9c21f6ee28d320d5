import pytest

from quizcrawl.normalizer import answer_label, normalize_answer, strip_enumerator, text_content


@pytest.mark.parametrize(
    ('fragment', 'expected'),
    [
        ('A. answer text', 'Answer text.'),
        ('1) another one', 'Another one.'),
        ('B) five', 'Five.'),
        ('b) lowercase letter', 'Lowercase letter.'),
        ('C answer without dot', 'Answer without dot.'),
        ('A B C all of the above', 'All of the above.'),
        ('12. twelfth option', 'Twelfth option.'),
        ('1 another one', 'Another one.'),
        ('7  spaced out', 'Spaced out.'),
        ('Already punctuated.', 'Already punctuated.'),
        ('trailing space   ', 'Trailing space.'),
    ],
)
def test_normalize_answer(fragment, expected):
    assert normalize_answer(fragment) == expected


@pytest.mark.parametrize(
    ('fragment', 'expected'),
    [
        ('Alpha particle', 'Alpha particle.'),
        ('Because it rains', 'Because it rains.'),
        ('3.14 is pi', '3.14 is pi.'),
        ('4.', '4.'),
    ],
)
def test_words_and_numbers_are_not_mistaken_for_enumerators(fragment, expected):
    assert normalize_answer(fragment) == expected


@pytest.mark.parametrize('fragment', ['', '   ', None, '<br/>'])
def test_empty_answers_normalize_to_empty_string(fragment):
    assert normalize_answer(fragment) == ''


def test_rules_look_through_inline_tags():
    assert normalize_answer('<b>a. four</b>') == '<b>Four</b>.'


def test_period_check_ignores_trailing_tags():
    assert normalize_answer('<i>done.</i>') == '<i>Done.</i>'


def test_only_first_enumerator_is_stripped():
    assert strip_enumerator('A. B. text') == 'B. text'


def test_text_content_unescapes_entities():
    assert text_content('<b>a &lt; b</b> ') == 'a < b'


@pytest.mark.parametrize(
    ('index', 'label'),
    [(0, 'A'), (1, 'B'), (4, 'E'), (25, 'Z'), (26, 'AA'), (27, 'AB'), (52, 'BA')],
)
def test_answer_label(index, label):
    assert answer_label(index) == label


def test_answer_label_rejects_negative_index():
    with pytest.raises(ValueError):
        answer_label(-1)
