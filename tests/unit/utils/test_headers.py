from quizcrawl.utils.headers import IMAGE_ACCEPT, PAGE_ACCEPT, USER_AGENTS, build_headers


def test_build_headers_defaults():
    headers = build_headers()

    assert headers['Accept'] == PAGE_ACCEPT
    assert headers['User-Agent'] in USER_AGENTS
    assert 'Referer' not in headers


def test_build_headers_for_images():
    headers = build_headers(accept=IMAGE_ACCEPT, referer='https://hamexam.org/', user_agent='quizcrawl-test')

    assert headers['Accept'] == IMAGE_ACCEPT
    assert headers['Referer'] == 'https://hamexam.org/'
    assert headers['User-Agent'] == 'quizcrawl-test'
