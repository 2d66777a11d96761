import re

from bs4 import BeautifulSoup
from django.test import RequestFactory


def reindent(s, before=" ", after="    "):
    def reindent_line(line):
        m = re.match(r'^((' + re.escape(before) + r')*)(.*)', line)
        return after * (len(m.group(1)) // len(before)) + m.group(3)

    return "\n".join(reindent_line(line) for line in s.splitlines())


def sort_attributes(soup):
    for tag in soup.find_all(True):
        tag.attrs = dict(sorted(tag.attrs.items()))
    return soup


def verify_html(*, actual_html: str, find=None, expected_html: str = None):
    if expected_html is None:
        expected_html = '<html/>'

    expected_soup = sort_attributes(BeautifulSoup(expected_html, 'html.parser'))
    actual_soup = sort_attributes(BeautifulSoup(actual_html, 'html.parser'))

    if find is not None:
        actual_soup_orig = actual_soup
        if isinstance(find, dict):
            actual_soup = actual_soup.find(**find)
        else:
            actual_soup = actual_soup.find(find)

        if not actual_soup:  # pragma: no cover
            prettied_actual = reindent(actual_soup_orig.prettify()).strip()
            print(prettied_actual)
            assert False, f"Couldn't find selector {find} in actual output"

        if isinstance(find, dict):
            expected_soup = expected_soup.find(**find)
        else:
            expected_soup = expected_soup.find(find)

    prettified_actual = reindent(actual_soup.prettify()).strip()
    prettified_expected = reindent(expected_soup.prettify()).strip()
    if prettified_actual != prettified_expected:  # pragma: no cover
        print("Expected")
        print(prettified_expected)
        print("Actual")
        print(prettified_actual)

    assert prettified_actual == prettified_expected


def req(method, url='/', **data):
    return getattr(RequestFactory(HTTP_REFERER='/'), method.lower())(url, data=data)
