from urllib.parse import (
    parse_qs,
    urlparse,
)

from django.test import override_settings

from gridcol.http import (
    HttpFilter,
    build_sort_url,
    get_filter,
    get_filter_string,
    get_sort,
    parse_http_value,
    revert_sort,
)
from tests.helpers import req


def test_parse_http_value():
    assert parse_http_value('foo') == 'foo'
    assert parse_http_value('foo,bar') == ['foo', 'bar']
    assert parse_http_value('foo,,bar') == ['foo', 'bar']
    assert parse_http_value('foo,') == 'foo'
    assert parse_http_value(', ,') == []
    assert parse_http_value(['foo']) == ['foo']
    assert parse_http_value(None) is None


def test_scalar_filter():
    request = req('get', **{'filter[name]': 'Paranoid'})
    assert get_filter(request, 'name') == 'Paranoid'
    assert get_filter_string(request, 'name') == 'Paranoid'


def test_missing_filter():
    request = req('get')
    assert get_filter(request, 'name') is None
    assert get_filter(request, 'name', default='x') == 'x'
    assert get_filter_string(request, 'name') is None


def test_comma_separated_filter_is_a_list():
    request = req('get', **{'filter[genre]': 'metal,jazz'})
    assert get_filter(request, 'genre') == ['metal', 'jazz']
    assert get_filter_string(request, 'genre') == 'metal, jazz'

    request = req('get', **{'filter[tags]': 'a,'})
    assert get_filter(request, 'tags') == 'a'
    assert get_filter_string(request, 'tags') == 'a'


def test_list_filter():
    request = req('get', **{'filter[genre][]': ['metal', 'jazz']})
    assert get_filter(request, 'genre') == ['metal', 'jazz']


def test_range_filter():
    request = req('get', **{'filter[year][start]': '1970', 'filter[year][end]': '1979'})
    assert get_filter(request, 'year') == {'start': '1970', 'end': '1979'}
    assert get_filter_string(request, 'year') == '1970 - 1979'


def test_half_open_range_filter():
    request = req('get', **{'filter[released][start]': '2020-01-01', 'filter[released][end]': ''})
    assert get_filter(request, 'released') == {'start': '2020-01-01', 'end': ''}
    assert get_filter_string(request, 'released') == '2020-01-01 - '


def test_empty_filters_are_dropped():
    request = req('get', **{
        'filter[name]': '',
        'filter[tags]': ',',
        'filter[labels]': ' , ',
        'filter[genre][]': [''],
        'filter[year][start]': '',
        'filter[year][end]': '',
    })
    assert HttpFilter(request).filters == {}


def test_other_parameters_are_not_filters():
    request = req('get', **{'filter': 'foo', 'other[name]': 'bar', 'page': '2'})
    assert HttpFilter(request).filters == {}


@override_settings(GRIDCOL_FILTER_PARAMETER='f')
def test_filter_parameter_from_settings():
    request = req('get', **{'f[name]': 'foo', 'filter[name]': 'bar'})
    assert get_filter(request, 'name') == 'foo'


def test_http_filter_is_cached_on_request():
    request = req('get', **{'filter[name]': 'foo'})
    assert HttpFilter.from_request(request) is HttpFilter.from_request(request)


def test_no_request():
    http_filter = HttpFilter.from_request(None)
    assert http_filter.filters == {}
    assert http_filter.sorts == []
    assert http_filter.get_sort('name') is None


def test_get_sort():
    request = req('get', sort='name,-year')
    assert get_sort(request, 'name') == 'asc'
    assert get_sort(request, 'year') == 'desc'
    assert get_sort(request, 'genre') is None


def test_revert_sort():
    assert revert_sort(req('get'), 'name') == 'name'
    assert revert_sort(req('get'), 'name', default_desc=True) == '-name'
    assert revert_sort(req('get', sort='name'), 'name') == '-name'
    assert revert_sort(req('get', sort='-name'), 'name') == 'name'
    assert revert_sort(req('get', sort='-name'), 'name', default_desc=True) == 'name'
    assert revert_sort(req('get', sort='year'), 'name') == 'name'


def test_build_sort_url_keeps_other_parameters():
    request = req('get', url='/albums/', **{'page': '3', 'filter[name]': 'foo', 'sort': 'year'})
    url = build_sort_url(request, 'name')
    parsed = urlparse(url)
    assert parsed.path == '/albums/'
    assert parse_qs(parsed.query) == {'page': ['3'], 'filter[name]': ['foo'], 'sort': ['name']}


def test_build_sort_url_toggles():
    first = build_sort_url(req('get', url='/albums/', page='2'), 'name')
    assert parse_qs(urlparse(first).query) == {'page': ['2'], 'sort': ['name']}

    second = build_sort_url(req('get', url='/albums/', **parse_qs(urlparse(first).query)), 'name')
    assert parse_qs(urlparse(second).query) == {'page': ['2'], 'sort': ['-name']}

    third = build_sort_url(req('get', url='/albums/', **parse_qs(urlparse(second).query)), 'name')
    assert parse_qs(urlparse(third).query) == {'page': ['2'], 'sort': ['name']}


@override_settings(GRIDCOL_SORT_PARAMETER='order')
def test_sort_parameter_from_settings():
    request = req('get', order='name')
    assert get_sort(request, 'name') == 'asc'
    assert build_sort_url(request, 'name') == '/?order=-name'
