import re

from django.conf import settings
from tri_struct import Struct

from gridcol.base import (
    items,
    keys,
    log,
)

ASCENDING = 'asc'
DESCENDING = 'desc'

_bracket_parameter = re.compile(r'^(?P<parameter>[^\[\]]+)\[(?P<column>[^\[\]]+)\](?:\[(?P<key>[^\[\]]*)\])?$')


def filter_parameter():
    return getattr(settings, 'GRIDCOL_FILTER_PARAMETER', 'filter')


def sort_parameter():
    return getattr(settings, 'GRIDCOL_SORT_PARAMETER', 'sort')


def parse_http_value(value):
    if isinstance(value, str) and ',' in value:
        parts = [x for x in value.split(',') if x.strip()]
        if len(parts) == 1:
            return parts[0]
        return parts
    return value


class HttpFilter:
    """
    Filter and sort state of one request.

    Filters are read from php style bracket parameters:

    * `filter[name]=foo` gives `'foo'` (and `filter[name]=foo,bar` gives `['foo', 'bar']`)
    * `filter[name][]=foo&filter[name][]=bar` gives `['foo', 'bar']`
    * `filter[year][start]=1970&filter[year][end]=1979` gives `{'start': '1970', 'end': '1979'}`

    Sorting is read from `sort=name,-year`, where `-` means descending.
    """

    def __init__(self, request):
        self.request = request
        params = request.GET if request is not None else {}
        self.filters = self.parse_filters(params)
        self.sorts = self.parse_sorts(params.get(sort_parameter()))

    @classmethod
    def from_request(cls, request):
        if request is None:
            return cls(None)

        http_filter = getattr(request, 'gridcol_http_filter', None)
        if http_filter is None:
            http_filter = cls(request)
            request.gridcol_http_filter = http_filter
        return http_filter

    @staticmethod
    def parse_filters(params):
        parameter = filter_parameter()
        filters = Struct()
        for param in keys(params):
            m = _bracket_parameter.match(param)
            if m is None or m.group('parameter') != parameter:
                continue

            column = m.group('column')
            key = m.group('key')
            values = params.getlist(param) if hasattr(params, 'getlist') else [params[param]]

            if key is None:
                value = values[-1] if len(values) == 1 else values
                value = parse_http_value(value)
                if value in ('', [], None):
                    log.debug('Dropping empty filter parameter %s', param)
                    continue
                filters[column] = value
            elif key == '':
                values = [x for x in values if x != '']
                if values:
                    filters[column] = values
            else:
                existing = dict.get(filters, column)
                if not isinstance(existing, dict):
                    existing = Struct()
                    filters[column] = existing
                existing[key] = values[-1]

        for column, value in list(items(filters)):
            if isinstance(value, dict) and all(v == '' for v in value.values()):
                log.debug('Dropping empty filter %s', column)
                del filters[column]

        return filters

    @staticmethod
    def parse_sorts(value):
        if not value:
            return []
        return [x.strip() for x in value.split(',') if x.strip()]

    def get(self, column, default=None):
        return dict.get(self.filters, column, default)

    def get_string(self, column):
        value = self.get(column)

        if isinstance(value, dict):
            if 'start' in value or 'end' in value:
                return f'{_bound(value.get("start"))} - {_bound(value.get("end"))}'
            return ', '.join(str(x) for x in value.values())

        if isinstance(value, (list, tuple)):
            return ', '.join(str(x) for x in value)

        return value

    def get_sort(self, column):
        if column in self.sorts:
            return ASCENDING
        if f'-{column}' in self.sorts:
            return DESCENDING
        return None

    def revert_sort(self, column, default_desc=False):
        current = self.get_sort(column)
        if current is None:
            return f'-{column}' if default_desc else column
        return f'-{column}' if current == ASCENDING else column


def _bound(value):
    return '' if value is None else value


def get_filter(request, column, default=None):
    return HttpFilter.from_request(request).get(column, default)


def get_filter_string(request, column):
    return HttpFilter.from_request(request).get_string(column)


def get_sort(request, column):
    return HttpFilter.from_request(request).get_sort(column)


def revert_sort(request, column, default_desc=False):
    return HttpFilter.from_request(request).revert_sort(column, default_desc=default_desc)


def build_sort_url(request, column, default_desc=False):
    """
    Url of the current page with the `sort` parameter replaced so that the
    column sorts the other way. All other parameters are kept as they are.
    """
    params = request.GET.copy()
    params[sort_parameter()] = revert_sort(request, column, default_desc=default_desc)
    return f'{request.path}?{params.urlencode()}'
