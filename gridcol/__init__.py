__version__ = '1.0.0'

from django.core.exceptions import ImproperlyConfigured

from gridcol.cell import Cell
from gridcol.filters import FilterField
from gridcol.fragment import Fragment
from gridcol.http import (
    HttpFilter,
    get_filter,
    get_filter_string,
    get_sort,
)
from gridcol.repository import Repository
from gridcol.td import (
    TD,
    format_filter_value,
)

__all__ = [
    'Cell',
    'FilterField',
    'Fragment',
    'HttpFilter',
    'Repository',
    'TD',
    'format_filter_value',
    'get_filter',
    'get_filter_string',
    'get_sort',
]


try:
    from django.conf import settings

    if 'gridcol' not in settings.INSTALLED_APPS:
        raise Exception("You must add 'gridcol' to INSTALLED_APPS")
except ImproperlyConfigured:
    pass
