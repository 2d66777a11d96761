import copy
from datetime import (
    date,
    datetime,
    time,
)
from typing import (
    Any,
    Callable,
    Dict,
    Optional,
    Union,
)

from django.conf import settings
from django.utils import timezone
from django.utils.formats import date_format
from django.utils.translation import gettext_lazy
from tri_declarative import (
    Refinable,
    dispatch,
    evaluate_strict,
)

from gridcol._web_compat import (
    force_str,
    slugify,
)
from gridcol.base import (
    items,
    log,
)
from gridcol.cell import Cell
from gridcol.filters import (
    FilterField,
    normalize_options,
)
from gridcol.fragment import Fragment
from gridcol.http import (
    HttpFilter,
    build_sort_url,
)


def filter_form():
    return getattr(settings, 'GRIDCOL_FILTER_FORM', 'filters')


def assert_colspan(colspan):
    assert isinstance(colspan, int) and not isinstance(colspan, bool) and colspan > 0, f'colspan must be a positive integer, got {colspan!r}'


def yes_no_formatter(value, **_):
    return gettext_lazy('Yes') if value else gettext_lazy('No')


def list_formatter(value, **_):
    return ', '.join(force_str(x) for x in value)


def datetime_formatter(value, **_):
    dt = timezone.localtime(value) if timezone.is_aware(value) else value
    return date_format(dt, format='DATETIME_FORMAT')


def date_formatter(value, **_):
    return date_format(value, format='DATE_FORMAT')


def time_formatter(value, **_):
    return date_format(value, format='TIME_FORMAT')


# datetime before date, datetime is a subclass of date
_cell_formatters = {
    bool: yes_no_formatter,
    tuple: list_formatter,
    list: list_formatter,
    set: list_formatter,
    datetime: datetime_formatter,
    date: date_formatter,
    time: time_formatter,
}


def register_cell_formatter(type_or_class, formatter):
    """
    Register a default formatter for a type. A formatter is a function that takes the keyword arguments `column`, `row` and `value`.
    """
    _cell_formatters[type_or_class] = formatter


def default_cell_formatter(column, row, value, **_):
    for type_, formatter in items(_cell_formatters):
        if isinstance(value, type_):
            value = formatter(column=column, row=row, value=value)
            break

    if value is None:
        return ''

    return value


def format_filter_value(value, options=None, formatter=None, **kwargs):
    """
    Human readable description of an active filter.

    :param value: the raw filter value, a string, a list or a dict with `start`/`end`
    :param options: dict of value to label, used to show labels instead of raw values for lists
    :param formatter: callable that receives `value` (and whatever else is passed in `kwargs`) and replaces the default formatting
    """
    if formatter is not None:
        return evaluate_strict(formatter, value=value, **kwargs)

    if isinstance(value, dict):
        if 'start' in value or 'end' in value:
            start = value.get('start')
            end = value.get('end')
            return f'{"" if start is None else start} - {"" if end is None else end}'
        value = list(value.values())

    if isinstance(value, (list, tuple)):
        if options:
            labels = {force_str(k): v for k, v in items(options)}
            value = [labels.get(force_str(x), x) for x in value]
        return ', '.join(force_str(x) for x in value)

    return value


class TD(Cell):
    """
    A column of an admin table: the header with title, sorting and filtering, and the cell for each row.

    .. code-block:: python

        columns = [
            TD('name').set_sort().set_filter(TD.FILTER_TEXT),
            TD('year').set_filter(TD.FILTER_NUMBER_RANGE).align_right().set_width(100),
            TD('genre').set_filter(TD.FILTER_SELECT, {'rock': 'Rock', 'jazz': 'Jazz'}),
            TD('artist.name', 'Artist').set_render(lambda row, **_: row.artist.name.upper()),
        ]

    Everything can be passed to the constructor instead, `TD('name', sortable=True, filter=TD.FILTER_TEXT)`.

    Bind the column to the request before building anything:

    .. code-block:: python

        column = column.bind(request=request)
        column.build_th()
        column.build_td(row)
        column.build_item_menu()
    """

    ALIGN_LEFT = 'start'
    ALIGN_CENTER = 'center'
    ALIGN_RIGHT = 'end'

    FILTER_TEXT = 'text'
    FILTER_NUMERIC = 'number'
    FILTER_DATE = 'date'
    FILTER_DATE_RANGE = 'dateRange'
    FILTER_NUMBER_RANGE = 'numberRange'
    FILTER_SELECT = 'select'

    width: Union[str, int, None] = Refinable()
    align: str = Refinable()
    sortable: bool = Refinable()
    sort_default_desc: bool = Refinable()
    colspan: int = Refinable()
    allow_user_hidden: bool = Refinable()
    default_hidden: bool = Refinable()
    filter: Union[str, FilterField, None] = Refinable()
    filter_options: Dict[Any, Any] = Refinable()
    filter_value: Optional[Callable] = Refinable()
    header_template: str = Refinable()
    cell_template: str = Refinable()
    item_menu_template: str = Refinable()

    @dispatch(
        align=ALIGN_LEFT,
        sortable=False,
        sort_default_desc=False,
        colspan=1,
        allow_user_hidden=True,
        default_hidden=False,
        header_template='gridcol/th.html',
        cell_template='gridcol/td.html',
        item_menu_template='gridcol/selected_td.html',
    )
    def __init__(self, name='', title=None, **kwargs):
        """
        :param width: width of the column, a number is taken as pixels, a string is used as is (`'20%'`)
        :param align: one of `TD.ALIGN_LEFT`, `TD.ALIGN_CENTER` and `TD.ALIGN_RIGHT`
        :param sortable: set this to `True` to get a sort toggle in the header
        :param sort_default_desc: set this to `True` to make the sort link sort descending first
        :param colspan: number of columns a cell spans
        :param allow_user_hidden: set this to `False` to not let the user hide the column
        :param default_hidden: set this to `True` to hide the column until the user shows it
        :param filter: a `TD.FILTER_*` kind, an input type string or a `FilterField`
        :param filter_options: dict of value to label for select filters
        :param filter_value: callable that receives `value`, `column` and `request` and returns the text describing the active filter.
            Take `**_` for the arguments you don't use: `lambda value, **_: ...`
        """
        super(TD, self).__init__(name, title, **kwargs)
        assert_colspan(self.colspan)
        self.filter_options = normalize_options(self.filter_options)
        self.is_sorting = False
        self.sort_direction = None

    def set_width(self, width):
        self.width = width
        return self

    def set_filter_options(self, options):
        self.filter_options = normalize_options(options)
        return self

    def set_filter_value(self, formatter):
        """
        Replace the text describing the active filter.

        The formatter is called with the keyword arguments `value`, `column` and `request`, so it must take `**_`
        for the ones it doesn't use: `lambda value, **_: value.upper()`.
        """
        self.filter_value = formatter
        return self

    def set_filter(self, kind=FILTER_TEXT, options=None):
        """
        :param kind: a `TD.FILTER_*` kind, an input type string or a `FilterField`
        :param options: dict of value to label for select filters, or a callable to format the filter description.
            The callable gets the keyword arguments `value`, `column` and `request` and must accept `**_`, see `set_filter_value`.
        """
        if callable(options):
            self.set_filter_value(options)
        elif options is not None:
            self.set_filter_options(options)

        self.filter = kind
        return self

    def set_sort(self, sortable=True):
        self.sortable = sortable
        return self

    def set_align(self, align):
        self.align = align
        return self

    def align_left(self):
        return self.set_align(self.ALIGN_LEFT)

    def align_center(self):
        return self.set_align(self.ALIGN_CENTER)

    def align_right(self):
        return self.set_align(self.ALIGN_RIGHT)

    def set_colspan(self, colspan):
        assert_colspan(colspan)
        self.colspan = colspan
        return self

    def cant_hide(self, hidden=False):
        """
        Prevents the user from hiding the column in the interface.
        """
        self.allow_user_hidden = hidden
        return self

    def set_default_hidden(self, hidden=True):
        self.default_hidden = hidden
        return self

    def is_allow_user_hidden(self):
        return self.allow_user_hidden

    @staticmethod
    def is_show_visible_columns(columns):
        """
        `True` if any of the columns can be hidden by the user, i.e. if there should be a menu to show/hide columns at all.
        """
        return any(column.is_allow_user_hidden() for column in columns)

    @property
    def slug(self):
        return slugify(force_str(self.name).replace('_', '-'))

    @property
    def width_css(self):
        if self.width is None or self.width == '':
            return None
        if isinstance(self.width, (int, float)) or str(self.width).isdigit():
            return f'{self.width}px'
        return self.width

    def bind(self, *, request):
        result = super(TD, self).bind(request=request)
        if result.sortable and request is not None:
            direction = HttpFilter.from_request(request).get_sort(result.column)
            result.is_sorting = direction is not None
            result.sort_direction = direction
        return result

    def detect_constant_filter(self, kind: str) -> FilterField:
        if kind == self.FILTER_DATE_RANGE:
            return FilterField.date_range()
        elif kind == self.FILTER_NUMBER_RANGE:
            return FilterField.number_range()
        elif kind == self.FILTER_SELECT:
            return FilterField.select(options=self.filter_options, multiple=True)
        elif kind == self.FILTER_DATE:
            return FilterField.date_timer(inline=True)

        if kind not in (self.FILTER_TEXT, self.FILTER_NUMERIC):
            log.debug('Column %s has filter %r, falling back to an input with that type', self.column, kind)
        return FilterField.input(input_type=kind)

    def build_filter(self) -> Optional[FilterField]:
        request = self.get_request()
        kind = self.filter

        if kind is None:
            return None

        if isinstance(kind, str):
            field = self.detect_constant_filter(kind)
        else:
            field = copy.copy(kind)

        http_filter = HttpFilter.from_request(request)
        value = http_filter.get(self.column) if field.is_complex else http_filter.get_string(self.column)

        return (
            field.set_name(f'filter[{self.column}]')
            .set_placeholder(gettext_lazy('Filter'))
            .set_form(filter_form())
            .set_value(value)
            .set_autofocus()
        )

    def build_filter_string(self) -> Optional[str]:
        request = self.get_request()
        return format_filter_value(
            HttpFilter.from_request(request).get(self.column),
            options=self.filter_options,
            formatter=self.filter_value,
            column=self,
            request=request,
        )

    def build_sort_url(self) -> str:
        return build_sort_url(self.get_request(), self.column, default_desc=self.sort_default_desc)

    def build_th(self) -> Optional[Fragment]:
        """
        Builds the column heading.
        """
        request = self.get_request()
        if not self.include:
            return None

        return Fragment(
            self.header_template,
            dict(
                width=self.width,
                width_css=self.width_css,
                align=self.align,
                sort=self.sortable,
                sort_url=self.build_sort_url() if self.sortable and request is not None else None,
                is_sorting=self.is_sorting,
                sort_direction=self.sort_direction,
                column=self.column,
                title=self.title,
                filter=self.build_filter(),
                filter_string=self.build_filter_string(),
                slug=self.slug,
                popover=self.popover,
            ),
            request=request,
        )

    def build_td(self, row, loop=None) -> Optional[Fragment]:
        """
        Builds the cell of this column for `row`.

        :param row: the record, anything with `get_content(name)`, a mapping or an object
        :param loop: information about the iteration over the rows, passed on to the `render` callback
        """
        request = self.get_request()
        if not self.include:
            return None

        if self.render is not None:
            value = self.handler(row, loop)
        else:
            value = default_cell_formatter(column=self, row=row, value=self.get_content(row))

        return Fragment(
            self.cell_template,
            dict(
                align=self.align,
                value=value,
                render=self.render is not None,
                slug=self.slug,
                width=self.width,
                width_css=self.width_css,
                colspan=self.colspan,
            ),
            request=request,
        )

    def build_item_menu(self) -> Optional[Fragment]:
        """
        Builds the entry for this column in the show/hide columns menu, or `None` if the user isn't allowed to hide it.
        """
        request = self.get_request()
        if not self.include or not self.is_allow_user_hidden():
            return None

        return Fragment(
            self.item_menu_template,
            dict(
                title=self.title,
                slug=self.slug,
                default_hidden='true' if self.default_hidden else 'false',
            ),
            request=request,
        )
