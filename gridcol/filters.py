from collections.abc import Mapping
from typing import (
    Any,
    Dict,
)

from django.conf import settings
from tri_declarative import (
    EMPTY,
    Namespace,
    Refinable,
    RefinableObject,
    class_shortcut,
    dispatch,
)

from gridcol._web_compat import render_template
from gridcol.base import items


def date_format():
    return getattr(settings, 'GRIDCOL_DATE_FORMAT', 'Y-m-d')


def normalize_options(options) -> Dict[Any, Any]:
    """
    Options are a mapping of value to label. `[('a', 'Alpha')]` and `['a']` are accepted too.
    """
    if options is None:
        return {}
    if isinstance(options, Mapping):
        return dict(items(options)) if isinstance(options, dict) else dict(options)

    result = {}
    for option in options:
        if isinstance(option, (list, tuple)) and len(option) == 2:
            value, label = option
            result[value] = label
        else:
            result[option] = option
    return result


class FilterField(RefinableObject):
    """
    The input control rendered in a column header to filter on that column.

    Use the shortcuts to create one: `FilterField.text()`, `FilterField.number()`,
    `FilterField.date_range()`, `FilterField.number_range()`, `FilterField.select(options=...)`
    and `FilterField.date_timer()`.

    A filter field is *complex* if its value is structured (a dict for ranges,
    a list for multi selects) instead of a plain string.
    """

    name: str = Refinable()
    input_type: str = Refinable()
    placeholder: str = Refinable()
    form: str = Refinable()
    value = Refinable()
    autofocus: bool = Refinable()
    is_complex: bool = Refinable()
    template: str = Refinable()
    attrs: Namespace = Refinable()
    options: Dict[Any, Any] = Refinable()
    multiple: bool = Refinable()
    inline: bool = Refinable()
    format: str = Refinable()

    @dispatch(
        input_type='text',
        autofocus=False,
        is_complex=False,
        template='gridcol/filters/input.html',
        attrs=EMPTY,
        multiple=False,
        inline=False,
    )
    def __init__(self, **kwargs):
        """
        :param name: name of the input. For range fields `[start]` and `[end]` are appended, for multi selects `[]`.
        :param input_type: the `type` attribute of a plain input
        :param placeholder: placeholder text
        :param form: id of the form the input belongs to
        :param value: current value. A dict with `start`/`end` for ranges, a list for multi selects.
        :param is_complex: `True` if the value is structured rather than a string
        :param template: template used to render the field
        :param attrs: extra html attributes
        :param options: dict of value to label, for selects
        """
        super(FilterField, self).__init__(**kwargs)
        self.options = normalize_options(self.options)
        # Namespace is callable, which the template engine would try to call
        self.attrs = dict(self.attrs or {})

    def set_name(self, name):
        self.name = name
        return self

    def set_placeholder(self, placeholder):
        self.placeholder = placeholder
        return self

    def set_form(self, form):
        self.form = form
        return self

    def set_value(self, value):
        self.value = value
        return self

    def set_autofocus(self, autofocus=True):
        self.autofocus = autofocus
        return self

    def set_options(self, options):
        self.options = normalize_options(options)
        return self

    def set_multiple(self, multiple=True):
        self.multiple = multiple
        self.is_complex = multiple
        return self

    def set_inline(self, inline=True):
        self.inline = inline
        return self

    def set_format(self, format):
        self.format = format
        return self

    @property
    def input_name(self):
        if self.multiple:
            return f'{self.name}[]'
        return self.name

    @property
    def start(self):
        return self._range_value('start')

    @property
    def end(self):
        return self._range_value('end')

    def _range_value(self, key):
        if isinstance(self.value, dict):
            value = self.value.get(key)
            return '' if value is None else value
        return ''

    @property
    def choice_tuples(self):
        """
        `(value, label, selected)` for each option.
        """
        if self.value is None:
            selected_values = set()
        elif isinstance(self.value, (list, tuple)):
            selected_values = {str(x) for x in self.value}
        else:
            selected_values = {str(self.value)}

        return [
            (value, label, str(value) in selected_values)
            for value, label in items(self.options)
        ]

    def __html__(self):
        return render_template(None, self.template, dict(field=self))

    def __str__(self):
        return self.__html__()

    def __repr__(self):
        return f'<{type(self).__name__} {self.input_type} name={self.name!r}>'

    @classmethod
    @class_shortcut
    def input(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        call_target__attribute='input',
        input_type='text',
    )
    def text(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        call_target__attribute='input',
        input_type='number',
    )
    def number(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        template='gridcol/filters/range.html',
        is_complex=True,
    )
    def range(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        call_target__attribute='range',
        input_type='date',
    )
    def date_range(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        call_target__attribute='range',
        input_type='number',
    )
    def number_range(cls, call_target=None, **kwargs):
        return call_target(**kwargs)

    @classmethod
    @class_shortcut(
        template='gridcol/filters/select.html',
        input_type=None,
    )
    def select(cls, call_target=None, multiple=False, **kwargs):
        return call_target(multiple=multiple, is_complex=multiple, **kwargs)

    @classmethod
    @class_shortcut(
        template='gridcol/filters/date.html',
        input_type='date',
        inline=False,
    )
    def date_timer(cls, call_target=None, **kwargs):
        kwargs.setdefault('format', date_format())
        return call_target(**kwargs)
