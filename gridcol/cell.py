import copy

from tri_declarative import (
    Refinable,
    RefinableObject,
    dispatch,
    evaluate_strict,
)

from gridcol.base import (
    NOT_BOUND_MESSAGE,
    title_from_name,
)
from gridcol.repository import get_content


class Cell(RefinableObject):
    """
    Base class for things that render one value of a record, e.g. a table column.

    :param name: the field of the record to show. Dots walk into related objects: `album.artist.name`.
    :param column: the key used for filtering and sorting. Defaults to `name`.
    :param title: header text. Defaults to something readable based on `name`.
    :param render: callable that receives the keyword arguments `row`, `loop`, `column` and `request` and returns what to show. Take `**_` for the ones you don't use: `lambda row, **_: row.name`.
    :param popover: help text shown next to the title
    :param include: set this to `False` to not render the cell at all
    """

    name: str = Refinable()
    column: str = Refinable()
    title: str = Refinable()
    render = Refinable()
    popover: str = Refinable()
    include: bool = Refinable()

    @dispatch(
        include=True,
    )
    def __init__(self, name='', title=None, **kwargs):
        super(Cell, self).__init__(name=name, title=title, **kwargs)
        if self.column is None:
            self.column = self.name
        if self.title is None:
            self.title = title_from_name(self.name)
        self.request = None
        self._is_bound = False

    @classmethod
    def make(cls, name='', title=None, **kwargs):
        return cls(name, title, **kwargs)

    def __repr__(self):
        return f'<{type(self).__name__} {self.name}{" (bound)" if self._is_bound else ""}>'

    def set_render(self, render):
        """
        `render` is called with the keyword arguments `row`, `loop`, `column` and `request` and must accept `**_`.
        """
        self.render = render
        return self

    def set_popover(self, popover):
        self.popover = popover
        return self

    def set_title(self, title):
        self.title = title
        return self

    def can_see(self, include):
        self.include = include
        return self

    def bind(self, *, request):
        result = copy.copy(self)
        result.request = request
        result._is_bound = True
        return result

    def get_request(self):
        assert self._is_bound, NOT_BOUND_MESSAGE
        return self.request

    def handler(self, row, loop=None):
        return evaluate_strict(self.render, row=row, loop=loop, column=self, request=self.get_request())

    def get_content(self, row):
        return get_content(row, self.name)
