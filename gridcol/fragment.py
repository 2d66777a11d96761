from tri_struct import Struct

from gridcol._web_compat import render_template


class Fragment:
    """
    A template together with the values it will be rendered with.

    The values are available with item access, so the surrounding grid can
    inspect what a column produced without rendering it:

    .. code-block:: python

        th = column.bind(request=request).build_th()
        th['sort_url']
        th.__html__()
    """

    def __init__(self, template, context, request=None):
        self.template = template
        self.context = Struct(context)
        self.request = request

    def __getitem__(self, key):
        return self.context[key]

    def __contains__(self, key):
        return key in self.context

    def get(self, key, default=None):
        return self.context.get(key, default)

    def __html__(self):
        return render_template(self.request, self.template, self.context)

    def __str__(self):
        return self.__html__()

    def __repr__(self):
        return f'<{type(self).__name__} {self.template}>'
