from collections.abc import (
    Mapping,
    Sequence,
)

from tri_struct import Struct

from gridcol.base import MISSING


def data_get(target, path, default=None):
    """
    Walk `path` (dot separated) through mappings, sequences and attributes.

    Short circuits to `default` as soon as a segment can't be resolved.
    """
    if path is None or path == '':
        return target

    for segment in str(path).split('.'):
        if target is None:
            return default

        if isinstance(target, Mapping):
            target = target.get(segment, MISSING)
        elif isinstance(target, Sequence) and not isinstance(target, str) and segment.lstrip('-').isdigit():
            try:
                target = target[int(segment)]
            except IndexError:
                target = MISSING
        else:
            target = getattr(target, segment, MISSING)

        if target is MISSING:
            return default

    return target


def get_content(row, name, default=None):
    get_content_method = getattr(row, 'get_content', None)
    if get_content_method is not None and callable(get_content_method):
        return get_content_method(name)
    return data_get(row, name, default)


class Repository(Struct):
    """
    A record for rows that don't come from a model, e.g. rows built from an api response.

    .. code-block:: python

        >>> row = Repository(name='Black Sabbath', album=dict(name='Paranoid', year=1970))
        >>> row.get_content('album.year')
        1970
    """

    __slots__ = ()

    def get_content(self, key, default=None):
        return data_get(dict(self), key, default)
