import logging

from django.utils.encoding import force_str
from django.utils.safestring import SafeText

log = logging.getLogger('gridcol')

NOT_BOUND_MESSAGE = (
    'This column is not bound. You need to call `.bind(request=request)` before you can call this function.'
)


class Missing:
    def __bool__(self):
        return False

    def __str__(self):
        return 'MISSING'

    def __repr__(self):
        return str(self)


MISSING = Missing()


def capitalize(s):
    if isinstance(s, SafeText):
        return SafeText(capitalize('' + s))
    return s[0].upper() + s[1:] if s else s


# Struct keys shadow dict methods, so look them up on the type
def items(container):
    return type(container).items(container)


def keys(container):
    return type(container).keys(container)


def title_from_name(name):
    """
    `user.first_name` -> `First name`
    """
    return capitalize(force_str(name).rsplit('.', 1)[-1].replace('_', ' '))
