import pytest
from django.utils import translation


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(session, config, items):
    items[:] = sorted(items, key=lambda x: str(x.path))


@pytest.fixture(autouse=True)
def english():
    with translation.override('en'):
        yield


@pytest.fixture
def albums():
    from gridcol import Repository

    return [
        Repository(name='Heaven & Hell', year=1980, artist=dict(name='Black Sabbath'), genre='metal'),
        Repository(name='Blizzard of Ozz', year=1980, artist=dict(name='Ozzy Osbourne'), genre='metal'),
        Repository(name='Django', year=1957, artist=dict(name='Django Reinhardt'), genre='jazz'),
    ]
