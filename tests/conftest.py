"""Test configuration for OE Manuals tests."""

import pytest
from webtest import TestApp

from oe_manuals import create_app
from oe_manuals.resources import get_catalog


@pytest.fixture
def app(tmp_path):
    """Flask app with the catalog and thumbnails in a temporary directory."""
    app = create_app({
        'TESTING': True,
        'DATA_ROOT': str(tmp_path),
        'THUMBNAIL_ROOT': str(tmp_path / 'uploads'),
        'LOG_ROOT': None,
    })
    yield app
    with app.app_context():
        get_catalog().close()


@pytest.fixture
def catalog(app):
    """Catalog manager used within the app context."""
    with app.app_context():
        yield get_catalog()


@pytest.fixture
def client(app):
    """WebTest client wrapping the app."""
    return TestApp(app)


def manual_fields(**overrides):
    """Valid manual fields keyed by data model field names."""
    fields = {
        'video_link': 'https://videos.example.com/v1',
        'title': 'T1',
        'description': 'D1',
        'order': 1,
    }
    fields.update(overrides)
    return fields


def manual_params(**overrides):
    """Valid manual request parameters keyed by API field names."""
    params = {
        'videoLink': 'https://videos.example.com/v1',
        'title': 'T1',
        'description': 'D1',
        'order': '1',
    }
    params.update(overrides)
    return params
