"""Shared fixtures: a throwaway Source, a canned-HTML fetcher and a fake Supabase client."""
from types import SimpleNamespace

import pytest

from lure_catalog.models import Color, FetchError, LureRecord, Source


class FakeFetcher:
    """Stands in for fetch.Fetcher: returns canned HTML and records how it was asked.

    html may be a {url: html} dict; unknown URLs then raise FetchError 404.
    """

    def __init__(self, html):
        self.html = html
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if isinstance(self.html, dict):
            if url not in self.html:
                raise FetchError('HTTP 404', url, status=404)
            return self.html[url]
        return self.html

    def close(self):
        self.closed = True


class FakeQuery:
    """Chainable stand-in for a postgrest query; execute() pops the next canned response."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args))
            return self
        return method

    def execute(self):
        data = self.responses.pop(0) if self.responses else []
        if isinstance(data, Exception):
            raise data
        return SimpleNamespace(data=data)


class FakeClient:
    def __init__(self, responses=None):
        self.query = FakeQuery(list(responses or []))
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self.query


@pytest.fixture
def source():
    return Source(
        slug='acme',
        manufacturer='ACME',
        hosts=('acme.example',),
        parse=lambda url, html: {},
    )


@pytest.fixture
def record():
    return LureRecord(
        name='Test Minnow 90F',
        slug='test-minnow-90f',
        manufacturer='ACME',
        manufacturer_slug='acme',
        source_url='https://acme.example/products/test-minnow-90f.html',
        type='ミノー',
        target_fish=['シーバス'],
        price=1980,
        colors=[Color('Red', 'https://acme.example/r.jpg'), Color('Blue', '')],
        weights=[10.0, 14.0],
        length=90,
    )


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


@pytest.fixture
def fake_client():
    return FakeClient
