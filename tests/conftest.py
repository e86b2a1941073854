import random

import pytest

from dailyluck import create_app
from dailyluck.db import db
from dailyluck.jrrp.logic.generator import ExpressionGenerator
from dailyluck.jrrp.records import LuckRecordStore


@pytest.fixture()
def app():
    app = create_app("dailyluck.config.TestingConfig")
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return LuckRecordStore()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def generator(rng):
    return ExpressionGenerator(rng=rng)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()
