# -*- coding: utf-8 -*-

from threading import Event

import pytest

from pledge.promise import unhandled_rejections


class ReportCollector(object):
    """Collect the unhandled rejections reported during a test."""

    def __init__(self):
        self.errors = []
        self.event = Event()

    def __call__(self, error):
        self.errors.append(error)
        self.event.set()

    def count(self, error):
        return len([e for e in self.errors if e is error])

    def wait_for(self, error, timeout=1):
        """Wait until the error is reported. Returns True if it has been."""
        for _ in range(int(timeout / 0.01)):
            if self.count(error):
                return True
            self.event.wait(0.01)
            self.event.clear()
        return bool(self.count(error))


@pytest.fixture
def unhandled(request):
    """Subscribe a ReportCollector, with a short grace period."""
    collector = ReportCollector()
    grace_period = unhandled_rejections._grace_period
    unhandled_rejections.grace_period = 0.02
    unhandled_rejections.subscribe(collector)

    def restore():
        unhandled_rejections.unsubscribe(collector)
        unhandled_rejections.grace_period = grace_period

    request.addfinalizer(restore)
    return collector
