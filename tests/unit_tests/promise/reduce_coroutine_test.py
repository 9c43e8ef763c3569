# -*- coding: utf-8 -*-

import pytest

from pledge import promise


class Err(Exception):
    pass


class TestReduceCoroutineResult(object):

    def test_return_value_after_several_steps(self):
        """The value returned by the generator is the result.

        Each value sent back into the generator is the result of the promise
        it has just yielded.
        """
        received = []

        @promise.reduce_coroutine()
        def fetch_name(user_id):
            user = yield promise.resolved({'id': user_id, 'name': 'Alice'})
            received.append(user)
            greeting = yield promise.resolved('Hello %s' % user['name'])
            received.append(greeting)
            return '%s (#%s)' % (greeting, user['id'])

        p = fetch_name(3)
        assert isinstance(p, promise.Promise)
        assert p.result(0.01) == 'Hello Alice (#3)'
        assert received == [{'id': 3, 'name': 'Alice'}, 'Hello Alice']

    def test_falls_back_to_last_promise_value(self):
        """Without a return value, the last awaited result is kept."""

        @promise.reduce_coroutine()
        def generator():
            yield promise.resolved('first')
            yield promise.resolved('last')

        assert generator().result(0.01) == 'last'

    def test_explicit_none_return_keeps_last_value(self):
        @promise.reduce_coroutine()
        def generator():
            yield promise.resolved(5)
            return None

        assert generator().result(0.01) == 5

    def test_no_step_at_all(self):
        @promise.reduce_coroutine()
        def generator():
            return 'immediate'
            yield

        assert generator().result(0.01) == 'immediate'

    def test_plain_value_stops_and_closes_generator(self):
        """A yielded plain value is the result, the rest is never run.

        The generator is closed right away, so its `finally` clauses and
        context managers are executed.
        """
        steps = []

        @promise.reduce_coroutine()
        def generator():
            try:
                value = yield promise.resolved(2)
                yield value * 10
                steps.append('after result')
            finally:
                steps.append('closed')

        assert generator().result(0.01) == 20
        assert steps == ['closed']

    def test_pending_promise_is_awaited(self):
        df = promise.defer()

        @promise.reduce_coroutine()
        def generator():
            value = yield df.promise
            return value * 2

        p = generator()
        with pytest.raises(promise.TimeoutError):
            p.result(0)
        df.resolve(21)
        assert p.result(0.01) == 42

    def test_deferred_is_awaited_through_its_promise(self):
        df = promise.defer()

        @promise.reduce_coroutine()
        def generator():
            value = yield df
            return value + 1

        p = generator()
        df.resolve(1)
        assert p.result(0.01) == 2


class TestReduceCoroutineErrors(object):

    def test_raise_before_first_yield(self):
        @promise.reduce_coroutine()
        def generator(name):
            if not name:
                raise Err('name required')
            yield promise.resolved(name)

        assert isinstance(generator('').exception(0.01), Err)
        assert generator('bob').result(0.01) == 'bob'

    def test_rejection_not_caught_rejects_result(self):
        err = Err()

        @promise.reduce_coroutine()
        def generator():
            yield promise.resolved(1)
            yield promise.rejected(err)
            return 'unreachable'

        assert generator().exception(0.01) is err

    def test_raise_after_a_step(self):
        @promise.reduce_coroutine()
        def generator():
            value = yield promise.resolved(1)
            raise Err(value)

        err = generator().exception(0.01)
        assert isinstance(err, Err) and err.args == (1,)

    def test_rejection_caught_then_return(self):
        """The rejection is raised at the yield, so it can be caught."""
        err = Err('offline')

        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.rejected(err)
            except Err as e:
                return 'recovered from %s' % e

        assert generator().result(0.01) == 'recovered from offline'

    def test_rejection_caught_then_next_promise(self):
        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.rejected(Err())
            except Err:
                value = yield promise.resolved('retried')
            return value

        assert generator().result(0.01) == 'retried'

    def test_rejection_caught_and_other_error_raised(self):
        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.rejected(Err())
            except Err:
                raise KeyError('other')

        assert isinstance(generator().exception(0.01), KeyError)

    def test_non_exception_reason_is_not_thrown(self):
        """A reason that isn't an exception can't be raised in the generator.

        The result is rejected with the same reason, and the generator is
        left untouched.
        """
        caught = []

        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.rejected('bad reason')
            except Exception as e:
                caught.append(e)
            return 'unreachable'

        assert generator().exception(0.01) == 'bad reason'
        assert caught == []

    def test_non_exception_reason_from_pending_promise(self):
        df = promise.defer()

        @promise.reduce_coroutine()
        def generator():
            yield df.promise
            return 'unreachable'

        p = generator()
        df.reject(404)
        assert p.exception(0.01) == 404


class TestReduceCoroutineProgrammingError(object):

    def test_raised_when_creating_generator(self):
        """A function failing before it's even a generator."""

        def not_a_generator(value):
            raise promise.ProgrammingError('wrong usage')

        decorated = promise.reduce_coroutine()(not_a_generator)
        with pytest.raises(promise.ProgrammingError):
            decorated(1)

    def test_raised_before_first_yield(self):
        @promise.reduce_coroutine()
        def generator():
            raise promise.ProgrammingError()
            yield

        with pytest.raises(promise.ProgrammingError):
            generator()

    def test_raised_after_settled_promise(self):
        @promise.reduce_coroutine()
        def generator():
            yield promise.resolved(1)
            raise promise.ProgrammingError()

        with pytest.raises(promise.ProgrammingError):
            generator()

    def test_raised_to_the_caller_of_resolve(self):
        df = promise.defer()

        @promise.reduce_coroutine()
        def generator():
            yield df.promise
            raise promise.ProgrammingError()

        p = generator()
        with pytest.raises(promise.ProgrammingError):
            df.resolve('go')
        with pytest.raises(promise.TimeoutError):
            p.result(0)

    def test_raised_while_handling_rejection(self):
        @promise.reduce_coroutine()
        def generator():
            try:
                yield promise.rejected(Err())
            except Err:
                raise promise.ProgrammingError()

        with pytest.raises(promise.ProgrammingError):
            generator()


class TestReduceCoroutineSafeguard(object):

    @pytest.fixture
    def safeguard_calls(self, monkeypatch):
        calls = []

        def record(p, *args):
            calls.append(p)
            return p
        monkeypatch.setattr(promise.Promise, 'safeguard', record)
        return calls

    def test_safeguard_enabled(self, safeguard_calls):
        @promise.reduce_coroutine(safeguard=True)
        def generator():
            raise Err()
            yield

        p = generator()
        assert isinstance(p.exception(0.01), Err)
        assert safeguard_calls == [p]

    def test_safeguard_disabled_by_default(self, safeguard_calls):
        @promise.reduce_coroutine()
        def generator():
            yield promise.resolved(1)

        assert generator().result(0.01) == 1
        assert safeguard_calls == []
