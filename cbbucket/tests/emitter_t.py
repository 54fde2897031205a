#  Copyright 2016-2022. Couchbase, Inc.
#  All Rights Reserved.
#
#  Licensed under the Apache License, Version 2.0 (the "License")
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

import asyncio
import threading

import pytest

from cbbucket.exceptions import InvalidArgumentException, ViewErrorException
from cbbucket.logic.emitter import RowEmitter
from cbbucket.logic.wrappers import wrap_row_emitter
from cbbucket.result import ViewResult
from tests.environments.test_environment import TestEnvironment


class Recorder:
    def __init__(self, emitter):
        self.events = []
        emitter.on_row(lambda r: self.events.append(('row', r)))
        emitter.on_error(lambda e: self.events.append(('error', e)))
        emitter.on_end(lambda m: self.events.append(('end', m)))


class RowEmitterTestSuite:
    TEST_MANIFEST = [
        'test_events_after_end_ignored',
        'test_events_after_error_ignored',
        'test_no_producer',
        'test_producer_exception_becomes_error',
        'test_rows_then_end',
        'test_start_twice',
        'test_subscription_chainable',
    ]

    def test_events_after_end_ignored(self):
        emitter = RowEmitter()
        rec = Recorder(emitter)
        emitter.start()
        emitter.emit_row(1)
        emitter.emit_end({'total_rows': 1})
        emitter.emit_row(2)
        emitter.emit_error(ViewErrorException('late'))
        emitter.emit_end({'total_rows': 2})
        assert rec.events == [('row', 1), ('end', {'total_rows': 1})]
        assert emitter.done is True

    def test_events_after_error_ignored(self):
        emitter = RowEmitter()
        rec = Recorder(emitter)
        emitter.start()
        err = ViewErrorException('first')
        emitter.emit_error(err)
        emitter.emit_end({})
        emitter.emit_error(ViewErrorException('second'))
        assert rec.events == [('error', err)]

    def test_no_producer(self):
        emitter = RowEmitter()
        rec = Recorder(emitter)
        emitter.start()
        assert emitter.started is True
        assert emitter.done is False
        assert rec.events == []

    def test_producer_exception_becomes_error(self):
        err = RuntimeError('connector failure')

        def producer(em):
            em.emit_row('a')
            raise err

        emitter = RowEmitter(producer)
        rec = Recorder(emitter)
        emitter.start()
        assert rec.events == [('row', 'a'), ('error', err)]

    def test_rows_then_end(self):
        def producer(em):
            for i in range(3):
                em.emit_row({'id': f'doc-{i}'})
            em.emit_end({'total_rows': 3})

        emitter = RowEmitter(producer)
        rec = Recorder(emitter)
        assert emitter.started is False
        emitter.start()
        assert rec.events == [('row', {'id': 'doc-0'}),
                              ('row', {'id': 'doc-1'}),
                              ('row', {'id': 'doc-2'}),
                              ('end', {'total_rows': 3})]

    def test_start_twice(self):
        emitter = RowEmitter()
        emitter.start()
        with pytest.raises(InvalidArgumentException):
            emitter.start()

    def test_subscription_chainable(self):
        emitter = RowEmitter()
        assert emitter.on_row(print).on_error(print).on_end(print) is emitter


class RowEmitterTests(RowEmitterTestSuite):
    @pytest.fixture(scope='class', autouse=True)
    def validate_test_manifest(self):
        def valid_test_method(meth):
            attr = getattr(RowEmitterTests, meth)
            return callable(attr) and not meth.startswith('__') and meth.startswith('test')
        method_list = [meth for meth in dir(RowEmitterTests) if valid_test_method(meth)]
        test_list = set(RowEmitterTestSuite.TEST_MANIFEST).symmetric_difference(method_list)
        if test_list:
            pytest.fail(f'Test manifest invalid.  Missing/extra tests: {test_list}.')


class RowEmitterAdapterTestSuite:
    TEST_MANIFEST = [
        'test_abandoned_future_drops_result',
        'test_error_discards_rows',
        'test_first_terminal_event_wins',
        'test_foreign_thread_producer',
        'test_handler_error',
        'test_handler_exception_reaches_loop',
        'test_handler_success',
        'test_result_factory',
        'test_result_factory_error',
        'test_rows_in_order',
    ]

    @pytest.mark.asyncio
    async def test_abandoned_future_drops_result(self):
        loop = asyncio.get_running_loop()
        captured = TestEnvironment.capture_loop_exceptions(loop)
        try:
            emitter = RowEmitter()
            ft = wrap_row_emitter(emitter, loop)
            ft.cancel()
            emitter.emit_row(1)
            emitter.emit_end({})
            await TestEnvironment.drain_loop()
            assert ft.cancelled()
            assert emitter.done is True
            assert captured == []
        finally:
            loop.set_exception_handler(None)

    @pytest.mark.asyncio
    async def test_error_discards_rows(self):
        err = ViewErrorException('partial failure')

        def producer(em):
            em.emit_row(1)
            em.emit_row(2)
            em.emit_error(err)

        with pytest.raises(ViewErrorException) as ex:
            await wrap_row_emitter(RowEmitter(producer), asyncio.get_running_loop())
        assert ex.value is err

    @pytest.mark.asyncio
    async def test_first_terminal_event_wins(self):
        emitter = RowEmitter()
        ft = wrap_row_emitter(emitter, asyncio.get_running_loop())
        emitter.emit_row('a')
        emitter.emit_end({'total_rows': 1})
        emitter.emit_error(ViewErrorException('late error'))
        emitter.emit_end({'total_rows': 99})
        result = await ft
        assert result.rows == ['a']
        assert result.meta == {'total_rows': 1}

    @pytest.mark.asyncio
    async def test_foreign_thread_producer(self):
        def producer(em):
            def run():
                for i in range(10):
                    em.emit_row(i)
                em.emit_end({'total_rows': 10})
            threading.Thread(target=run).start()

        result = await asyncio.wait_for(wrap_row_emitter(RowEmitter(producer), asyncio.get_running_loop()), 5)
        assert result.rows == list(range(10))

    @pytest.mark.asyncio
    async def test_handler_error(self):
        err = ViewErrorException('failed')
        calls = []

        def producer(em):
            em.emit_row(1)
            em.emit_error(err)

        ft = wrap_row_emitter(RowEmitter(producer),
                              asyncio.get_running_loop(),
                              lambda e, r: calls.append((e, r)))
        assert await ft is None
        assert calls == [(err, None)]

    @pytest.mark.asyncio
    async def test_handler_exception_reaches_loop(self):
        loop = asyncio.get_running_loop()
        captured = TestEnvironment.capture_loop_exceptions(loop)
        handler_exc = ValueError('raised by handler')

        def handler(err, res):
            raise handler_exc

        try:
            ft = wrap_row_emitter(RowEmitter(lambda em: em.emit_end({})), loop, handler)
            assert await ft is None
            await TestEnvironment.drain_loop()
            assert len(captured) == 1
            assert captured[0]['exception'] is handler_exc
        finally:
            loop.set_exception_handler(None)

    @pytest.mark.asyncio
    async def test_handler_success(self):
        calls = []

        def producer(em):
            em.emit_row('x')
            em.emit_end({'total_rows': 1})

        ft = wrap_row_emitter(RowEmitter(producer),
                              asyncio.get_running_loop(),
                              lambda e, r: calls.append((e, r)))
        assert await ft is None
        assert len(calls) == 1
        err, result = calls[0]
        assert err is None
        assert isinstance(result, ViewResult)
        assert result.rows == ['x']

    @pytest.mark.asyncio
    async def test_result_factory(self):
        def producer(em):
            em.emit_row(2)
            em.emit_row(3)
            em.emit_end('meta')

        result = await wrap_row_emitter(RowEmitter(producer),
                                        asyncio.get_running_loop(),
                                        result_factory=lambda rows, meta: (sum(rows), meta))
        assert result == (5, 'meta')

    @pytest.mark.asyncio
    async def test_result_factory_error(self):
        err = KeyError('bad row')

        def factory(rows, meta):
            raise err

        with pytest.raises(KeyError) as ex:
            await wrap_row_emitter(RowEmitter(lambda em: em.emit_end({})),
                                   asyncio.get_running_loop(),
                                   result_factory=factory)
        assert ex.value is err

    @pytest.mark.asyncio
    async def test_rows_in_order(self):
        def producer(em):
            for r in ['c', 'a', 'b']:
                em.emit_row(r)
            em.emit_end({'total_rows': 3})

        result = await wrap_row_emitter(RowEmitter(producer), asyncio.get_running_loop())
        assert isinstance(result, ViewResult)
        assert result.rows == ['c', 'a', 'b']
        assert result.meta == {'total_rows': 3}
        assert len(result) == 3


class RowEmitterAdapterTests(RowEmitterAdapterTestSuite):
    @pytest.fixture(scope='class', autouse=True)
    def validate_test_manifest(self):
        def valid_test_method(meth):
            attr = getattr(RowEmitterAdapterTests, meth)
            return callable(attr) and not meth.startswith('__') and meth.startswith('test')
        method_list = [meth for meth in dir(RowEmitterAdapterTests) if valid_test_method(meth)]
        test_list = set(RowEmitterAdapterTestSuite.TEST_MANIFEST).symmetric_difference(method_list)
        if test_list:
            pytest.fail(f'Test manifest invalid.  Missing/extra tests: {test_list}.')
