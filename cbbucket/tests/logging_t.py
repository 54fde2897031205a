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

import logging

import pytest

import cbbucket
from cbbucket import (configure_console_logger,
                      configure_logging,
                      get_metadata)


class _RecordCollector(logging.Handler):
    def __init__(self):
        super().__init__(logging.NOTSET)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class LoggingTestSuite:
    TEST_MANIFEST = [
        'test_configure_console_logger',
        'test_configure_console_logger_not_set',
        'test_configure_logging',
        'test_configure_logging_child_logger',
        'test_configure_logging_level',
        'test_configure_logging_twice',
        'test_metadata',
        'test_trace_level',
    ]

    @pytest.fixture()
    def pkg_logger(self):
        pkg_logger = logging.getLogger('cbbucket')
        handlers = list(pkg_logger.handlers)
        level = pkg_logger.level
        propagate = pkg_logger.propagate
        yield pkg_logger
        for h in list(pkg_logger.handlers):
            if h not in handlers:
                pkg_logger.removeHandler(h)
        pkg_logger.setLevel(level)
        pkg_logger.propagate = propagate

    @pytest.fixture()
    def collector(self):
        return _RecordCollector()

    def test_configure_console_logger(self, pkg_logger, monkeypatch):
        monkeypatch.setenv('CBBUCKET_LOG_LEVEL', 'debug')
        monkeypatch.delenv('CBBUCKET_LOG_FILE', raising=False)
        configure_console_logger()
        stream_handlers = [h for h in pkg_logger.handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1
        assert pkg_logger.level == logging.DEBUG

    def test_configure_console_logger_not_set(self, pkg_logger, monkeypatch):
        monkeypatch.delenv('CBBUCKET_LOG_LEVEL', raising=False)
        handlers = list(pkg_logger.handlers)
        configure_console_logger()
        assert pkg_logger.handlers == handlers

    def test_configure_logging(self, pkg_logger, collector):
        target = configure_logging('cbbucket_test_app', level=logging.DEBUG)
        target.setLevel(logging.DEBUG)
        target.addHandler(collector)
        try:
            logging.getLogger('cbbucket.views').debug('view request dispatched')
            logging.getLogger('cbbucket.cluster').info('query dispatched')
            messages = [r.getMessage() for r in collector.records]
            assert 'view request dispatched' in messages
            assert 'query dispatched' in messages
            assert pkg_logger.propagate is False
        finally:
            target.removeHandler(collector)

    def test_configure_logging_child_logger(self, pkg_logger):
        parent = logging.getLogger('cbbucket_test_parent')
        target = configure_logging('child', parent_logger=parent)
        assert target.name == 'cbbucket_test_parent.child'

    def test_configure_logging_level(self, pkg_logger, collector):
        target = configure_logging('cbbucket_test_level', level=logging.WARNING)
        target.setLevel(logging.DEBUG)
        target.addHandler(collector)
        try:
            logging.getLogger('cbbucket.bucket').debug('filtered out')
            logging.getLogger('cbbucket.bucket').warning('kept')
            assert [r.getMessage() for r in collector.records] == ['kept']
        finally:
            target.removeHandler(collector)

    def test_configure_logging_twice(self, pkg_logger):
        configure_logging('cbbucket_test_first')
        with pytest.raises(RuntimeError):
            configure_logging('cbbucket_test_second')

    def test_metadata(self):
        metadata = get_metadata()
        assert metadata['version'] == cbbucket.__version__
        assert metadata['user_agent'] == f'python/{cbbucket.__version__}'
        assert isinstance(get_metadata(as_str=True), str)

    def test_trace_level(self, pkg_logger, collector):
        assert logging.getLevelName(logging.TRACE) == 'TRACE'
        target = configure_logging('cbbucket_test_trace', level=logging.TRACE)
        target.setLevel(logging.TRACE)
        target.addHandler(collector)
        try:
            logging.getLogger('cbbucket.logic.emitter').trace('late event')
            assert [r.levelname for r in collector.records] == ['TRACE']
        finally:
            target.removeHandler(collector)


class ClassicLoggingTests(LoggingTestSuite):
    @pytest.fixture(scope='class', autouse=True)
    def validate_test_manifest(self):
        def valid_test_method(meth):
            attr = getattr(ClassicLoggingTests, meth)
            return callable(attr) and not meth.startswith('__') and meth.startswith('test')
        method_list = [meth for meth in dir(ClassicLoggingTests) if valid_test_method(meth)]
        test_list = set(LoggingTestSuite.TEST_MANIFEST).symmetric_difference(method_list)
        if test_list:
            pytest.fail(f'Test manifest invalid.  Missing/extra tests: {test_list}.')
