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

from datetime import timedelta

import pytest

from cbbucket.exceptions import InvalidArgumentException
from cbbucket.management.views import DesignDocumentNamespace
from cbbucket.options import ViewOptions
from cbbucket.views import (ViewErrorMode,
                            ViewOrdering,
                            ViewQuery,
                            ViewScanConsistency)


class ViewsParamTestSuite:
    TEST_MANIFEST = [
        'test_invalid_design_doc',
        'test_invalid_options',
        'test_params_base',
        'test_params_client_context_id',
        'test_params_debug',
        'test_params_full_set',
        'test_params_group',
        'test_params_id_range',
        'test_params_include_docs',
        'test_params_key',
        'test_params_keys',
        'test_params_limit_skip',
        'test_params_namespace',
        'test_params_on_error',
        'test_params_order',
        'test_params_range',
        'test_params_raw',
        'test_params_reduce',
        'test_params_stale',
        'test_params_timeout',
    ]

    @pytest.fixture(scope='class')
    def base_opts(self):
        return {'bucket_name': 'main',
                'document_name': 'test-ddoc',
                'view_name': 'test-view'}

    def _encode(self, opts):
        return ViewQuery.create_view_query_object('main', 'test-ddoc', 'test-view', opts).as_encodable()

    def test_invalid_design_doc(self):
        with pytest.raises(InvalidArgumentException):
            ViewQuery.create_view_query_object('main', '', 'test-view')
        with pytest.raises(InvalidArgumentException):
            ViewQuery.create_view_query_object('main', 'test-ddoc', None)

    @pytest.mark.parametrize('opts', [{'startkey': 'a'},
                                      {'limit': -1},
                                      {'limit': True},
                                      {'skip': '1'},
                                      {'key': 'a', 'keys': ['b']},
                                      {'keys': 'a'},
                                      {'range': {'begin': 'a'}},
                                      {'id_range': {'start': 1}},
                                      {'order': 'up'},
                                      {'stale': 'sometimes'},
                                      {'on_error': 'ignore'},
                                      {'reduce': 1},
                                      {'namespace': 'staging'},
                                      {'raw': ['a']}])
    def test_invalid_options(self, opts):
        with pytest.raises(InvalidArgumentException):
            self._encode(opts)

    def test_params_base(self, base_opts):
        assert self._encode(None) == base_opts
        query = ViewQuery.create_view_query_object(None, 'test-ddoc', 'test-view')
        assert 'bucket_name' not in query.as_encodable()

    def test_params_client_context_id(self, base_opts):
        exp = dict(base_opts, client_context_id='view-ctx')
        assert self._encode(ViewOptions(client_context_id='view-ctx')) == exp

    def test_params_debug(self, base_opts):
        assert self._encode({'debug': True}) == dict(base_opts, debug=True)

    def test_params_full_set(self, base_opts):
        assert self._encode(ViewOptions(full_set=True)) == dict(base_opts, full_set=True)

    def test_params_group(self, base_opts):
        exp = dict(base_opts, group=True, group_level=2)
        assert self._encode(ViewOptions(group=True, group_level=2)) == exp

    def test_params_id_range(self, base_opts):
        query = ViewQuery.create_view_query_object('main', 'test-ddoc', 'test-view',
                                                   ViewOptions(id_range={'start': 'doc-1', 'end': 'doc-9'}))
        exp = dict(base_opts, start_key_doc_id='doc-1', end_key_doc_id='doc-9')
        assert query.as_encodable() == exp
        assert query.id_range == {'start': 'doc-1', 'end': 'doc-9'}

    def test_params_include_docs(self, base_opts):
        assert self._encode(ViewOptions(include_docs=True)) == dict(base_opts, include_docs=True)

    def test_params_key(self, base_opts):
        assert self._encode(ViewOptions(key=['airline', 10])) == dict(base_opts, key='["airline", 10]')
        assert self._encode(ViewOptions(key='airline_10')) == dict(base_opts, key='"airline_10"')

    def test_params_keys(self, base_opts):
        exp = dict(base_opts, keys=['"a"', '["b", 1]'])
        assert self._encode(ViewOptions(keys=['a', ['b', 1]])) == exp

    def test_params_limit_skip(self, base_opts):
        assert self._encode(ViewOptions(limit=10, skip=5)) == dict(base_opts, limit=10, skip=5)

    def test_params_namespace(self, base_opts):
        query = ViewQuery.create_view_query_object('main', 'test-ddoc', 'test-view')
        assert query.namespace == DesignDocumentNamespace.PRODUCTION
        exp = dict(base_opts, namespace='development')
        assert self._encode(ViewOptions(namespace=DesignDocumentNamespace.DEVELOPMENT)) == exp
        assert self._encode({'namespace': 'development'}) == exp

    def test_params_on_error(self, base_opts):
        exp = dict(base_opts, on_error='continue')
        assert self._encode(ViewOptions(on_error=ViewErrorMode.CONTINUE)) == exp
        assert self._encode({'on_error': 'stop'}) == dict(base_opts, on_error='stop')

    def test_params_order(self, base_opts):
        assert self._encode(ViewOptions(order=ViewOrdering.DESCENDING)) == dict(base_opts, order='true')
        assert self._encode(ViewOptions(order=ViewOrdering.ASCENDING)) == dict(base_opts, order='false')

    def test_params_range(self, base_opts):
        query = ViewQuery.create_view_query_object('main', 'test-ddoc', 'test-view',
                                                   ViewOptions(range={'start': ['a', 1],
                                                                      'end': ['a', 9],
                                                                      'inclusive_end': False}))
        exp = dict(base_opts, start_key='["a", 1]', end_key='["a", 9]', inclusive_end=False)
        assert query.as_encodable() == exp
        assert query.range == {'start': '["a", 1]', 'end': '["a", 9]', 'inclusive_end': False}

        # open ended
        exp = dict(base_opts, start_key='"m"')
        assert self._encode(ViewOptions(range={'start': 'm'})) == exp

    def test_params_raw(self, base_opts):
        exp = dict(base_opts, raw={'conflict': 'true', 'custom': '"value"'})
        assert self._encode(ViewOptions(raw={'conflict': True, 'custom': 'value'})) == exp

    def test_params_reduce(self, base_opts):
        assert self._encode(ViewOptions(reduce=False)) == dict(base_opts, reduce=False)
        assert self._encode({'reduce': '_count'}) == dict(base_opts, reduce='_count')

    def test_params_stale(self, base_opts):
        exp = dict(base_opts, scan_consistency='false')
        assert self._encode(ViewOptions(stale=ViewScanConsistency.REQUEST_PLUS)) == exp
        exp = dict(base_opts, scan_consistency='update_after')
        assert self._encode({'stale': 'update_after'}) == exp
        query = ViewQuery.create_view_query_object('main', 'test-ddoc', 'test-view')
        assert query.consistency == ViewScanConsistency.NOT_BOUNDED

    def test_params_timeout(self, base_opts):
        exp = dict(base_opts, timeout=20000000)
        assert self._encode(ViewOptions(timeout=timedelta(seconds=20))) == exp
        assert self._encode({'timeout': 20}) == exp
        assert self._encode({'timeout': 0}) == base_opts


class ClassicViewsParamTests(ViewsParamTestSuite):
    @pytest.fixture(scope='class', autouse=True)
    def validate_test_manifest(self):
        def valid_test_method(meth):
            attr = getattr(ClassicViewsParamTests, meth)
            return callable(attr) and not meth.startswith('__') and meth.startswith('test')
        method_list = [meth for meth in dir(ClassicViewsParamTests) if valid_test_method(meth)]
        test_list = set(ViewsParamTestSuite.TEST_MANIFEST).symmetric_difference(method_list)
        if test_list:
            pytest.fail(f'Test manifest invalid.  Missing/extra tests: {test_list}.')
