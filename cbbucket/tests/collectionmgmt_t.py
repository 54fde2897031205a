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

from cbbucket.exceptions import (CollectionAlreadyExistsException,
                                 CollectionNotFoundException,
                                 CouchbaseException,
                                 HTTPErrorContext,
                                 InvalidArgumentException,
                                 ScopeAlreadyExistsException,
                                 ScopeNotFoundException)
from cbbucket.management.collections import CollectionSpec, ScopeSpec
from cbbucket.options import (CreateCollectionOptions,
                              CreateScopeOptions,
                              GetAllScopesOptions)


class CollectionManagementTestSuite:
    TEST_MANIFEST = [
        'test_create_collection',
        'test_create_collection_invalid_max_expiry',
        'test_create_collection_max_expiry',
        'test_create_scope',
        'test_drop_collection',
        'test_drop_scope',
        'test_error_mapping',
        'test_error_mapping_http_body',
        'test_get_all_scopes',
        'test_handler',
        'test_invalid_names',
        'test_unmapped_error',
    ]

    SCOPE_NAME = 'inventory'
    COLLECTION_NAME = 'airline'

    @pytest.mark.asyncio
    async def test_create_collection(self, cb_env):
        res = await cb_env.mgr.create_collection(self.SCOPE_NAME, self.COLLECTION_NAME)
        assert res is None
        assert cb_env.connector.mgmt_requests == [('collection', 'create_collection', {
            'bucket_name': 'main',
            'scope_name': self.SCOPE_NAME,
            'collection_name': self.COLLECTION_NAME
        })]

    @pytest.mark.asyncio
    async def test_create_collection_invalid_max_expiry(self, cb_env):
        with pytest.raises(InvalidArgumentException):
            await cb_env.mgr.create_collection(self.SCOPE_NAME, self.COLLECTION_NAME, max_expiry=3600)
        assert cb_env.connector.mgmt_requests == []

    @pytest.mark.asyncio
    async def test_create_collection_max_expiry(self, cb_env):
        await cb_env.mgr.create_collection(self.SCOPE_NAME,
                                           self.COLLECTION_NAME,
                                           CreateCollectionOptions(max_expiry=timedelta(hours=1),
                                                                   timeout=timedelta(seconds=10)))
        await cb_env.mgr.create_collection(self.SCOPE_NAME, 'route', max_expiry=timedelta(minutes=2))
        reqs = cb_env.connector.mgmt_requests
        assert reqs[0][2]['max_expiry'] == 3600
        assert reqs[0][2]['timeout'] == 10000000
        assert reqs[1][2]['max_expiry'] == 120
        assert 'timeout' not in reqs[1][2]

    @pytest.mark.asyncio
    async def test_create_scope(self, cb_env):
        res = await cb_env.mgr.create_scope(self.SCOPE_NAME, CreateScopeOptions(timeout=timedelta(seconds=4)))
        assert res is None
        assert cb_env.connector.mgmt_requests == [('collection', 'create_scope', {'bucket_name': 'main',
                                                                                 'scope_name': self.SCOPE_NAME,
                                                                                 'timeout': 4000000})]

    @pytest.mark.asyncio
    async def test_drop_collection(self, cb_env):
        await cb_env.mgr.drop_collection(self.SCOPE_NAME, self.COLLECTION_NAME)
        assert cb_env.connector.mgmt_requests[0][1] == 'drop_collection'
        assert cb_env.connector.mgmt_requests[0][2] == {'bucket_name': 'main',
                                                        'scope_name': self.SCOPE_NAME,
                                                        'collection_name': self.COLLECTION_NAME}

    @pytest.mark.asyncio
    async def test_drop_scope(self, cb_env):
        await cb_env.mgr.drop_scope(self.SCOPE_NAME)
        assert cb_env.connector.mgmt_requests == [('collection', 'drop_scope', {'bucket_name': 'main',
                                                                               'scope_name': self.SCOPE_NAME})]

    @pytest.mark.asyncio
    async def test_error_mapping(self, cb_env):
        cb_env.connector.script_mgmt(error=CouchbaseException(message='Scope with name inventory already exists'))
        with pytest.raises(ScopeAlreadyExistsException):
            await cb_env.mgr.create_scope(self.SCOPE_NAME)

        cb_env.connector.script_mgmt(error=Exception('Collection with name airline not found'))
        with pytest.raises(CollectionNotFoundException):
            await cb_env.mgr.drop_collection(self.SCOPE_NAME, self.COLLECTION_NAME)

        cb_env.connector.script_mgmt(error=CouchbaseException(message='collection_exists'))
        with pytest.raises(CollectionAlreadyExistsException):
            await cb_env.mgr.create_collection(self.SCOPE_NAME, self.COLLECTION_NAME)

        err = ScopeNotFoundException(message='missing scope')
        cb_env.connector.script_mgmt(error=err)
        with pytest.raises(ScopeNotFoundException) as ex:
            await cb_env.mgr.drop_scope(self.SCOPE_NAME)
        assert ex.value is err

    @pytest.mark.asyncio
    async def test_error_mapping_http_body(self, cb_env):
        ctx = HTTPErrorContext(http_status=404,
                               http_body='{"errors": {"scope": "Scope with name inventory not found"}}')
        cb_env.connector.script_mgmt(error=CouchbaseException(message='http error', context=ctx))
        with pytest.raises(ScopeNotFoundException) as ex:
            await cb_env.mgr.drop_scope(self.SCOPE_NAME)
        assert ex.value.error_context is ctx

    @pytest.mark.asyncio
    async def test_get_all_scopes(self, cb_env):
        cb_env.connector.script_mgmt(result={'scopes': [
            {'name': '_default', 'collections': [{'name': '_default'}]},
            {'name': self.SCOPE_NAME, 'collections': [{'name': self.COLLECTION_NAME, 'max_expiry': 3600},
                                                      {'name': 'route'}]},
        ]})
        scopes = await cb_env.mgr.get_all_scopes(GetAllScopesOptions(timeout=timedelta(seconds=1)))
        assert all(isinstance(s, ScopeSpec) for s in scopes)
        assert [s.name for s in scopes] == ['_default', self.SCOPE_NAME]
        inventory = scopes[1]
        assert all(isinstance(c, CollectionSpec) for c in inventory.collections)
        assert [c.name for c in inventory.collections] == [self.COLLECTION_NAME, 'route']
        assert all(c.scope_name == self.SCOPE_NAME for c in inventory.collections)
        assert inventory.collections[0].max_expiry == timedelta(hours=1)
        assert inventory.collections[1].max_expiry is None
        assert cb_env.connector.mgmt_requests[0] == ('collection', 'get_all_scopes', {'bucket_name': 'main',
                                                                                     'timeout': 1000000})

    @pytest.mark.asyncio
    async def test_handler(self, cb_env):
        calls = []
        cb_env.connector.script_mgmt(result={'scopes': [{'name': '_default', 'collections': []}]})
        res = await cb_env.mgr.get_all_scopes(lambda err, result: calls.append((err, result)))
        assert res is None
        assert len(calls) == 1
        err, scopes = calls[0]
        assert err is None
        assert [s.name for s in scopes] == ['_default']

    @pytest.mark.asyncio
    async def test_invalid_names(self, cb_env):
        with pytest.raises(InvalidArgumentException):
            await cb_env.mgr.create_scope('')
        with pytest.raises(InvalidArgumentException):
            await cb_env.mgr.drop_scope(None)
        with pytest.raises(InvalidArgumentException):
            await cb_env.mgr.create_collection(self.SCOPE_NAME, '  ')
        with pytest.raises(InvalidArgumentException):
            await cb_env.mgr.drop_collection(10, self.COLLECTION_NAME)
        assert cb_env.connector.mgmt_requests == []

    @pytest.mark.asyncio
    async def test_unmapped_error(self, cb_env):
        err = CouchbaseException(message='internal server error')
        cb_env.connector.script_mgmt(error=err)
        with pytest.raises(CouchbaseException) as ex:
            await cb_env.mgr.get_all_scopes()
        assert ex.value is err


class CollectionManagementTests(CollectionManagementTestSuite):
    @pytest.fixture(scope='class')
    def test_manifest_validated(self):
        def valid_test_method(meth):
            attr = getattr(CollectionManagementTests, meth)
            return callable(attr) and not meth.startswith('__') and meth.startswith('test')
        method_list = [meth for meth in dir(CollectionManagementTests) if valid_test_method(meth)]
        compare = set(CollectionManagementTestSuite.TEST_MANIFEST).difference(method_list)
        return compare

    @pytest.fixture(name='cb_env')
    def couchbase_test_environment(self, cb_base_env, test_manifest_validated):
        if test_manifest_validated:
            pytest.fail(f'Test manifest not validated.  Missing tests: {test_manifest_validated}.')

        cb_base_env.mgr = cb_base_env.bucket.collections()
        yield cb_base_env
        cb_base_env.mgr = None
