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

import pytest

pytest_plugins = [
    'tests.environments.test_environment'
]

_UNIT_TESTS = [
    "cbbucket/tests/args_t.py::ClassicArgumentNormalizerTests",
    "cbbucket/tests/query_params_t.py::ClassicQueryParamTests",
    "cbbucket/tests/views_params_t.py::ClassicViewsParamTests",
    "cbbucket/tests/logging_t.py::ClassicLoggingTests",
    "cbbucket/tests/bucket_t.py::BucketTests",
    "cbbucket/tests/cluster_t.py::ClusterTests",
]

_STREAMING_TESTS = [
    "cbbucket/tests/emitter_t.py::RowEmitterTests",
    "cbbucket/tests/emitter_t.py::RowEmitterAdapterTests",
    "cbbucket/tests/query_t.py::BucketQueryTests",
    "cbbucket/tests/views_t.py::BucketViewsTests",
]

_MGMT_TESTS = [
    "cbbucket/tests/viewmgmt_t.py::ViewIndexManagementTests",
    "cbbucket/tests/collectionmgmt_t.py::CollectionManagementTests",
]


def pytest_collection_modifyitems(items):
    for item in items:
        item_details = item.nodeid.split('::')
        test_class_path = '::'.join(item_details[:-1])
        if test_class_path in _UNIT_TESTS:
            item.add_marker(pytest.mark.pycbc_unit)
        elif test_class_path in _STREAMING_TESTS:
            item.add_marker(pytest.mark.pycbc_streaming)
        elif test_class_path in _MGMT_TESTS:
            item.add_marker(pytest.mark.pycbc_mgmt)
