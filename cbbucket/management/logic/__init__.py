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

from enum import Enum
from typing import (Any,
                    Dict,
                    List,
                    Union)


class ManagementType(Enum):
    ViewIndexMgmt = 'view_index'
    CollectionMgmt = 'collection'


class ViewIndexMgmtOperations(Enum):
    GET_INDEX = 'get_index'
    GET_ALL_INDEXES = 'get_all_indexes'
    UPSERT_INDEX = 'upsert_index'
    DROP_INDEX = 'drop_index'


class CollectionMgmtOperations(Enum):
    GET_ALL_SCOPES = 'get_all_scopes'
    CREATE_SCOPE = 'create_scope'
    DROP_SCOPE = 'drop_scope'
    CREATE_COLLECTION = 'create_collection'
    DROP_COLLECTION = 'drop_collection'


def handle_view_index_mgmt_response(ret,  # type: Union[Dict[str, Any], List[Dict[str, Any]]]
                                    fn_name,  # type: str
                                    return_cls
                                    ) -> Any:
    if fn_name == 'get_design_document':
        raw = ret.get('design_document', ret) if isinstance(ret, dict) else ret
        return return_cls.from_json(raw)
    if fn_name == 'get_all_design_documents':
        raw_docs = ret.get('design_documents', []) if isinstance(ret, dict) else ret
        return [return_cls.from_json(d) for d in (raw_docs or [])]
    return None


def handle_collection_mgmt_response(ret,  # type: Union[Dict[str, Any], List[Dict[str, Any]]]
                                    fn_name,  # type: str
                                    return_cls
                                    ) -> Any:
    if fn_name == 'get_all_scopes':
        scope_cls, collection_cls = return_cls
        raw_scopes = ret.get('scopes', []) if isinstance(ret, dict) else ret
        scopes = []
        for s in (raw_scopes or []):
            collections = [collection_cls.from_dict(c, s['name']) for c in s.get('collections', [])]
            scopes.append(scope_cls(s['name'], collections))
        return scopes
    return None
