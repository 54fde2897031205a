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

from __future__ import annotations

import asyncio
from typing import (TYPE_CHECKING,
                    Any,
                    Awaitable,
                    Dict,
                    Iterable,
                    Optional)

from cbbucket.management.logic import ManagementType
from cbbucket.management.logic.collections_logic import (CollectionManagerLogic,
                                                         CollectionSpec,
                                                         ScopeSpec)
from cbbucket.management.logic.wrappers import AsyncMgmtWrapper

if TYPE_CHECKING:
    from cbbucket.connector import Connector
    from cbbucket.options import (CreateCollectionOptions,
                                  CreateScopeOptions,
                                  DropCollectionOptions,
                                  DropScopeOptions,
                                  GetAllScopesOptions)

__all__ = ['CollectionManager', 'CollectionSpec', 'ScopeSpec']


class CollectionManager(CollectionManagerLogic):

    def __init__(self,
                 connection,  # type: Connector
                 loop,  # type: Optional[asyncio.AbstractEventLoop]
                 bucket_name,  # type: str
                 default_timeout=None  # type: Optional[int]
                 ):
        super().__init__(connection, bucket_name, default_timeout=default_timeout)
        self._loop = loop

    @property
    def loop(self):
        """
        **INTERNAL**
        """
        return self._loop or asyncio.get_running_loop()

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.CollectionMgmt, CollectionManagerLogic._ERROR_MAPPING)
    def create_scope(self,
                     scope_name: str,
                     *options: CreateScopeOptions,
                     **kwargs: Dict[str, Any]
                     ) -> Awaitable[None]:
        super().create_scope(scope_name, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.CollectionMgmt, CollectionManagerLogic._ERROR_MAPPING)
    def drop_scope(self,
                   scope_name: str,
                   *options: DropScopeOptions,
                   **kwargs: Dict[str, Any]
                   ) -> Awaitable[None]:
        super().drop_scope(scope_name, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks((ScopeSpec, CollectionSpec), ManagementType.CollectionMgmt,
                                       CollectionManagerLogic._ERROR_MAPPING)
    def get_all_scopes(self,
                       *options: GetAllScopesOptions,
                       **kwargs: Dict[str, Any]
                       ) -> Awaitable[Iterable[ScopeSpec]]:
        super().get_all_scopes(*options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.CollectionMgmt, CollectionManagerLogic._ERROR_MAPPING)
    def create_collection(self,
                          scope_name: str,
                          collection_name: str,
                          *options: CreateCollectionOptions,
                          **kwargs: Dict[str, Any]
                          ) -> Awaitable[None]:
        super().create_collection(scope_name, collection_name, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.CollectionMgmt, CollectionManagerLogic._ERROR_MAPPING)
    def drop_collection(self,
                        scope_name: str,
                        collection_name: str,
                        *options: DropCollectionOptions,
                        **kwargs: Dict[str, Any]
                        ) -> Awaitable[None]:
        super().drop_collection(scope_name, collection_name, *options, **kwargs)
