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
from typing import (TYPE_CHECKING,
                    Any,
                    Awaitable,
                    Dict,
                    Iterable,
                    Optional,
                    Union)

from cbbucket.logic.wrappers import AsyncWrapper
from cbbucket.management.logic import ManagementType
from cbbucket.management.logic.view_index_logic import (DesignDocument,
                                                        DesignDocumentNamespace,
                                                        View,
                                                        ViewIndexManagerLogic)
from cbbucket.management.logic.wrappers import AsyncMgmtWrapper

if TYPE_CHECKING:
    from cbbucket.connector import Connector
    from cbbucket.options import (DropDesignDocumentOptions,
                                  GetAllDesignDocumentsOptions,
                                  GetDesignDocumentOptions,
                                  PublishDesignDocumentOptions,
                                  UpsertDesignDocumentOptions)

__all__ = ['DesignDocument', 'DesignDocumentNamespace', 'View', 'ViewIndexManager']


class ViewIndexManager(ViewIndexManagerLogic):
    """Manages the design documents (view indexes) of a bucket.

    Every method returns an awaitable.  When a completion handler is passed as the last
    positional argument it is called w/ ``(err, result)`` and the awaitable resolves to ``None``.
    """

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

    @AsyncMgmtWrapper.inject_callbacks(DesignDocument, ManagementType.ViewIndexMgmt,
                                       ViewIndexManagerLogic._ERROR_MAPPING)
    def get_design_document(self,
                            design_doc_name,  # type: str
                            namespace,  # type: Union[DesignDocumentNamespace, str]
                            *options,   # type: GetDesignDocumentOptions
                            **kwargs    # type: Dict[str, Any]
                            ) -> Awaitable[DesignDocument]:
        super().get_design_document(design_doc_name, namespace, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(DesignDocument, ManagementType.ViewIndexMgmt,
                                       ViewIndexManagerLogic._ERROR_MAPPING)
    def get_all_design_documents(self,
                                 namespace,     # type: Union[DesignDocumentNamespace, str]
                                 *options,      # type: GetAllDesignDocumentsOptions
                                 **kwargs       # type: Dict[str, Any]
                                 ) -> Awaitable[Iterable[DesignDocument]]:
        super().get_all_design_documents(namespace, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.ViewIndexMgmt, ViewIndexManagerLogic._ERROR_MAPPING)
    def upsert_design_document(self,
                               design_doc_data,     # type: DesignDocument
                               namespace,           # type: Union[DesignDocumentNamespace, str]
                               *options,            # type: UpsertDesignDocumentOptions
                               **kwargs             # type: Dict[str, Any]
                               ) -> Awaitable[None]:
        super().upsert_design_document(design_doc_data, namespace, *options, **kwargs)

    @AsyncMgmtWrapper.inject_callbacks(None, ManagementType.ViewIndexMgmt, ViewIndexManagerLogic._ERROR_MAPPING)
    def drop_design_document(self,
                             design_doc_name,   # type: str
                             namespace,         # type: Union[DesignDocumentNamespace, str]
                             *options,          # type: DropDesignDocumentOptions
                             **kwargs           # type: Dict[str, Any]
                             ) -> Awaitable[None]:
        super().drop_design_document(design_doc_name, namespace, *options, **kwargs)

    def publish_design_document(self,
                                design_doc_name,    # type: str
                                *options,           # type: PublishDesignDocumentOptions
                                **kwargs            # type: Dict[str, Any]
                                ) -> Awaitable[None]:
        """Copies a design document from the development namespace to production."""
        handler = kwargs.pop('handler', None)
        if handler is None and options and callable(options[-1]):
            options, handler = options[:-1], options[-1]

        async def _publish():
            doc = await self.get_design_document(
                design_doc_name, DesignDocumentNamespace.DEVELOPMENT, *options, **kwargs)
            await self.upsert_design_document(
                doc, DesignDocumentNamespace.PRODUCTION, *options, **kwargs)

        return AsyncWrapper.from_coroutine(self.loop, _publish(), handler)
