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

import logging
from functools import wraps

from cbbucket.exceptions import ErrorMapper, MissingConnectionException
from cbbucket.logic.wrappers import AsyncWrapper, call_async_fn
from cbbucket.management.logic import (ManagementType,
                                       handle_collection_mgmt_response,
                                       handle_view_index_mgmt_response)

logger = logging.getLogger(__name__)


class AsyncMgmtWrapper:

    @classmethod   # noqa: C901
    def inject_callbacks(cls, return_cls, mgmt_type, error_map):   # noqa: C901
        """**INTERNAL**

        Wraps a management method that dispatches a single connector RPC.  A trailing callable
        positional argument (or the ``handler`` keyword) is treated as the completion handler.
        """

        def decorator(fn):
            @wraps(fn)
            def wrapped_fn(self, *args, **kwargs):
                handler = kwargs.pop('handler', None)
                if handler is None and args and callable(args[-1]):
                    args, handler = args[:-1], args[-1]
                loop = self.loop
                ft = loop.create_future()

                def on_ok(ret):
                    try:
                        if return_cls is None:
                            retval = None
                        elif return_cls is True:
                            retval = ret
                        elif mgmt_type == ManagementType.CollectionMgmt:
                            retval = handle_collection_mgmt_response(ret, fn.__name__, return_cls)
                        elif mgmt_type == ManagementType.ViewIndexMgmt:
                            retval = handle_view_index_mgmt_response(ret, fn.__name__, return_cls)
                        else:
                            retval = None
                    except Exception as ex:
                        AsyncWrapper.settle(loop, ft, handler, exc=ex)
                    else:
                        AsyncWrapper.settle(loop, ft, handler, result=retval)

                def on_err(exc):
                    excptn = ErrorMapper.build_exception(exc, mapping=error_map)
                    AsyncWrapper.settle(loop, ft, handler, exc=excptn)

                kwargs["callback"] = on_ok
                kwargs["errback"] = on_err

                if not self._connection:
                    exc = MissingConnectionException('Not connected.  Cannot perform management operation.')
                    loop.call_soon(AsyncWrapper.settle, loop, ft, handler, None, exc)
                else:
                    logger.debug('Dispatching %s.%s.', mgmt_type.value, fn.__name__)
                    call_async_fn(ft, handler, self, fn, *args, **kwargs)

                return ft

            return wrapped_fn

        return decorator
