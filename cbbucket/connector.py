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

"""
Interface of the native connector the handles dispatch to.

The connector owns the network, clustering and wire protocol concerns.  Handles only
shape requests and consume results, so a connector is free to complete operations
from any thread; results are always marshalled back onto the event loop.
"""

from abc import ABCMeta, abstractmethod
from typing import (TYPE_CHECKING,
                    Any,
                    Callable,
                    Dict)

if TYPE_CHECKING:
    from cbbucket.logic.emitter import RowEmitter


class Connector(metaclass=ABCMeta):

    @abstractmethod
    def n1ql_query(self,
                   query_args,  # type: Dict[str, Any]
                   callback,  # type: Callable[[Any], None]
                   errback  # type: Callable[[Exception], None]
                   ) -> None:
        """Executes a N1QL (SQL++) query.

        Must eventually call exactly one of ``callback(raw_result)`` or ``errback(exc)``.
        """

    @abstractmethod
    def view_query(self,
                   op_args,  # type: Dict[str, Any]
                   emitter  # type: RowEmitter
                   ) -> None:
        """Executes a view query, pushing each row to ``emitter.emit_row`` and finishing w/
        ``emitter.emit_end(meta)`` or ``emitter.emit_error(exc)``.
        """

    @abstractmethod
    def management_operation(self,
                             mgmt_type,  # type: str
                             op_type,  # type: str
                             op_args,  # type: Dict[str, Any]
                             callback,  # type: Callable[[Any], None]
                             errback  # type: Callable[[Exception], None]
                             ) -> None:
        """Executes a management RPC.

        Must eventually call exactly one of ``callback(raw_result)`` or ``errback(exc)``.
        """

    def close(self) -> None:
        """Releases the connector's resources.  Called by the owning cluster."""
