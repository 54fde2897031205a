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
import logging
from datetime import timedelta
from typing import (TYPE_CHECKING,
                    Any,
                    Awaitable,
                    Callable,
                    Dict,
                    Optional,
                    Union)

from cbbucket._utils import normalize_options, resolve_overloaded_args
from cbbucket.bucket import Bucket
from cbbucket.exceptions import InvalidArgumentException
from cbbucket.logic.wrappers import AsyncWrapper
from cbbucket.n1ql import N1QLQuery
from cbbucket.options import ClusterOptions
from cbbucket.result import QueryResult

if TYPE_CHECKING:
    from cbbucket._utils import CompletionHandler, JSONType
    from cbbucket.connector import Connector
    from cbbucket.options import QueryOptions

logger = logging.getLogger(__name__)


class Cluster:
    """Create a Cluster instance.

    The cluster owns the connectors.  One connector is created per bucket name (and one for
    cluster level requests) the first time it is needed and is shared by every handle
    referencing that bucket.

    Args:
        connector_factory (Callable[[Optional[str]], :class:`~cbbucket.connector.Connector`]): Creates the connector
            for a bucket name (``None`` for the cluster level connector).
        options (:class:`~cbbucket.options.ClusterOptions`, optional): Global options to set for the cluster.
        loop (`asyncio.AbstractEventLoop`, optional): The event loop results are delivered on.  Defaults to the
            loop running when an operation is issued.

    Raises:
        :class:`~cbbucket.exceptions.InvalidArgumentException`: If an unknown cluster option is provided.
    """

    def __init__(self,
                 connector_factory,  # type: Callable[[Optional[str]], Connector]
                 options=None,  # type: Optional[Union[ClusterOptions, Dict[str, Any]]]
                 loop=None  # type: Optional[asyncio.AbstractEventLoop]
                 ):
        if not callable(connector_factory):
            raise InvalidArgumentException(message='Expected connector_factory to be callable.')
        cluster_opts = ClusterOptions(**(options or {}))
        unknown = cluster_opts.keys() - ClusterOptions._VALID_OPTS.keys()
        if unknown:
            raise InvalidArgumentException(message=f'Invalid cluster option(s): {sorted(unknown)}.')
        self._connector_factory = connector_factory
        self._default_timeouts = cluster_opts.as_dict()
        self._loop = loop
        self._connections = {}  # type: Dict[Optional[str], Connector]

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        """
        **INTERNAL**
        """
        return self._loop or asyncio.get_running_loop()

    @property
    def explicit_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        """
        **INTERNAL**
        """
        return self._loop

    @property
    def default_timeouts(self) -> Dict[str, int]:
        """
        **INTERNAL**

        The default request timeouts, in microseconds.
        """
        return self._default_timeouts

    @property
    def connection(self) -> Connector:
        """
        **INTERNAL**
        """
        return self._get_conn()

    def _get_conn(self,
                  bucket_name=None  # type: Optional[str]
                  ) -> Connector:
        conn = self._connections.get(bucket_name, None)
        if conn is None:
            logger.debug('Creating connector for bucket %s.', bucket_name)
            conn = self._connections[bucket_name] = self._connector_factory(bucket_name)
        return conn

    def close(self) -> None:
        """Shuts down this cluster instance, closing every connector it created."""
        connections, self._connections = self._connections, {}
        for bucket_name, conn in connections.items():
            logger.debug('Closing connector for bucket %s.', bucket_name)
            conn.close()

    def bucket(self, bucket_name  # type: str
               ) -> Bucket:
        """Creates a Bucket instance to a specific bucket.

        A new :class:`~cbbucket.bucket.Bucket` is returned on every call; the connector is shared.

        Args:
            bucket_name (str): Name of the bucket to reference

        Returns:
            :class:`~cbbucket.bucket.Bucket`: A bucket instance
        """
        return Bucket(self, bucket_name)

    def query(self,
              statement,  # type: str
              params=None,  # type: Optional[Union[JSONType, CompletionHandler]]
              options=None,  # type: Optional[Union[QueryOptions, Dict[str, Any], CompletionHandler]]
              callback=None,  # type: Optional[CompletionHandler]
              **kwargs  # type: Dict[str, Any]
              ) -> Awaitable[QueryResult]:
        """Executes a N1QL (SQL++) query.

        When ``options`` names a ``bucket`` the query is dispatched through that bucket's connector.

        Args:
            statement (str): The N1QL (SQL++) statement to execute.
            params (Union[List[JSONType], Dict[str, JSONType]], optional): Positional (list) or named (dict)
                query parameters.
            options (:class:`~cbbucket.options.QueryOptions`, optional): Optional parameters for the query.
            callback (Callable[[Optional[Exception], Optional[QueryResult]], None], optional): Completion handler.
            **kwargs (Dict[str, Any]): keyword arguments that can be used in place or to
                override provided :class:`~cbbucket.options.QueryOptions`

        Returns:
            Awaitable[:class:`~cbbucket.result.QueryResult`]: The query result, or ``None`` when a completion
            handler is provided.
        """
        params, options, callback = resolve_overloaded_args(params, options, callback)
        query_options = normalize_options(options, **kwargs)
        if query_options.get('timeout', None) is None and self._default_timeouts.get('query_timeout', None):
            query_options['timeout'] = timedelta(microseconds=self._default_timeouts['query_timeout'])
        return self._query(statement, params, query_options, handler=callback)

    @AsyncWrapper.inject_callbacks(QueryResult)
    def _query(self,
               statement,  # type: str
               params,  # type: Optional[JSONType]
               options,  # type: Dict[str, Any]
               **kwargs  # type: Dict[str, Any]
               ) -> Awaitable[QueryResult]:
        query = N1QLQuery.create_query_object(statement, params, options)
        conn = self._get_conn(query.bucket_name)
        logger.debug('Dispatching query to connector for bucket %s.', query.bucket_name)
        conn.n1ql_query(query.as_encodable(),
                        callback=kwargs.pop('callback'),
                        errback=kwargs.pop('errback'))

    def __repr__(self):
        return f'Cluster(buckets={sorted(b for b in self._connections if b is not None)})'

