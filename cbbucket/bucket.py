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
from typing import (TYPE_CHECKING,
                    Any,
                    Awaitable,
                    Dict,
                    Optional,
                    Union)

from cbbucket._utils import normalize_options, resolve_overloaded_args
from cbbucket.collection import Collection
from cbbucket.logic.bucket import BucketLogic
from cbbucket.logic.wrappers import wrap_row_emitter
from cbbucket.management.collections import CollectionManager
from cbbucket.management.views import ViewIndexManager
from cbbucket.scope import Scope
from cbbucket.views import ViewExecutor, build_view_result

if TYPE_CHECKING:
    from cbbucket._utils import CompletionHandler, JSONType
    from cbbucket.cluster import Cluster
    from cbbucket.options import QueryOptions, ViewOptions
    from cbbucket.result import QueryResult, ViewResult

logger = logging.getLogger(__name__)


class Bucket(BucketLogic):
    """Create a Bucket instance.

    Exposes the operations which are available to be performed against a bucket.  Namely the ability to
    run N1QL (SQL++) and view queries against the bucket, reference its scopes and collections and
    manage its design documents and collections.

    Every operation accepts an optional completion handler as its last positional argument.  W/o a
    handler the returned awaitable resolves to the result.  W/ a handler, the handler is called w/
    ``(err, result)`` and the returned awaitable resolves to ``None``.

    Args:
        cluster (:class:`~cbbucket.cluster.Cluster`): A :class:`~cbbucket.cluster.Cluster` instance.
        bucket_name (str): Name of the bucket.
    """

    def __init__(self,
                 cluster,  # type: Cluster
                 bucket_name  # type: str
                 ):
        super().__init__(cluster, bucket_name)

    @property
    def loop(self):
        """
        **INTERNAL**
        """
        return self._cluster.loop

    def query(self,
              statement,  # type: str
              params=None,  # type: Optional[Union[JSONType, CompletionHandler]]
              options=None,  # type: Optional[Union[QueryOptions, Dict[str, Any], CompletionHandler]]
              callback=None,  # type: Optional[CompletionHandler]
              **kwargs  # type: Dict[str, Any]
              ) -> Awaitable[QueryResult]:
        """Executes a N1QL (SQL++) query against this bucket.

        ``query(q, fn)`` and ``query(q, params, fn)`` are equivalent to passing ``fn`` as ``callback``.

        Args:
            statement (str): The N1QL (SQL++) statement to execute.
            params (Union[List[JSONType], Dict[str, JSONType]], optional): Positional (list) or named (dict)
                query parameters.
            options (:class:`~cbbucket.options.QueryOptions`, optional): Optional parameters for the query.
                The caller's object is never modified.
            callback (Callable[[Optional[Exception], Optional[QueryResult]], None], optional): Completion handler.
            **kwargs (Dict[str, Any]): keyword arguments that can be used in place or to
                override provided :class:`~cbbucket.options.QueryOptions`

        Returns:
            Awaitable[:class:`~cbbucket.result.QueryResult`]: The query result, or ``None`` when a completion
            handler is provided.

        Raises:
            :class:`~cbbucket.exceptions.InvalidConfigurationException`: Synchronously, if the options
                already specify a bucket.
        """
        params, options, callback = resolve_overloaded_args(params, options, callback)
        query_options = self._bucket_query_options(normalize_options(options, **kwargs))
        logger.debug('Issuing query through bucket %s.', self._bucket_name)
        return self._cluster.query(statement, params, query_options, callback)

    def view_query(self,
                   design_doc,  # type: str
                   view_name,  # type: str
                   options=None,  # type: Optional[Union[ViewOptions, Dict[str, Any], CompletionHandler]]
                   callback=None,  # type: Optional[CompletionHandler]
                   **kwargs  # type: Dict[str, Any]
                   ) -> Awaitable[ViewResult]:
        """Executes a View query against the bucket.

        Rows are buffered in the order the connector produces them.

        Args:
            design_doc (str): The name of the design document containing the view to execute.
            view_name (str): The name of the view to execute.
            options (:class:`~cbbucket.options.ViewOptions`, optional): Optional parameters for the view query.
            callback (Callable[[Optional[Exception], Optional[ViewResult]], None], optional): Completion handler.
            **kwargs (Dict[str, Any]): keyword arguments that can be used in place or to
                override provided :class:`~cbbucket.options.ViewOptions`

        Returns:
            Awaitable[:class:`~cbbucket.result.ViewResult`]: The rows and metadata of the view query, or ``None``
            when a completion handler is provided.
        """
        options, callback = resolve_overloaded_args(options, callback)
        view_options = self._with_default_timeout(normalize_options(options, **kwargs),
                                                  self._cluster.default_timeouts.get('view_timeout', None))
        return self._view_query(design_doc, view_name, view_options, callback)

    def _view_query(self,
                    design_doc,  # type: str
                    view_name,  # type: str
                    options,  # type: Dict[str, Any]
                    callback  # type: Optional[CompletionHandler]
                    ) -> Awaitable[ViewResult]:
        executor = ViewExecutor(self._connection, self._bucket_name)
        emitter = executor.query(design_doc, view_name, options)
        return wrap_row_emitter(emitter, self.loop, callback, result_factory=build_view_result)

    def scope(self, name  # type: str
              ) -> Scope:
        """Creates a :class:`~cbbucket.scope.Scope` instance of the specified scope.

        Args:
            name (str): Name of the scope to reference.

        Returns:
            :class:`~cbbucket.scope.Scope`: A :class:`~cbbucket.scope.Scope` instance of the specified scope.
        """
        return Scope(self, name)

    def default_scope(self) -> Scope:
        """Creates a :class:`~cbbucket.scope.Scope` instance of the default scope.

        Returns:
            :class:`~cbbucket.scope.Scope`: A :class:`~cbbucket.scope.Scope` instance of the default scope.
        """
        return self.scope(Scope.DEFAULT_NAME)

    def collection(self, collection_name  # type: str
                   ) -> Collection:
        """Creates a :class:`~cbbucket.collection.Collection` instance of the specified collection.

        The collection is addressed through an unnamed scope, not through :meth:`default_scope`.

        Args:
            collection_name (str): Name of the collection to reference.

        Returns:
            :class:`~cbbucket.collection.Collection`: A :class:`~cbbucket.collection.Collection` instance of the
            specified collection.
        """
        scope = Scope(self, '')
        return scope.collection(collection_name)

    def default_collection(self) -> Collection:
        """Creates a :class:`~cbbucket.collection.Collection` instance of the default collection.

        Returns:
            :class:`~cbbucket.collection.Collection`: A :class:`~cbbucket.collection.Collection` instance of the
            default collection.
        """
        return self.collection('')

    def view_indexes(self) -> ViewIndexManager:
        """
        Get a :class:`~cbbucket.management.views.ViewIndexManager` which can be used to manage the design documents
        of this bucket.

        Returns:
            :class:`~cbbucket.management.views.ViewIndexManager`: A :class:`~cbbucket.management.views.ViewIndexManager`
            instance.
        """  # noqa: E501
        return ViewIndexManager(self._connection,
                                self._cluster.explicit_loop,
                                self._bucket_name,
                                default_timeout=self._cluster.default_timeouts.get('management_timeout', None))

    def collections(self) -> CollectionManager:
        """
        Get a :class:`~cbbucket.management.collections.CollectionManager` which can be used to manage the scopes and
        collections of this bucket.

        Returns:
            :class:`~cbbucket.management.collections.CollectionManager`: A
            :class:`~cbbucket.management.collections.CollectionManager` instance.
        """  # noqa: E501
        return CollectionManager(self._connection,
                                 self._cluster.explicit_loop,
                                 self._bucket_name,
                                 default_timeout=self._cluster.default_timeouts.get('management_timeout', None))

    def __repr__(self):
        return f'Bucket(name={self._bucket_name!r})'
