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

import copy
from datetime import timedelta
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    List,
                    Optional,
                    overload)

from cbbucket._utils import timedelta_as_microseconds, to_microseconds

if TYPE_CHECKING:
    from cbbucket._utils import JSONType
    from cbbucket.management.logic.view_index_logic import DesignDocumentNamespace
    from cbbucket.mutation_state import MutationState
    from cbbucket.n1ql import QueryProfile, QueryScanConsistency
    from cbbucket.views import (ViewErrorMode,
                                ViewOrdering,
                                ViewScanConsistency)


OptionsBase = dict


class OptionsTimeoutBase(OptionsBase):
    def __init__(self,
                 timeout=None,  # type: Optional[timedelta]
                 **kwargs  # type: Dict[str, Any]
                 ) -> None:
        """
        Base options with timeout option
        :param timeout: Timeout for this operation
        """
        if timeout:
            kwargs["timeout"] = timeout

        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(**kwargs)

    def timeout(self,
                timeout,  # type: timedelta
                ) -> OptionsTimeoutBase:
        self["timeout"] = timeout
        return self


"""

Cluster options

"""


class ClusterOptions(dict):
    """Available options to set when creating a cluster.

    The timeouts are applied to any request that does not provide its own ``timeout``.

    Args:
        query_timeout (timedelta, optional): Default timeout for N1QL (SQL++) queries.
        view_timeout (timedelta, optional): Default timeout for view queries.
        management_timeout (timedelta, optional): Default timeout for management operations.
    """

    _VALID_OPTS = {
        "query_timeout": {"query_timeout": timedelta_as_microseconds},
        "view_timeout": {"view_timeout": timedelta_as_microseconds},
        "views_timeout": {"view_timeout": timedelta_as_microseconds},
        "management_timeout": {"management_timeout": timedelta_as_microseconds},
    }

    @overload
    def __init__(
        self,
        query_timeout=None,  # type: Optional[timedelta]
        view_timeout=None,  # type: Optional[timedelta]
        management_timeout=None,  # type: Optional[timedelta]
    ):
        pass

    def __init__(self, **kwargs):
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(**kwargs)

    def as_dict(self) -> Dict[str, int]:
        """**INTERNAL**

        Returns the configured timeouts, in microseconds.
        """
        timeouts = {}
        for opt_key, opt_value in self.items():
            if opt_key not in self._VALID_OPTS:
                continue
            for final_key, transform in self._VALID_OPTS[opt_key].items():
                timeouts[final_key] = transform(opt_value)
        return timeouts


"""

N1QL (SQL++) options

"""


class QueryOptions(dict):
    """Available options to for a N1QL (SQL++) query.

    Args:
        timeout (timedelta, optional): The timeout for this operation. Defaults to global
            query operation timeout.
        read_only (bool, optional): Specifies that this query should be executed in read-only mode,
            disabling the ability for the query to make any changes to the data. Defaults to False.
        scan_consistency (:class:`~cbbucket.n1ql.QueryScanConsistency`, optional): Specifies the consistency
            requirements when executing the query.
        adhoc (bool, optional): Specifies whether this is an ad-hoc query, or if it should be prepared for
            faster execution in the future. Defaults to True.
        client_context_id (str, optional): The returned client context id for this query. Defaults to None.
        max_parallelism (int, optional): This is an advanced option, see the query service reference for more
            information on the proper use and tuning of this option. Defaults to None.
        pipeline_batch (int, optional): This is an advanced option, see the query service reference for more
            information on the proper use and tuning of this option. Defaults to None.
        pipeline_cap (int, optional):  This is an advanced option, see the query service reference for more
            information on the proper use and tuning of this option. Defaults to None.
        profile (:class:`~cbbucket.n1ql.QueryProfile`, optional): Specifies the level of profiling that should
            be used for the query. Defaults to `Off`.
        scan_cap (int, optional):  This is an advanced option, see the query service reference for more
            information on the proper use and tuning of this option. Defaults to None.
        metrics (bool, optional): Specifies whether metrics should be captured as part of the execution of the query.
            Defaults to False.
        consistent_with (:class:`~cbbucket.mutation_state.MutationState`, optional): Specifies a
            :class:`~cbbucket.mutation_state.MutationState` which the query should be consistent with. Defaults to
            None.
        raw (Dict[str, Any], optional): Specifies any additional parameters which should be passed to the query engine
            when executing the query. Defaults to None.

    .. note::
        ``bucket`` is reserved.  It is set by :meth:`~cbbucket.bucket.Bucket.query` and providing it
        on a bucket level query raises :class:`~cbbucket.exceptions.InvalidConfigurationException`.
    """

    @overload
    def __init__(
        self,
        timeout=None,  # type: Optional[timedelta]
        read_only=None,  # type: Optional[bool]
        scan_consistency=None,  # type: Optional[QueryScanConsistency]
        adhoc=None,  # type: Optional[bool]
        client_context_id=None,  # type: Optional[str]
        max_parallelism=None,  # type: Optional[int]
        pipeline_batch=None,  # type: Optional[int]
        pipeline_cap=None,  # type: Optional[int]
        profile=None,  # type: Optional[QueryProfile]
        scan_cap=None,  # type: Optional[int]
        metrics=None,  # type: Optional[bool]
        consistent_with=None,  # type: Optional[MutationState]
        raw=None,  # type: Optional[Dict[str,Any]]
    ):
        pass

    def __init__(self, **kwargs):
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(**kwargs)


"""

View options

"""


class ViewOptions(OptionsTimeoutBase):
    """Available options to for a view query.

    Args:
        timeout (timedelta, optional): The timeout for this operation. Defaults to global
            view operation timeout.
        include_docs (bool, optional): Specifies whether the emitted documents should be fetched and
            returned along w/ each row.
        stale (:class:`~cbbucket.views.ViewScanConsistency`, optional): Specifies the index update mode.
        skip (int, optional): Number of rows to skip.
        limit (int, optional): Maximum number of rows to return.
        order (:class:`~cbbucket.views.ViewOrdering`, optional): Specifies the result ordering.
        reduce (Union[bool, str], optional): Specifies whether the reduce function should be applied.
        group (bool, optional): Groups the results using the reduce function.
        group_level (int, optional): Specifies the depth within the key to group results.
        key (JSONType, optional): Only return rows w/ the given key.
        keys (List[JSONType], optional): Only return rows w/ one of the given keys.
        range (Dict[str, Any], optional): Key range, ``{'start': ..., 'end': ..., 'inclusive_end': bool}``.
        id_range (Dict[str, str], optional): Document id range, ``{'start': ..., 'end': ...}``.
        full_set (bool, optional): Query all nodes of the cluster, development views only.
        on_error (:class:`~cbbucket.views.ViewErrorMode`, optional): Specifies the behavior when a node errors.
        namespace (:class:`~cbbucket.management.views.DesignDocumentNamespace`, optional): Specifies the
            design document namespace.  Defaults to production.
        debug (bool, optional): Ask the view engine for debug information.
        client_context_id (str, optional): The returned client context id for this query.
        raw (Dict[str, Any], optional): Specifies any additional parameters which should be passed to the view
            engine when executing the query.
    """

    @overload
    def __init__(self,
                 timeout=None,               # type: Optional[timedelta]
                 include_docs=None,          # type: Optional[bool]
                 stale=None,                 # type: Optional[ViewScanConsistency]
                 skip=None,                  # type: Optional[int]
                 limit=None,                 # type: Optional[int]
                 order=None,                 # type: Optional[ViewOrdering]
                 reduce=None,                # type: Optional[bool]
                 group=None,                 # type: Optional[bool]
                 group_level=None,           # type: Optional[int]
                 key=None,                   # type: Optional[JSONType]
                 keys=None,                  # type: Optional[List[JSONType]]
                 range=None,                 # type: Optional[Dict[str, Any]]
                 id_range=None,              # type: Optional[Dict[str, str]]
                 full_set=None,              # type: Optional[bool]
                 on_error=None,              # type: Optional[ViewErrorMode]
                 namespace=None,             # type: Optional[DesignDocumentNamespace]
                 debug=None,                 # type: Optional[bool]
                 client_context_id=None,     # type: Optional[str]
                 raw=None                    # type: Optional[Dict[str, Any]]
                 ):
        pass

    def __init__(self, **kwargs):
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        super().__init__(**kwargs)


"""

Management options

"""


class GetDesignDocumentOptions(OptionsTimeoutBase):
    pass


class GetAllDesignDocumentsOptions(OptionsTimeoutBase):
    pass


class UpsertDesignDocumentOptions(OptionsTimeoutBase):
    pass


class DropDesignDocumentOptions(OptionsTimeoutBase):
    pass


class PublishDesignDocumentOptions(OptionsTimeoutBase):
    pass


class GetAllScopesOptions(OptionsTimeoutBase):
    pass


class CreateScopeOptions(OptionsTimeoutBase):
    pass


class DropScopeOptions(OptionsTimeoutBase):
    pass


class CreateCollectionOptions(OptionsTimeoutBase):
    pass


class DropCollectionOptions(OptionsTimeoutBase):
    pass


def forward_args(arg_vars,  # type: Optional[Dict[str, Any]]
                 *options  # type: OptionsBase
                 ) -> Dict[str, Any]:
    """**INTERNAL**

    Merges the first options object w/ keyword overrides into a new dict.  Dispatch
    plumbing keywords are dropped and ``timeout`` is converted to microseconds.
    """
    temp_options = copy.copy(options[0]) if (options and options[0]) else OptionsBase()
    arg_vars = {k: v for k, v in (arg_vars or {}).items() if k not in ('callback', 'errback', 'handler')}
    temp_options.update(arg_vars)

    end_options = {k: v for k, v in temp_options.items() if v is not None}
    if 'timeout' in end_options:
        end_options['timeout'] = to_microseconds(end_options['timeout'])
    return end_options
