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

import json
from datetime import timedelta
from enum import Enum
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    Iterable,
                    Optional,
                    Union)

from cbbucket._utils import (to_microseconds,
                             validate_bool,
                             validate_int,
                             validate_str)
from cbbucket.exceptions import InvalidArgumentException

if TYPE_CHECKING:
    from cbbucket._utils import JSONType
    from cbbucket.mutation_state import MutationState  # noqa: F401


class QueryScanConsistency(Enum):
    """
    Represents the various scan consistency options that are available when querying against the query service.
    """

    NOT_BOUNDED = "not_bounded"
    REQUEST_PLUS = "request_plus"
    AT_PLUS = "at_plus"


class QueryProfile(Enum):
    """
    Specifies the profiling mode for a query.
    """

    OFF = "off"
    PHASES = "phases"
    TIMINGS = "timings"


class N1QLQuery:

    # option name -> {attribute: transform}; aliases map onto the same attribute
    _VALID_OPTS = {
        "timeout": {"timeout": lambda x: x},
        "read_only": {"readonly": validate_bool},
        "readonly": {"readonly": validate_bool},
        "scan_consistency": {"consistency": lambda x: x},
        "consistency": {"consistency": lambda x: x},
        "consistent_with": {"consistent_with": lambda x: x},
        "adhoc": {"adhoc": validate_bool},
        "client_context_id": {"client_context_id": validate_str},
        "max_parallelism": {"max_parallelism": validate_int},
        "pipeline_batch": {"pipeline_batch": validate_int},
        "pipeline_cap": {"pipeline_cap": validate_int},
        "profile": {"profile": lambda x: x},
        "raw": {"raw": lambda x: x},
        "scan_cap": {"scan_cap": validate_int},
        "metrics": {"metrics": validate_bool},
        "bucket": {"bucket_name": validate_str},
    }

    def __init__(self, query, *args, **kwargs):
        self._params = {"statement": query}
        if args:
            self._add_pos_args(*args)
        if kwargs:
            self._set_named_args(**kwargs)

    def _set_named_args(self, **kv):
        """
        Set a named parameter in the query. The named field must
        exist in the query itself.

        :param kv: Key-Value pairs representing values within the
            query. These values should be stripped of their leading
            `$` identifier.

        """
        arg_dict = self._params.setdefault("named_parameters", {})
        arg_dict.update(kv)

    def _add_pos_args(self, *args):
        """
        Set values for *positional* placeholders (``$1,$2,...``)

        :param args: Values to be used
        """
        arg_array = self._params.setdefault("positional_parameters", [])
        arg_array.extend(args)

    def set_option(self, name, value):
        """
        Set a raw option in the query. This option is encoded
        as part of the query parameters without any client-side
        verification. Use this for settings not directly exposed
        by the Python client.

        :param name: The name of the option
        :param value: The value of the option
        """
        self._params[name] = value

    @property
    def params(self) -> Dict[str, Any]:
        params = dict(self._params)

        # the connector expects JSON encoded args
        raw = params.pop('raw', None)
        if raw:
            params['raw'] = {f'{k}': json.dumps(v) for k, v in raw.items()}

        positional_args = params.pop('positional_parameters', None)
        if positional_args:
            params['positional_parameters'] = [json.dumps(arg) for arg in positional_args]

        named_params = params.pop('named_parameters', None)
        if named_params:
            params['named_parameters'] = {self._named_key(k): json.dumps(v) for k, v in named_params.items()}
        return params

    def as_encodable(self) -> Dict[str, Any]:
        return self.params

    @staticmethod
    def _named_key(key  # type: str
                   ) -> str:
        return key if key.startswith('$') else f'${key}'

    @property
    def statement(self) -> str:
        return self._params['statement']

    @property
    def bucket_name(self) -> Optional[str]:
        return self._params.get('bucket_name', None)

    @bucket_name.setter
    def bucket_name(self, value  # type: str
                    ) -> None:
        self.set_option('bucket_name', value)

    @property
    def metrics(self) -> bool:
        return self._params.get('metrics', False)

    @metrics.setter
    def metrics(self, value  # type: bool
                ) -> None:
        self.set_option('metrics', value)

    @property
    def timeout(self) -> Optional[int]:
        return self._params.get('timeout', None)

    @timeout.setter
    def timeout(self, value  # type: Union[timedelta,float,int]
                ) -> None:
        if not value:
            self._params.pop('timeout', 0)
        else:
            total_us = to_microseconds(value)
            self.set_option('timeout', total_us)

    @property
    def readonly(self) -> bool:
        return self._params.get('readonly', False)

    @readonly.setter
    def readonly(self, value  # type: bool
                 ) -> None:
        self._params['readonly'] = value

    @property
    def consistency(self) -> QueryScanConsistency:
        value = self._params.get(
            'scan_consistency', None
        )
        if value is None and 'mutation_state' in self._params:
            return QueryScanConsistency.AT_PLUS
        if value is None:
            return QueryScanConsistency.NOT_BOUNDED
        return QueryScanConsistency.REQUEST_PLUS if value == 'request_plus' else QueryScanConsistency.NOT_BOUNDED

    @consistency.setter
    def consistency(self, value  # type: Union[QueryScanConsistency, str]
                    ) -> None:
        if isinstance(value, QueryScanConsistency):
            value = value.value
        elif not (isinstance(value, str) and value in [sc.value for sc in QueryScanConsistency]):
            raise InvalidArgumentException(message=("Excepted consistency to be either of type "
                                                    "QueryScanConsistency or str representation "
                                                    "of QueryScanConsistency"))

        if value == QueryScanConsistency.AT_PLUS.value:
            raise InvalidArgumentException(message=("Cannot set consistency to AT_PLUS.  Use "
                                                    "consistent_with instead or set consistency "
                                                    "to NOT_BOUNDED or REQUEST_PLUS"))
        if 'mutation_state' in self._params:
            raise InvalidArgumentException(message='consistency is not valid w/ consistent_with.')
        self.set_option('scan_consistency', value)

    @property
    def consistent_with(self) -> Dict[str, Any]:
        return {
            'consistency': self.consistency,
            'scan_vectors': self._params.get('mutation_state', None)
        }

    @consistent_with.setter
    def consistent_with(self, value  # type: MutationState
                        ):
        """
        Indicate that the query should be consistent with one or more
        mutations.

        :param value: The state of the mutations it should be consistent
            with.
        :type state: :class:`~cbbucket.mutation_state.MutationState`
        """
        if self.consistency != QueryScanConsistency.NOT_BOUNDED:
            raise InvalidArgumentException(message='consistent_with not valid with other consistency options')

        # avoid circular import
        from cbbucket.mutation_state import MutationState  # noqa: F811
        if not (isinstance(value, MutationState) and len(value) > 0):
            raise InvalidArgumentException(message='Passed empty or invalid state')
        self._params.pop('scan_consistency', None)
        self.set_option('mutation_state', value.as_list())

    @property
    def adhoc(self) -> bool:
        return self._params.get('adhoc', True)

    @adhoc.setter
    def adhoc(self, value  # type: bool
              ) -> None:
        self.set_option('adhoc', value)

    @property
    def client_context_id(self) -> Optional[str]:
        return self._params.get('client_context_id', None)

    @client_context_id.setter
    def client_context_id(self, value  # type: str
                          ) -> None:
        self.set_option('client_context_id', value)

    @property
    def max_parallelism(self) -> Optional[int]:
        return self._params.get('max_parallelism', None)

    @max_parallelism.setter
    def max_parallelism(self, value  # type: int
                        ) -> None:
        self.set_option('max_parallelism', value)

    @property
    def pipeline_batch(self) -> Optional[int]:
        return self._params.get('pipeline_batch', None)

    @pipeline_batch.setter
    def pipeline_batch(self, value  # type: int
                       ) -> None:
        self.set_option('pipeline_batch', value)

    @property
    def pipeline_cap(self) -> Optional[int]:
        return self._params.get('pipeline_cap', None)

    @pipeline_cap.setter
    def pipeline_cap(self, value  # type: int
                     ) -> None:
        self.set_option('pipeline_cap', value)

    @property
    def profile(self) -> QueryProfile:
        value = self._params.get(
            'profile_mode', None
        )
        if value is None:
            return QueryProfile.OFF
        return QueryProfile(value)

    @profile.setter
    def profile(self, value  # type: Union[QueryProfile, str]
                ) -> None:
        if isinstance(value, QueryProfile):
            self.set_option('profile_mode', value.value)
        elif isinstance(value, str) and value in [pm.value for pm in QueryProfile]:
            self.set_option('profile_mode', value)
        else:
            raise InvalidArgumentException(message=("Excepted profile to be either of type "
                                                    "QueryProfile or str representation of QueryProfile"))

    @property
    def scan_cap(self) -> Optional[int]:
        return self._params.get('scan_cap', None)

    @scan_cap.setter
    def scan_cap(self, value  # type: int
                 ) -> None:
        self.set_option('scan_cap', value)

    @property
    def raw(self) -> Optional[Dict[str, Any]]:
        return self._params.get('raw', None)

    @raw.setter
    def raw(self, value  # type: Dict[str, Any]
            ) -> None:
        if not isinstance(value, dict):
            raise InvalidArgumentException(message="Raw option must be of type Dict[str, Any].")
        for k in value.keys():
            if not isinstance(k, str):
                raise InvalidArgumentException(message="key for raw value must be str")
        self.set_option('raw', value)

    @classmethod
    def create_query_object(cls,
                            statement,  # type: str
                            params=None,  # type: Optional[Union[Iterable[JSONType], Dict[str, JSONType]]]
                            options=None  # type: Optional[Dict[str, Any]]
                            ) -> N1QLQuery:
        if not isinstance(statement, str) or not statement:
            raise InvalidArgumentException(message='Expected statement to be a non-empty str.')

        if params is None:
            query = cls(statement)
        elif isinstance(params, dict):
            query = cls(statement, **params)
        elif isinstance(params, (list, tuple)):
            query = cls(statement, *params)
        else:
            raise InvalidArgumentException(message=('Expected query params to be a list (positional) '
                                                    f'or a dict (named) instead of {type(params)}.'))

        args = options or {}
        unknown = args.keys() - cls._VALID_OPTS.keys()
        if unknown:
            raise InvalidArgumentException(message=f'Invalid query option(s): {sorted(unknown)}.')

        # consistent_with is validated against any provided consistency, so apply it last
        for k in sorted(args.keys(), key=lambda x: x == 'consistent_with'):
            for target, transform in cls._VALID_OPTS[k].items():
                setattr(query, target, transform(args[k]))
        return query
