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
import logging
from datetime import timedelta
from enum import Enum
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    List,
                    Optional,
                    Union)

from cbbucket._utils import (to_microseconds,
                             validate_bool,
                             validate_int,
                             validate_str)
from cbbucket.exceptions import InvalidArgumentException
from cbbucket.logic.emitter import RowEmitter
from cbbucket.management.logic.view_index_logic import DesignDocumentNamespace
from cbbucket.result import (ViewMetaData,
                             ViewResult,
                             ViewRow)

if TYPE_CHECKING:
    from cbbucket._utils import JSONType
    from cbbucket.connector import Connector

logger = logging.getLogger(__name__)


class ViewScanConsistency(Enum):
    NOT_BOUNDED = 'ok'
    REQUEST_PLUS = 'false'
    UPDATE_AFTER = 'update_after'


class ViewOrdering(Enum):
    DESCENDING = 'true'
    ASCENDING = 'false'


class ViewErrorMode(Enum):
    CONTINUE = 'continue'
    STOP = 'stop'


def _enum_value(enum_cls, name):
    def transform(value):
        if isinstance(value, enum_cls):
            return value.value
        if isinstance(value, str) and value in [e.value for e in enum_cls]:
            return value
        raise InvalidArgumentException(message=(f"Excepted {name} to be either of type "
                                                f"{enum_cls.__name__} or str representation "
                                                f"of {enum_cls.__name__}"))
    return transform


class ViewQuery:

    _VALID_OPTS = {
        "timeout": {"timeout": lambda x: x},
        "include_docs": {"include_docs": validate_bool},
        "stale": {"consistency": lambda x: x},
        "scan_consistency": {"consistency": lambda x: x},
        "skip": {"skip": validate_int},
        "limit": {"limit": validate_int},
        "order": {"order": lambda x: x},
        "reduce": {"reduce": lambda x: x},
        "group": {"group": validate_bool},
        "group_level": {"group_level": validate_int},
        "key": {"key": lambda x: x},
        "keys": {"keys": lambda x: x},
        "range": {"range": lambda x: x},
        "id_range": {"id_range": lambda x: x},
        "full_set": {"full_set": validate_bool},
        "on_error": {"on_error": lambda x: x},
        "namespace": {"namespace": lambda x: x},
        "debug": {"debug": validate_bool},
        "client_context_id": {"client_context_id": validate_str},
        "raw": {"raw": lambda x: x},
    }

    _RANGE_KEYS = {'start', 'end', 'inclusive_end'}
    _ID_RANGE_KEYS = {'start', 'end'}

    def __init__(self,
                 bucket_name,  # type: Optional[str]
                 design_doc_name,  # type: str
                 view_name,  # type: str
                 ):
        self._params = {
            'document_name': design_doc_name,
            'view_name': view_name
        }
        if bucket_name:
            self._params['bucket_name'] = bucket_name

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

    def as_encodable(self) -> Dict[str, Any]:
        return dict(self._params)

    @property
    def design_doc_name(self) -> str:
        return self._params['document_name']

    @property
    def view_name(self) -> str:
        return self._params['view_name']

    @property
    def timeout(self) -> Optional[int]:
        return self._params.get('timeout', None)

    @timeout.setter
    def timeout(self, value  # type: Union[timedelta,float,int]
                ) -> None:
        if not value:
            self._params.pop('timeout', 0)
        else:
            self.set_option('timeout', to_microseconds(value))

    @property
    def include_docs(self) -> bool:
        return self._params.get('include_docs', False)

    @include_docs.setter
    def include_docs(self, value  # type: bool
                     ) -> None:
        self.set_option('include_docs', value)

    @property
    def consistency(self) -> ViewScanConsistency:
        value = self._params.get('scan_consistency', None)
        if value is None:
            return ViewScanConsistency.NOT_BOUNDED
        return ViewScanConsistency(value)

    @consistency.setter
    def consistency(self, value  # type: Union[ViewScanConsistency, str]
                    ) -> None:
        self.set_option('scan_consistency', _enum_value(ViewScanConsistency, 'stale')(value))

    @property
    def limit(self) -> Optional[int]:
        return self._params.get('limit', None)

    @limit.setter
    def limit(self, value  # type: int
              ) -> None:
        if value < 0:
            raise InvalidArgumentException(message='limit must be >= 0.')
        self.set_option('limit', value)

    @property
    def skip(self) -> Optional[int]:
        return self._params.get('skip', None)

    @skip.setter
    def skip(self, value  # type: int
             ) -> None:
        if value < 0:
            raise InvalidArgumentException(message='skip must be >= 0.')
        self.set_option('skip', value)

    @property
    def order(self) -> ViewOrdering:
        value = self._params.get('order', None)
        if value is None:
            return ViewOrdering.ASCENDING
        return ViewOrdering(value)

    @order.setter
    def order(self, value  # type: Union[ViewOrdering, str]
              ) -> None:
        self.set_option('order', _enum_value(ViewOrdering, 'order')(value))

    @property
    def reduce(self) -> Optional[Union[bool, str]]:
        return self._params.get('reduce', None)

    @reduce.setter
    def reduce(self, value  # type: Union[bool, str]
               ) -> None:
        if not isinstance(value, (bool, str)):
            raise InvalidArgumentException(message='reduce must be a bool or the name of a reduce function.')
        self.set_option('reduce', value)

    @property
    def group(self) -> Optional[bool]:
        return self._params.get('group', None)

    @group.setter
    def group(self, value  # type: bool
              ) -> None:
        self.set_option('group', value)

    @property
    def group_level(self) -> Optional[int]:
        return self._params.get('group_level', None)

    @group_level.setter
    def group_level(self, value  # type: int
                    ) -> None:
        self.set_option('group_level', value)

    @property
    def key(self) -> Optional[str]:
        return self._params.get('key', None)

    @key.setter
    def key(self, value  # type: JSONType
            ) -> None:
        self.set_option('key', json.dumps(value))

    @property
    def keys(self) -> Optional[List[str]]:
        return self._params.get('keys', None)

    @keys.setter
    def keys(self, value  # type: List[JSONType]
             ) -> None:
        if not isinstance(value, list):
            raise InvalidArgumentException('keys must be a list.')
        # the connector wants a list of JSONified strings
        self.set_option('keys', list(map(lambda k: json.dumps(k), value)))

    @property
    def range(self) -> Dict[str, Any]:
        return {k: self._params[p] for k, p in (('start', 'start_key'),
                                                 ('end', 'end_key'),
                                                 ('inclusive_end', 'inclusive_end')) if p in self._params}

    @range.setter
    def range(self, value  # type: Dict[str, Any]
              ) -> None:
        if not isinstance(value, dict) or not value.keys() <= self._RANGE_KEYS:
            raise InvalidArgumentException(message=('range must be a dict w/ any of the keys '
                                                    f'{sorted(self._RANGE_KEYS)}.'))
        if value.get('start', None) is not None:
            self.set_option('start_key', json.dumps(value['start']))
        if value.get('end', None) is not None:
            self.set_option('end_key', json.dumps(value['end']))
        if value.get('inclusive_end', None) is not None:
            self.set_option('inclusive_end', validate_bool(value['inclusive_end']))

    @property
    def id_range(self) -> Dict[str, str]:
        return {k: self._params[p] for k, p in (('start', 'start_key_doc_id'),
                                                 ('end', 'end_key_doc_id')) if p in self._params}

    @id_range.setter
    def id_range(self, value  # type: Dict[str, str]
                 ) -> None:
        if not isinstance(value, dict) or not value.keys() <= self._ID_RANGE_KEYS:
            raise InvalidArgumentException(message=('id_range must be a dict w/ any of the keys '
                                                    f'{sorted(self._ID_RANGE_KEYS)}.'))
        if value.get('start', None) is not None:
            self.set_option('start_key_doc_id', validate_str(value['start']))
        if value.get('end', None) is not None:
            self.set_option('end_key_doc_id', validate_str(value['end']))

    @property
    def full_set(self) -> Optional[bool]:
        return self._params.get('full_set', None)

    @full_set.setter
    def full_set(self, value  # type: bool
                 ) -> None:
        self.set_option('full_set', value)

    @property
    def on_error(self) -> ViewErrorMode:
        value = self._params.get('on_error', None)
        if value is None:
            return ViewErrorMode.STOP
        return ViewErrorMode(value)

    @on_error.setter
    def on_error(self, value  # type: Union[ViewErrorMode, str]
                 ) -> None:
        self.set_option('on_error', _enum_value(ViewErrorMode, 'on_error')(value))

    @property
    def namespace(self) -> DesignDocumentNamespace:
        value = self._params.get('namespace', None)
        if value is None:
            return DesignDocumentNamespace.PRODUCTION
        return DesignDocumentNamespace.from_str(value)

    @namespace.setter
    def namespace(self, value  # type: Union[DesignDocumentNamespace, str]
                  ) -> None:
        self.set_option('namespace', _enum_value(DesignDocumentNamespace, 'namespace')(value))

    @property
    def debug(self) -> Optional[bool]:
        return self._params.get('debug', None)

    @debug.setter
    def debug(self, value  # type: bool
              ) -> None:
        self.set_option('debug', value)

    @property
    def client_context_id(self) -> Optional[str]:
        return self._params.get('client_context_id', None)

    @client_context_id.setter
    def client_context_id(self, value  # type: str
                          ) -> None:
        self.set_option('client_context_id', value)

    @property
    def raw(self) -> Optional[Dict[str, Any]]:
        return self._params.get('raw', None)

    @raw.setter
    def raw(self, value  # type: Dict[str, Any]
            ) -> None:
        if not isinstance(value, dict):
            raise InvalidArgumentException(message="Raw option must be of type Dict[str, Any].")
        self.set_option('raw', {f'{k}': json.dumps(v) for k, v in value.items()})

    @classmethod
    def create_view_query_object(cls,
                                 bucket_name,  # type: Optional[str]
                                 design_doc_name,  # type: str
                                 view_name,  # type: str
                                 options=None  # type: Optional[Dict[str, Any]]
                                 ) -> ViewQuery:
        if not isinstance(design_doc_name, str) or not design_doc_name:
            raise InvalidArgumentException(message='Expected design document name to be a non-empty str.')
        if not isinstance(view_name, str) or not view_name:
            raise InvalidArgumentException(message='Expected view name to be a non-empty str.')

        args = options or {}
        unknown = args.keys() - cls._VALID_OPTS.keys()
        if unknown:
            raise InvalidArgumentException(message=f'Invalid view option(s): {sorted(unknown)}.')
        if 'key' in args and 'keys' in args:
            raise InvalidArgumentException(message='Only one of key or keys may be provided.')

        query = cls(bucket_name, design_doc_name, view_name)
        for k, v in args.items():
            for target, transform in cls._VALID_OPTS[k].items():
                setattr(query, target, transform(v))
        return query


def build_view_row(raw  # type: Any
                   ) -> ViewRow:
    if isinstance(raw, ViewRow) or not isinstance(raw, dict):
        return raw
    return ViewRow(key=raw.get('key', None),
                   id=raw.get('id', None),
                   value=raw.get('value', None),
                   document=raw.get('document', raw.get('doc', None)))


def build_view_result(rows,  # type: List[Any]
                      meta  # type: Any
                      ) -> ViewResult:
    metadata = meta if isinstance(meta, ViewMetaData) else ViewMetaData(meta)
    return ViewResult([build_view_row(r) for r in rows], metadata)


class ViewExecutor:
    """Dispatches view queries through a connector.

    Args:
        connection (:class:`~cbbucket.connector.Connector`): The bucket's connector.
        bucket_name (str, optional): The name of the bucket the connector is bound to.
    """

    def __init__(self,
                 connection,  # type: Connector
                 bucket_name=None  # type: Optional[str]
                 ):
        self._connection = connection
        self._bucket_name = bucket_name

    def query(self,
              design_doc,  # type: str
              view_name,  # type: str
              options=None  # type: Optional[Dict[str, Any]]
              ) -> RowEmitter:
        """Returns an emitter that builds and dispatches the view request once started.

        Invalid options are reported through the emitter as an
        :class:`~cbbucket.exceptions.InvalidArgumentException`.
        """
        def _produce(emitter):
            query = ViewQuery.create_view_query_object(self._bucket_name, design_doc, view_name, options)
            op_args = query.as_encodable()
            logger.debug('Dispatching view query %s/%s.', design_doc, view_name)
            self._connection.view_query(op_args, emitter)

        return RowEmitter(_produce)
