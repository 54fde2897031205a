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

from datetime import timedelta
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    Iterable,
                    Optional)

from cbbucket._utils import is_null_or_empty
from cbbucket.exceptions import (CollectionAlreadyExistsException,
                                 CollectionNotFoundException,
                                 InvalidArgumentException,
                                 ScopeAlreadyExistsException,
                                 ScopeNotFoundException)
from cbbucket.management.logic import CollectionMgmtOperations, ManagementType
from cbbucket.options import forward_args

if TYPE_CHECKING:
    from cbbucket.connector import Connector
    from cbbucket.options import (CreateCollectionOptions,  # noqa: F401
                                  CreateScopeOptions,
                                  DropCollectionOptions,
                                  DropScopeOptions,
                                  GetAllScopesOptions)


class CollectionManagerLogic:

    _ERROR_MAPPING = {r'.*Scope with.*name.*already exists': ScopeAlreadyExistsException,
                      r'.*Scope with.*name.*not found': ScopeNotFoundException,
                      r'.*Collection with.*name.*not found': CollectionNotFoundException,
                      r'.*Collection with.*name.*already exists': CollectionAlreadyExistsException,
                      r'.*collection_not_found.*': CollectionNotFoundException,
                      r'.*scope_not_found.*': ScopeNotFoundException,
                      r'.*collection_exists.*': CollectionAlreadyExistsException,
                      r'.*scope_exists.*': ScopeAlreadyExistsException}

    def __init__(self,
                 connection,  # type: Connector
                 bucket_name,  # type: str
                 default_timeout=None  # type: Optional[int]
                 ):
        self._connection = connection
        self._bucket_name = bucket_name
        self._default_timeout = default_timeout

    def _dispatch(self,
                  op_type,  # type: CollectionMgmtOperations
                  op_args,  # type: Dict[str, Any]
                  options,
                  kwargs  # type: Dict[str, Any]
                  ) -> None:
        callback = kwargs.pop('callback', None)
        errback = kwargs.pop('errback', None)

        final_args = forward_args(kwargs, *options)
        timeout = final_args.get("timeout", self._default_timeout)
        if timeout is not None:
            op_args["timeout"] = timeout

        self._connection.management_operation(ManagementType.CollectionMgmt.value,
                                              op_type.value,
                                              op_args,
                                              callback=callback,
                                              errback=errback)

    @staticmethod
    def _validate_name(value, what):
        if not isinstance(value, str) or is_null_or_empty(value):
            raise InvalidArgumentException(message=f'Expected {what} name to be a non-empty str.')
        return value

    def create_scope(self,
                     scope_name,      # type: str
                     *options,        # type: CreateScopeOptions
                     **kwargs         # type: Dict[str, Any]
                     ) -> None:
        op_args = {
            "bucket_name": self._bucket_name,
            "scope_name": self._validate_name(scope_name, 'scope')
        }
        self._dispatch(CollectionMgmtOperations.CREATE_SCOPE, op_args, options, kwargs)

    def drop_scope(self,
                   scope_name,      # type: str
                   *options,        # type: DropScopeOptions
                   **kwargs         # type: Dict[str, Any]
                   ) -> None:
        op_args = {
            "bucket_name": self._bucket_name,
            "scope_name": self._validate_name(scope_name, 'scope')
        }
        self._dispatch(CollectionMgmtOperations.DROP_SCOPE, op_args, options, kwargs)

    def get_all_scopes(self,
                       *options,        # type: GetAllScopesOptions
                       **kwargs         # type: Dict[str, Any]
                       ) -> None:
        op_args = {
            "bucket_name": self._bucket_name
        }
        self._dispatch(CollectionMgmtOperations.GET_ALL_SCOPES, op_args, options, kwargs)

    def create_collection(self,
                          scope_name,  # type: str
                          collection_name,  # type: str
                          *options,        # type: CreateCollectionOptions
                          **kwargs         # type: Dict[str, Any]
                          ) -> None:
        op_args = {
            "bucket_name": self._bucket_name,
            "scope_name": self._validate_name(scope_name, 'scope'),
            "collection_name": self._validate_name(collection_name, 'collection')
        }
        max_expiry = kwargs.pop('max_expiry', None)
        if max_expiry is None and options and options[0]:
            max_expiry = options[0].get('max_expiry', None)
        if max_expiry is not None:
            if not isinstance(max_expiry, timedelta):
                raise InvalidArgumentException(message='Expected max_expiry to be a timedelta.')
            op_args["max_expiry"] = int(max_expiry.total_seconds())
        options = tuple({k: v for k, v in o.items() if k != 'max_expiry'} for o in options if o)
        self._dispatch(CollectionMgmtOperations.CREATE_COLLECTION, op_args, options, kwargs)

    def drop_collection(self,
                        scope_name,  # type: str
                        collection_name,  # type: str
                        *options,        # type: DropCollectionOptions
                        **kwargs         # type: Dict[str, Any]
                        ) -> None:
        op_args = {
            "bucket_name": self._bucket_name,
            "scope_name": self._validate_name(scope_name, 'scope'),
            "collection_name": self._validate_name(collection_name, 'collection')
        }
        self._dispatch(CollectionMgmtOperations.DROP_COLLECTION, op_args, options, kwargs)


class CollectionSpec(object):
    def __init__(self,
                 collection_name,           # type: str
                 scope_name='_default',     # type: Optional[str]
                 max_expiry=None,           # type: Optional[timedelta]
                 ):
        self._name, self._scope_name = collection_name, scope_name
        self._max_expiry = max_expiry

    @property
    def max_expiry(self) -> Optional[timedelta]:
        """
            Optional[timedelta]: The expiry for documents in the collection.
        """
        return self._max_expiry

    @property
    def name(self) -> str:
        """
            str: The name of the collection
        """
        return self._name

    @property
    def scope_name(self) -> str:
        """
            str: The name of the collection's scope
        """
        return self._scope_name

    @classmethod
    def from_dict(cls,
                  raw,  # type: Dict[str, Any]
                  scope_name  # type: str
                  ) -> CollectionSpec:
        max_expiry = raw.get('max_expiry', None)
        if max_expiry is not None:
            max_expiry = timedelta(seconds=max_expiry)
        return cls(raw['name'], scope_name, max_expiry=max_expiry)

    def __repr__(self):
        return f'CollectionSpec(name={self._name}, scope_name={self._scope_name}, max_expiry={self._max_expiry})'


class ScopeSpec(object):
    def __init__(self,
                 name,  # type : str
                 collections,  # type: Iterable[CollectionSpec]
                 ):
        self._name, self._collections = name, collections

    @property
    def name(self) -> str:
        """
            str: The name of the scope
        """
        return self._name

    @property
    def collections(self) -> Iterable[CollectionSpec]:
        """
            List[:class:`.CollectionSpec`]: A list of the scope's collections.
        """
        return self._collections

    def __repr__(self):
        return f'ScopeSpec(name={self._name}, collections={self._collections})'
