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
from enum import Enum
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    Optional)

from cbbucket.exceptions import DesignDocumentNotFoundException, InvalidArgumentException
from cbbucket.management.logic import ManagementType, ViewIndexMgmtOperations
from cbbucket.options import forward_args

if TYPE_CHECKING:
    from cbbucket.connector import Connector
    from cbbucket.options import (DropDesignDocumentOptions,  # noqa: F401
                                  GetAllDesignDocumentsOptions,
                                  GetDesignDocumentOptions,
                                  UpsertDesignDocumentOptions)


class ViewIndexManagerLogic:

    _ERROR_MAPPING = {r'.*not_found.*': DesignDocumentNotFoundException,
                      r'.*not found.*': DesignDocumentNotFoundException}

    def __init__(self,
                 connection,  # type: Connector
                 bucket_name,  # type: str
                 default_timeout=None  # type: Optional[int]
                 ):
        self._connection = connection
        self._bucket_name = bucket_name
        self._default_timeout = default_timeout

    def _dispatch(self,
                  op_type,  # type: ViewIndexMgmtOperations
                  op_args,  # type: Dict[str, Any]
                  final_args,  # type: Dict[str, Any]
                  **kwargs
                  ) -> None:
        if final_args.get("client_context_id", None) is not None:
            op_args["client_context_id"] = final_args.get("client_context_id")

        timeout = final_args.get("timeout", self._default_timeout)
        if timeout is not None:
            op_args["timeout"] = timeout

        self._connection.management_operation(ManagementType.ViewIndexMgmt.value,
                                              op_type.value,
                                              op_args,
                                              callback=kwargs.pop('callback', None),
                                              errback=kwargs.pop('errback', None))

    def get_design_document(self,
                            design_doc_name,  # type: str
                            namespace,  # type: DesignDocumentNamespace
                            *options,   # type: GetDesignDocumentOptions
                            **kwargs
                            ) -> None:
        if not design_doc_name:
            raise InvalidArgumentException("Expected design document name to not be None")

        if not namespace:
            raise InvalidArgumentException("Expected design document namespace to not be None")

        op_args = {
            'bucket_name': self._bucket_name,
            'document_name': design_doc_name,
            'namespace': DesignDocumentNamespace.coerce(namespace).to_str()
        }
        self._dispatch(ViewIndexMgmtOperations.GET_INDEX, op_args, forward_args(kwargs, *options), **kwargs)

    def get_all_design_documents(self,
                                 namespace,     # type: DesignDocumentNamespace
                                 *options,      # type: GetAllDesignDocumentsOptions
                                 **kwargs
                                 ) -> None:
        if not namespace:
            raise InvalidArgumentException("Expected design document namespace to not be None")

        op_args = {
            'bucket_name': self._bucket_name,
            'namespace': DesignDocumentNamespace.coerce(namespace).to_str()
        }
        self._dispatch(ViewIndexMgmtOperations.GET_ALL_INDEXES, op_args, forward_args(kwargs, *options), **kwargs)

    def upsert_design_document(self,
                               design_doc_data,     # type: DesignDocument
                               namespace,           # type: DesignDocumentNamespace
                               *options,            # type: UpsertDesignDocumentOptions
                               **kwargs
                               ) -> None:
        if not isinstance(design_doc_data, DesignDocument):
            raise InvalidArgumentException("Expected design document to be a DesignDocument")

        if not namespace:
            raise InvalidArgumentException("Expected design document namespace to not be None")

        op_args = {
            'bucket_name': self._bucket_name,
            'design_document': design_doc_data.as_dict(DesignDocumentNamespace.coerce(namespace))
        }
        self._dispatch(ViewIndexMgmtOperations.UPSERT_INDEX, op_args, forward_args(kwargs, *options), **kwargs)

    def drop_design_document(self,
                             design_doc_name,   # type: str
                             namespace,         # type: DesignDocumentNamespace
                             *options,          # type: DropDesignDocumentOptions
                             **kwargs
                             ) -> None:
        if not design_doc_name:
            raise InvalidArgumentException("Expected design document name to not be None")

        if not namespace:
            raise InvalidArgumentException("Expected design document namespace to not be None")

        op_args = {
            'bucket_name': self._bucket_name,
            'document_name': design_doc_name,
            'namespace': DesignDocumentNamespace.coerce(namespace).to_str()
        }
        self._dispatch(ViewIndexMgmtOperations.DROP_INDEX, op_args, forward_args(kwargs, *options), **kwargs)


class DesignDocumentNamespace(Enum):
    PRODUCTION = 'production'
    DEVELOPMENT = 'development'

    def prefix(self, ddocname):
        if ddocname.startswith('dev_') or self is DesignDocumentNamespace.PRODUCTION:
            return ddocname
        return 'dev_' + ddocname

    def to_str(self):
        return self.value

    @classmethod
    def unprefix(cls, name):
        for prefix in ('_design/', 'dev_'):
            name = name[name.startswith(prefix) and len(prefix):]
        return name

    @classmethod
    def from_str(cls, value):
        if value == 'production':
            return cls.PRODUCTION
        else:
            return cls.DEVELOPMENT

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in ('production', 'development'):
            return cls(value)
        raise InvalidArgumentException(message=('Excepted namespace to be either of type '
                                                'DesignDocumentNamespace or str representation '
                                                'of DesignDocumentNamespace'))


class View:
    def __init__(self,
                 map,           # type: str
                 reduce=None    # type: Optional[str]
                 ) -> None:
        self._map = map
        self._reduce = reduce

    @property
    def map(self) -> str:
        return self._map

    @property
    def reduce(self) -> Optional[str]:
        return self._reduce

    def as_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in {"map": self._map,
                                  "reduce": self._reduce}.items() if v}

    def to_json(self) -> str:
        return json.dumps(self.as_dict())

    @classmethod
    def from_json(cls, json_view) -> View:
        return cls(**json.loads(json_view))

    def __eq__(self, other):
        if not isinstance(other, View):
            return False
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return f'View({self.as_dict()})'


class DesignDocument(object):
    def __init__(self,
                 name,      # type: str
                 views,      # Dict[str, View]
                 namespace=None,  # type: Optional[DesignDocumentNamespace]
                 rev=None       # type: Optional[str]
                 ) -> None:
        self._name = DesignDocumentNamespace.unprefix(name)
        self._views = views
        self._rev = rev
        self._namespace = namespace

    @property
    def name(self) -> str:
        return self._name

    @property
    def views(self) -> Dict[str, View]:
        return self._views

    @property
    def rev(self) -> Optional[str]:
        return self._rev

    @property
    def namespace(self) -> Optional[DesignDocumentNamespace]:
        return self._namespace

    def as_dict(self,
                namespace  # type: Optional[DesignDocumentNamespace]
                ) -> Dict[str, Any]:
        output = {
            'name': self._name
        }
        if namespace is not None:
            output['namespace'] = namespace.to_str()
        output['views'] = dict({key: value.as_dict() for key, value in self.views.items()})

        if self.rev:
            output['rev'] = self.rev

        return output

    def add_view(self,
                 name,  # type: str
                 view   # type: View
                 ) -> DesignDocument:
        self.views[name] = view
        return self

    def get_view(self,
                 name   # type: str
                 ) -> Optional[View]:
        return self._views.get(name, None)

    @classmethod
    def from_json(cls, raw_json  # type: Dict[str, Any]
                  ) -> DesignDocument:
        name = raw_json.get('name')
        rev = raw_json.get('rev', None)
        ns = DesignDocumentNamespace.from_str(raw_json.get('namespace', None))
        views = raw_json.get('views', dict())
        views = dict({key: View(**value) for key, value in views.items()})
        return cls(name, views, namespace=ns, rev=rev)

    def __repr__(self):
        output = self.as_dict(self.namespace)
        return f'DesignDocument({output})'
