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

from dataclasses import dataclass
from typing import (Any,
                    Dict,
                    Iterator,
                    List,
                    Optional,
                    Tuple,
                    Union)


class MutationToken:
    def __init__(self, token  # type: Dict[str, Union[str, int]]
                 ):
        self._token = token

    @property
    def partition_id(self) -> int:
        """
            int:  The token's partition id.
        """
        return self._token['partition_id']

    @property
    def partition_uuid(self) -> int:
        """
            int:  The token's partition uuid.
        """
        return self._token['partition_uuid']

    @property
    def sequence_number(self) -> int:
        """
            int:  The token's sequence number.
        """
        return self._token['sequence_number']

    @property
    def bucket_name(self) -> str:
        """
            str:  The token's bucket name.
        """
        return self._token['bucket_name']

    def as_tuple(self) -> Tuple[int, int, int, str]:
        return (self.partition_id, self.partition_uuid,
                self.sequence_number, self.bucket_name)

    def as_dict(self) -> Dict[str, Union[str, int]]:
        return self._token

    def __repr__(self):
        return "MutationToken:{}".format(self._token)

    def __hash__(self):
        return hash(self.as_tuple())

    def __eq__(self, other):
        if not isinstance(other, MutationToken):
            return False
        return self.as_tuple() == other.as_tuple()


class QueryResult:
    """The result of a N1QL (SQL++) query.

    The value produced by the connector is not interpreted beyond splitting it into
    rows and metadata.
    """

    def __init__(self, raw  # type: Any
                 ):
        self._raw = raw

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def rows(self) -> List[Any]:
        if isinstance(self._raw, dict):
            return self._raw.get('rows', [])
        return []

    @property
    def meta(self) -> Optional[Dict[str, Any]]:
        if isinstance(self._raw, dict):
            return self._raw.get('meta', None)
        return None

    def metadata(self) -> Optional[Dict[str, Any]]:
        return self.meta

    def __iter__(self) -> Iterator[Any]:
        return iter(self.rows)

    def __repr__(self):
        return f'QueryResult:{self._raw}'


@dataclass
class ViewRow(object):
    key: Any = None
    id: str = None
    value: Any = None
    document: Any = None


class ViewMetaData:
    def __init__(self, raw  # type: Optional[Dict[str, Any]]
                 ) -> None:
        self._raw = raw if raw is not None else {}

    @property
    def raw(self) -> Dict[str, Any]:
        return self._raw

    def debug_info(self) -> Optional[str]:
        return self._raw.get("debug_info", None)

    def total_rows(self) -> Optional[int]:
        return self._raw.get("total_rows", None)

    def errors(self) -> Optional[List[Dict[str, Any]]]:
        """Errors reported by individual nodes when the query ran w/ :attr:`~cbbucket.views.ViewErrorMode.CONTINUE`."""
        return self._raw.get("errors", None)

    def __eq__(self, other):
        if isinstance(other, ViewMetaData):
            return self._raw == other._raw
        if isinstance(other, dict):
            return self._raw == other
        return NotImplemented

    def __repr__(self):
        return f'ViewMetaData({self._raw})'


class ViewResult:
    """The buffered result of a view query.

    Args:
        rows (List[:class:`.ViewRow`]): The emitted rows, in emission order.
        meta (:class:`.ViewMetaData`): The trailing metadata of the view query.
    """

    def __init__(self,
                 rows,  # type: List[ViewRow]
                 meta  # type: ViewMetaData
                 ):
        self._rows = rows
        self._meta = meta

    @property
    def rows(self) -> List[ViewRow]:
        return self._rows

    @property
    def meta(self) -> ViewMetaData:
        return self._meta

    def metadata(self) -> ViewMetaData:
        return self._meta

    def __iter__(self) -> Iterator[ViewRow]:
        return iter(self._rows)

    def __len__(self):
        return len(self._rows)

    def __repr__(self):
        return f'ViewResult(rows={self._rows}, meta={self._meta})'
