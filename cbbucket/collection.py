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

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cbbucket.scope import Scope


class Collection:
    """A reference to a collection.  Document operations are not part of this client."""

    def __init__(self,
                 scope,  # type: Scope
                 name  # type: str
                 ):
        self._scope = scope
        self._collection_name = name

    @property
    def name(self) -> str:
        """
            str: The name of this :class:`~.Collection` instance.  Empty for the default collection.
        """
        return self._collection_name

    @property
    def scope(self) -> 'Scope':
        return self._scope

    @property
    def scope_name(self) -> str:
        return self._scope.name

    @property
    def bucket_name(self) -> str:
        return self._scope.bucket_name

    def __eq__(self, other):
        if not isinstance(other, Collection):
            return NotImplemented
        return (self.bucket_name, self.scope_name, self.name) == (other.bucket_name, other.scope_name, other.name)

    def __hash__(self):
        return hash((self.bucket_name, self.scope_name, self.name))

    def __repr__(self):
        return f'Collection(bucket={self.bucket_name!r}, scope={self.scope_name!r}, name={self._collection_name!r})'
