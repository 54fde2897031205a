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

from cbbucket.collection import Collection

if TYPE_CHECKING:
    from cbbucket.bucket import Bucket


class Scope:
    """Create a Scope instance.

    A reference to a scope of a bucket.  Creating one performs no I/O and never fails.

    Args:
        bucket (:class:`~cbbucket.bucket.Bucket`): A :class:`~cbbucket.bucket.Bucket` instance.
        scope_name (str): Name of the scope.  The empty name addresses the bucket's collections
            w/o naming a scope.
    """

    DEFAULT_NAME = '_default'

    def __init__(self,
                 bucket,  # type: Bucket
                 scope_name  # type: str
                 ):
        self._bucket = bucket
        self._scope_name = scope_name

    @property
    def bucket(self) -> 'Bucket':
        """
            :class:`~cbbucket.bucket.Bucket`: The bucket this scope belongs to.
        """
        return self._bucket

    @property
    def name(self) -> str:
        """
            str: The name of this :class:`~.Scope` instance.
        """
        return self._scope_name

    @property
    def bucket_name(self) -> str:
        """
            str: The name of the bucket in which this :class:`~.Scope` instance belongs.
        """
        return self._bucket.name

    def collection(self, name  # type: str
                   ) -> Collection:
        """Creates a :class:`~cbbucket.collection.Collection` instance of the specified collection.

        Args:
            name (str): Name of the collection to reference.

        Returns:
            :class:`~cbbucket.collection.Collection`: A :class:`~cbbucket.collection.Collection` instance of the
            specified collection.
        """
        return Collection(self, name)

    def __repr__(self):
        return f'Scope(bucket={self.bucket_name!r}, name={self._scope_name!r})'
