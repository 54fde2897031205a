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
from datetime import timedelta
from typing import (TYPE_CHECKING,
                    Any,
                    Dict,
                    Optional)

from cbbucket.exceptions import InvalidConfigurationException

if TYPE_CHECKING:
    from cbbucket.cluster import Cluster
    from cbbucket.connector import Connector

logger = logging.getLogger(__name__)


class BucketLogic:
    def __init__(self,
                 cluster,  # type: Cluster
                 bucket_name  # type: str
                 ):
        self._cluster = cluster
        self._connection = cluster._get_conn(bucket_name)
        self._bucket_name = bucket_name

    @property
    def connection(self) -> Connector:
        """
        **INTERNAL**
        """
        return self._connection

    @property
    def name(self) -> str:
        """
            str: The name of this :class:`~.Bucket` instance.
        """
        return self._bucket_name

    def _bucket_query_options(self,
                              options  # type: Dict[str, Any]
                              ) -> Dict[str, Any]:
        """**INTERNAL**

        Claims ``options`` for this bucket.  ``options`` must be a copy owned by the caller of
        this method, it is updated in place.

        Raises:
            :class:`~cbbucket.exceptions.InvalidConfigurationException`: If ``options`` already
                names a bucket.
        """
        if options.get('bucket', None):
            raise InvalidConfigurationException(
                message=(f'Cannot specify the bucket option ({options["bucket"]!r}) for a query issued '
                         f'through bucket {self._bucket_name!r}.  Use Cluster.query instead.'))
        options['bucket'] = self._bucket_name
        return options

    def _with_default_timeout(self,
                              options,  # type: Dict[str, Any]
                              default_us  # type: Optional[int]
                              ) -> Dict[str, Any]:
        if default_us and options.get('timeout', None) is None:
            options['timeout'] = timedelta(microseconds=default_us)
        return options
