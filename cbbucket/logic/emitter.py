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

"""
Push based producer for row-based APIs (i.e. Views)
"""

import logging
import threading
from typing import (Any,
                    Callable,
                    List,
                    Optional)

from cbbucket.exceptions import InvalidArgumentException

logger = logging.getLogger(__name__)


class RowEmitter:
    """Yields zero or more rows followed by exactly one terminal event.

    Subscribers register w/ :meth:`on_row`, :meth:`on_error` and :meth:`on_end`, then call
    :meth:`start` which hands the emitter to the producer.  Once a terminal event
    (end or error) has been emitted any further event is ignored.

    Args:
        producer (Callable[[RowEmitter], None], optional): Invoked once by :meth:`start`
            w/ this emitter.
    """

    def __init__(self,
                 producer=None  # type: Optional[Callable[[RowEmitter], None]]
                 ):
        self._producer = producer
        self._row_handlers = []  # type: List[Callable[[Any], None]]
        self._error_handlers = []  # type: List[Callable[[Exception], None]]
        self._end_handlers = []  # type: List[Callable[[Any], None]]
        self._lock = threading.Lock()
        self._started = False
        self._done = False

    @property
    def started(self) -> bool:
        return self._started

    @property
    def done(self) -> bool:
        return self._done

    def on_row(self, handler  # type: Callable[[Any], None]
               ) -> 'RowEmitter':
        self._row_handlers.append(handler)
        return self

    def on_error(self, handler  # type: Callable[[Exception], None]
                 ) -> 'RowEmitter':
        self._error_handlers.append(handler)
        return self

    def on_end(self, handler  # type: Callable[[Any], None]
               ) -> 'RowEmitter':
        self._end_handlers.append(handler)
        return self

    def start(self) -> None:
        if self._started:
            raise InvalidArgumentException(message='RowEmitter has already been started.')
        self._started = True
        if self._producer is None:
            return
        try:
            self._producer(self)
        except Exception as ex:  # producer failed before it could report through the emitter
            self.emit_error(ex)

    def emit_row(self, row  # type: Any
                 ) -> None:
        if self._done:
            logger.trace('Ignoring row emitted after terminal event.')
            return
        for handler in self._row_handlers:
            handler(row)

    def emit_error(self, exc  # type: Exception
                   ) -> None:
        if not self._finish():
            logger.trace('Ignoring error emitted after terminal event: %r', exc)
            return
        for handler in self._error_handlers:
            handler(exc)

    def emit_end(self, meta=None  # type: Any
                 ) -> None:
        if not self._finish():
            logger.trace('Ignoring end emitted after terminal event.')
            return
        for handler in self._end_handlers:
            handler(meta)

    def _finish(self) -> bool:
        with self._lock:
            if self._done:
                return False
            self._done = True
            return True
