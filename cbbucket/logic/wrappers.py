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

import asyncio
import logging
from functools import wraps
from typing import (TYPE_CHECKING,
                    Any,
                    Awaitable,
                    Callable,
                    List,
                    Optional)

from cbbucket.result import ViewResult

if TYPE_CHECKING:
    from cbbucket._utils import CompletionHandler
    from cbbucket.logic.emitter import RowEmitter

logger = logging.getLogger(__name__)


def _settle(ft,  # type: asyncio.Future
            handler,  # type: Optional[CompletionHandler]
            result=None,  # type: Any
            exc=None  # type: Optional[Exception]
            ) -> None:
    """**INTERNAL**

    Delivers the outcome of an operation through exactly one channel.  Must run on the
    event loop.  When a completion handler is present the future only ever resolves to
    ``None``; anything the handler raises is left to the loop's exception handler.
    """
    if handler is not None:
        if not ft.done():
            ft.set_result(None)
        handler(exc, result)
        return

    if ft.done():
        # abandoned by the caller
        logger.debug('Dropping outcome of a cancelled operation.')
        return
    if exc is not None:
        ft.set_exception(exc)
    else:
        ft.set_result(result)


def call_async_fn(ft,  # type: asyncio.Future
                  handler,  # type: Optional[CompletionHandler]
                  self,
                  fn,  # type: Callable
                  *args,
                  **kwargs):
    try:
        fn(self, *args, **kwargs)
    except Exception as e:
        self.loop.call_soon(_settle, ft, handler, None, e)


class AsyncWrapper:

    @staticmethod
    def settle(loop,  # type: asyncio.AbstractEventLoop
               ft,  # type: asyncio.Future
               handler,  # type: Optional[CompletionHandler]
               result=None,  # type: Any
               exc=None  # type: Optional[Exception]
               ) -> None:
        """**INTERNAL**

        Thread safe entry point for settling an operation from a connector callback.
        """
        loop.call_soon_threadsafe(_settle, ft, handler, result, exc)

    @classmethod  # noqa: C901
    def inject_callbacks(cls, return_cls):  # noqa: C901
        """**INTERNAL**

        Wraps a method that dispatches a single-result connector call (``callback=``/``errback=``
        style).  The wrapped method accepts an optional ``handler`` keyword (completion handler)
        and always returns a future.
        """
        def decorator(fn):
            @wraps(fn)
            def wrapped_fn(self, *args, **kwargs):
                handler = kwargs.pop('handler', None)
                loop = self.loop
                ft = loop.create_future()

                def on_ok(ret):
                    try:
                        if return_cls is None:
                            retval = None
                        elif return_cls is True:
                            retval = ret
                        else:
                            retval = return_cls(ret)
                    except Exception as ex:
                        AsyncWrapper.settle(loop, ft, handler, exc=ex)
                    else:
                        AsyncWrapper.settle(loop, ft, handler, result=retval)

                def on_err(exc):
                    AsyncWrapper.settle(loop, ft, handler, exc=exc)

                kwargs["callback"] = on_ok
                kwargs["errback"] = on_err
                call_async_fn(ft, handler, self, fn, *args, **kwargs)
                return ft

            return wrapped_fn

        return decorator

    @staticmethod
    def from_coroutine(loop,  # type: asyncio.AbstractEventLoop
                       coro,  # type: Awaitable[Any]
                       handler=None  # type: Optional[CompletionHandler]
                       ) -> asyncio.Future:
        """**INTERNAL**

        Gives a composed operation (a coroutine awaiting other operations) the same delivery
        contract as a single connector call.
        """
        task = loop.create_task(coro)
        if handler is None:
            return task

        ft = loop.create_future()

        def _on_done(t):
            if t.cancelled():
                _settle(ft, handler, exc=asyncio.CancelledError())
            elif t.exception() is not None:
                _settle(ft, handler, exc=t.exception())
            else:
                _settle(ft, handler, result=t.result())

        task.add_done_callback(_on_done)
        return ft


def _default_result_factory(rows,  # type: List[Any]
                            meta  # type: Any
                            ) -> ViewResult:
    return ViewResult(rows, meta)


def wrap_row_emitter(emitter,  # type: RowEmitter
                     loop,  # type: asyncio.AbstractEventLoop
                     callback=None,  # type: Optional[CompletionHandler]
                     result_factory=None  # type: Optional[Callable[[List[Any], Any], Any]]
                     ) -> asyncio.Future:
    """Buffers a :class:`~cbbucket.logic.emitter.RowEmitter` into a single result.

    Rows are collected in emission order.  On end the result is built w/ ``result_factory(rows, meta)``
    and either resolves the returned future or is passed to ``callback(None, result)``.  On error
    the future is rejected, or ``callback(exc, None)`` is called; rows received before the error are
    discarded.

    Args:
        emitter (:class:`~cbbucket.logic.emitter.RowEmitter`): An emitter that has not been started.
        loop (asyncio.AbstractEventLoop): The loop results are delivered on.
        callback (Callable[[Optional[Exception], Any], None], optional): Completion handler.  When
            provided the returned future resolves to ``None``.
        result_factory (Callable[[List[Any], Any], Any], optional): Builds the final result.  Defaults
            to :class:`~cbbucket.result.ViewResult`.

    Returns:
        asyncio.Future: Resolves once the emitter signals its terminal event.
    """
    factory = result_factory or _default_result_factory
    ft = loop.create_future()
    rows = []

    def on_end(meta):
        try:
            result = factory(rows, meta)
        except Exception as ex:
            AsyncWrapper.settle(loop, ft, callback, exc=ex)
        else:
            AsyncWrapper.settle(loop, ft, callback, result=result)

    def on_error(exc):
        rows.clear()
        AsyncWrapper.settle(loop, ft, callback, exc=exc)

    emitter.on_row(rows.append)
    emitter.on_error(on_error)
    emitter.on_end(on_end)
    emitter.start()
    return ft
