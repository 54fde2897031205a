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

import copy
from datetime import timedelta
from typing import (Any,
                    Callable,
                    Dict,
                    List,
                    Optional,
                    Tuple,
                    Union)

from cbbucket.exceptions import InvalidArgumentException

JSONType = Union[str, int, float, bool,
                 None, Dict[str, Any], List[Any]]

CompletionHandler = Callable[[Optional[Exception], Any], None]


def is_null_or_empty(
    value  # type: str
) -> bool:
    return not (value and not value.isspace())


def timedelta_as_microseconds(
    duration,  # type: timedelta
) -> int:
    if duration and not isinstance(duration, timedelta):
        raise InvalidArgumentException(
            message="Expected timedelta instead of {}".format(duration)
        )
    return int(duration.total_seconds() * 1e6 if duration else 0)


def to_microseconds(
    timeout  # type: Union[timedelta, float, int]
) -> int:
    if timeout and (isinstance(timeout, bool) or not isinstance(timeout, (timedelta, float, int))):
        raise InvalidArgumentException(message=("Excepted timeout to be of type "
                                                f"Union[timedelta, float, int] instead of {timeout}"))
    if not timeout:
        total_us = 0
    elif isinstance(timeout, timedelta):
        total_us = int(timeout.total_seconds() * 1e6)
    else:
        total_us = int(timeout * 1e6)

    return total_us


def validate_int(value  # type: int
                 ) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentException(message='Expected value to be of type int.')
    return value


def validate_bool(value  # type: bool
                  ) -> bool:
    if not isinstance(value, bool):
        raise InvalidArgumentException(message='Expected value to be of type bool.')
    return value


def validate_str(value  # type: str
                 ) -> str:
    if not isinstance(value, str):
        raise InvalidArgumentException(message='Expected value to be of type str.')
    return value


def resolve_overloaded_args(*slots  # type: Any
                            ) -> Tuple[Any, ...]:
    """**INTERNAL**

    Resolves the optional positional slots of an overloaded call.  The last slot is
    the completion handler slot.  The first callable value found (left to right) is
    the completion handler and every slot after it is considered unset, so
    ``op(a, fn)`` resolves exactly as ``op(a, None, None, fn)``.

    Returns:
        Tuple[Any, ...]: The data slots followed by the completion handler (``None``
        if the caller wants an awaitable result).
    """
    resolved = list(slots)
    handler = None
    for idx, value in enumerate(resolved):
        if callable(value):
            handler = value
            resolved[idx:] = [None] * (len(resolved) - idx)
            break
    resolved[-1] = handler
    return tuple(resolved)


def normalize_options(options,  # type: Optional[Dict[str, Any]]
                      **kwargs  # type: Dict[str, Any]
                      ) -> Dict[str, Any]:
    """**INTERNAL**

    Returns a fresh dict built from the caller's options, updated w/ any keyword
    overrides.  The caller's options object is never handed to the dispatch path.
    """
    if options is not None and not isinstance(options, dict):
        raise InvalidArgumentException(message=f'Expected options to be a dict instead of {type(options)}.')
    final_options = copy.copy(dict(options)) if options else {}
    final_options.update({k: v for k, v in kwargs.items() if v is not None})
    return final_options
