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

import json
import re
from typing import (Any,
                    Dict,
                    Optional,
                    Pattern,
                    Set,
                    Union)


class ErrorContext:
    """Details the connector attached to a failed request.

    Connectors may hand the context over as a plain dict; ``context_type`` then selects the
    context class (see :meth:`from_dict`).
    """

    def __init__(self, **kwargs):
        self._base = kwargs

    @property
    def last_dispatched_to(self) -> Optional[str]:
        return self._base.get("last_dispatched_to", None)

    @property
    def last_dispatched_from(self) -> Optional[str]:
        return self._base.get("last_dispatched_from", None)

    @property
    def retry_attempts(self) -> int:
        return self._base.get("retry_attempts", None)

    @property
    def retry_reasons(self) -> Set[str]:
        return self._base.get("retry_reasons", None)

    @staticmethod
    def from_dict(**kwargs):
        # type: (...) -> ErrorContext
        klass = _CONTEXT_TYPES.get(kwargs.get("context_type", None), ErrorContext)
        return klass(**kwargs)

    def _get_base(self):
        return self._base

    def __repr__(self):
        return f'{type(self).__name__}({self._base})'


class HTTPErrorContext(ErrorContext):
    _HTTP_EC_KEYS = ["client_context_id", "method", "path", "http_status",
                     "http_body"]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._http_err_ctx = {k: v for k,
                              v in kwargs.items() if k in self._HTTP_EC_KEYS}

    @property
    def method(self) -> Optional[str]:
        return self._http_err_ctx.get("method", None)

    @property
    def response_code(self) -> Optional[int]:
        return self._http_err_ctx.get("http_status", None)

    @property
    def path(self) -> Optional[str]:
        return self._http_err_ctx.get("path", None)

    @property
    def response_body(self) -> Optional[str]:
        return self._http_err_ctx.get("http_body", None)

    @property
    def client_context_id(self) -> Optional[str]:
        return self._http_err_ctx.get("client_context_id", None)


class QueryErrorContext(HTTPErrorContext):
    """Context of a failed N1QL (SQL++) request."""

    _QUERY_EC_KEYS = ["first_error_code", "first_error_message", "statement", "parameters"]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._query_err_ctx = {k: v for k,
                               v in kwargs.items() if k in self._QUERY_EC_KEYS}

    @property
    def first_error_code(self) -> Optional[int]:
        return self._query_err_ctx.get("first_error_code", None)

    @property
    def first_error_message(self) -> Optional[str]:
        return self._query_err_ctx.get("first_error_message", None)

    @property
    def statement(self) -> Optional[str]:
        return self._query_err_ctx.get("statement", None)

    @property
    def parameters(self) -> Optional[str]:
        return self._query_err_ctx.get("parameters", None)


class ViewErrorContext(HTTPErrorContext):
    """Context of a failed view request."""

    _VIEW_EC_KEYS = ["design_document_name", "view_name", "query_string"]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._view_err_ctx = {k: v for k,
                              v in kwargs.items() if k in self._VIEW_EC_KEYS}

    @property
    def design_document_name(self) -> Optional[str]:
        return self._view_err_ctx.get("design_document_name", None)

    @property
    def view_name(self) -> Optional[str]:
        return self._view_err_ctx.get("view_name", None)

    @property
    def query_string(self) -> Optional[str]:
        return self._view_err_ctx.get("query_string", None)


_CONTEXT_TYPES = {
    'ErrorContext': ErrorContext,
    'HTTPErrorContext': HTTPErrorContext,
    'QueryErrorContext': QueryErrorContext,
    'ViewErrorContext': ViewErrorContext,
}

ErrorContextType = Union[ErrorContext, HTTPErrorContext, QueryErrorContext, ViewErrorContext]


class CouchbaseException(Exception):
    """Base of every error raised or delivered by this package.

    Args:
        message (str, optional): The error message.
        context (Union[ErrorContext, Dict[str, Any]], optional): Details of the failed request.  A dict
            is converted w/ :meth:`ErrorContext.from_dict`.
        error_code (int, optional): The connector's error code.
        exc_info (Dict[str, Any], optional): Extra details, e.g. ``inner_cause``.
    """

    def __init__(self,
                 message=None,     # type: Optional[str]
                 context=None,      # type: Optional[Union[ErrorContextType, Dict[str, Any]]]
                 error_code=None,  # type: Optional[int]
                 exc_info=None      # type: Optional[Dict[str, Any]]
                 ):
        if isinstance(context, dict):
            context = ErrorContext.from_dict(**context)
        self._context = context
        self._message = message
        self._error_code = error_code
        self._exc_info = exc_info or {}
        super().__init__(message)

    @property
    def error_code(self) -> Optional[int]:
        return self._error_code

    @property
    def error_context(self) -> Optional[ErrorContextType]:
        return self._context

    @property
    def message(self) -> Optional[str]:
        return self._message

    @property
    def inner_cause(self) -> Optional[Exception]:
        return self._exc_info.get('inner_cause', None)

    def __repr__(self):
        details = []
        if self._error_code is not None:
            details.append(f'ec={self._error_code}')
        if self._message and not self._message.isspace():
            details.append(f'message={self._message}')
        if self._context:
            details.append(f'context={self._context}')
        if 'inner_cause' in self._exc_info:
            details.append(f'inner_cause={self._exc_info["inner_cause"]!r}')
        return f'{type(self).__name__}(<{", ".join(details)}>)'

    def __str__(self):
        return self.__repr__()


# common errors
class InvalidArgumentException(CouchbaseException):
    """ Raised when a provided argmument has an invalid value
        and/or invalid type.
    """


class InvalidConfigurationException(CouchbaseException):
    """ Raised, before anything is dispatched, when caller provided options
        conflict with a field owned by the handle performing the operation.
    """


class MissingConnectionException(CouchbaseException):
    pass


class TimeoutException(CouchbaseException):
    pass


class AmbiguousTimeoutException(TimeoutException):
    pass


# query/view errors
class ParsingFailedException(CouchbaseException):
    """
    Raised when the query service is unable to parse a N1QL query
    """


class DesignDocumentNotFoundException(CouchbaseException):
    pass


class ViewErrorException(CouchbaseException):
    """
    Raised when the view engine reports row level errors, e.g. a node failing
    while ``on_error`` is set to ``ViewErrorMode.CONTINUE``.
    """


# collection mgmt
class CollectionAlreadyExistsException(CouchbaseException):
    pass


class CollectionNotFoundException(CouchbaseException):
    pass


class ScopeAlreadyExistsException(CouchbaseException):
    pass


class ScopeNotFoundException(CouchbaseException):
    pass


class ErrorMapper:
    @staticmethod
    def _process_mapping(compiled_map,  # type: Dict[Pattern, type]
                         err_content  # type: str
                         ) -> Optional[type]:
        for pattern, exc_class in compiled_map.items():
            if pattern.match(err_content):
                return exc_class

        return None

    @staticmethod
    def _parse_http_response_body(compiled_map,  # type: Dict[Pattern, type]
                                  response_body  # type: str
                                  ) -> Optional[type]:
        try:
            http_body = json.loads(response_body)
        except json.decoder.JSONDecodeError:
            return None

        if isinstance(http_body, str):
            return ErrorMapper._process_mapping(compiled_map, http_body)
        if isinstance(http_body, dict) and isinstance(http_body.get('errors', None), list):
            for err in http_body['errors']:
                err_text = f"{err.get('code', None)} {err.get('msg', None)}"
                exc_class = ErrorMapper._process_mapping(compiled_map, err_text)
                if exc_class is not None:
                    return exc_class
        elif isinstance(http_body, dict) and isinstance(http_body.get('errors', None), dict):
            return ErrorMapper._process_mapping(compiled_map, json.dumps(http_body['errors']))

        return None

    @classmethod
    def build_exception(cls,
                        base_exc,  # type: Exception
                        mapping=None,  # type: Optional[Dict[str, type]]
                        ) -> CouchbaseException:
        """Maps an error reported by the connector onto the matching SDK exception.

        Connector errors that already are specific SDK exceptions pass through untouched.
        Otherwise the error message, then the HTTP response body of the error context,
        is matched against ``mapping`` (regex -> exception class).
        """
        if isinstance(base_exc, CouchbaseException) and type(base_exc) is not CouchbaseException:
            return base_exc

        compiled_map = {re.compile(k) if isinstance(k, str) else k: v for k, v in (mapping or {}).items()}
        err_ctx = base_exc.error_context if isinstance(base_exc, CouchbaseException) else None
        message = base_exc.message if isinstance(base_exc, CouchbaseException) else str(base_exc)

        exc_class = None
        if message:
            exc_class = ErrorMapper._process_mapping(compiled_map, message)
        if exc_class is None and isinstance(err_ctx, HTTPErrorContext) and err_ctx.response_body:
            exc_class = (ErrorMapper._process_mapping(compiled_map, err_ctx.response_body)
                         or ErrorMapper._parse_http_response_body(compiled_map, err_ctx.response_body))

        if exc_class is None:
            if isinstance(base_exc, CouchbaseException):
                return base_exc
            exc_class = CouchbaseException

        return exc_class(message=message, context=err_ctx, exc_info={'inner_cause': base_exc})
