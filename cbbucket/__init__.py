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

import platform
from functools import partial, partialmethod

__version__ = '1.0.0'

CBBUCKET_VERSION = f'python/{__version__}'
USER_AGENT_EXTRA = ''

try:
    USER_AGENT_EXTRA = f'python/{platform.python_version()}'
except Exception:  # nosec
    pass


""" Add support for logging, adding a TRACE level to logging """
import logging  # nopep8 # isort:skip # noqa: E402
import os  # nopep8 # isort:skip # noqa: E402

logging.TRACE = 5
logging.addLevelName(logging.TRACE, 'TRACE')
logging.Logger.trace = partialmethod(logging.Logger.log, logging.TRACE)
logging.trace = partial(logging.log, logging.TRACE)

_CBBUCKET_LOGGER_NAME = 'cbbucket'
_CBBUCKET_LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

logging.getLogger(_CBBUCKET_LOGGER_NAME).addHandler(logging.NullHandler())


class _LoggerSink(logging.Handler):
    """Forwards records emitted by the package loggers into a caller provided logger."""

    def __init__(self, target, level=logging.NOTSET):
        super().__init__(level)
        self._target = target

    def emit(self, record):
        if self._target.isEnabledFor(record.levelno):
            self._target.handle(record)


"""

Logging methods

"""


def _has_sink():
    pkg_logger = logging.getLogger(_CBBUCKET_LOGGER_NAME)
    return any(isinstance(h, (_LoggerSink, logging.StreamHandler)) for h in pkg_logger.handlers)


def configure_console_logger():
    log_level = os.getenv('CBBUCKET_LOG_LEVEL', None)
    if not log_level:
        return

    pkg_logger = logging.getLogger(_CBBUCKET_LOGGER_NAME)
    log_file = os.getenv('CBBUCKET_LOG_FILE', None)
    if log_file:
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_CBBUCKET_LOG_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.getLevelName(log_level.upper()))
    pkg_logger.debug(get_metadata(as_str=True))


def configure_logging(name, level=logging.INFO, parent_logger=None):
    if parent_logger:
        name = f'{parent_logger.name}.{name}'
    logger = logging.getLogger(name)
    if _has_sink():
        raise RuntimeError(('Cannot create logger.  Another logger has already been '
                            'initialized. Make sure the CBBUCKET_LOG_LEVEL and CBBUCKET_LOG_FILE env '
                            'variable are not set if using configure_logging.'))
    pkg_logger = logging.getLogger(_CBBUCKET_LOGGER_NAME)
    pkg_logger.addHandler(_LoggerSink(logger))
    pkg_logger.setLevel(level)
    pkg_logger.propagate = False
    logger.debug(get_metadata(as_str=True))
    return logger


def get_metadata(as_str=False):
    metadata = {
        'version': __version__,
        'user_agent': CBBUCKET_VERSION,
        'python': USER_AGENT_EXTRA,
    }
    if as_str:
        import json
        return json.dumps(metadata)
    return metadata


configure_console_logger()
