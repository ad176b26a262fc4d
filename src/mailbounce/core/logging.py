# Copyright (C) 2014-2016 by the Free Software Foundation, Inc.
#
# This file is part of mailbounce.
#
# mailbounce is free software: you can redistribute it and/or modify it under
# the terms of the GNU General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option)
# any later version.
#
# mailbounce is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
# FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License for
# more details.
#
# You should have received a copy of the GNU General Public License along with
# mailbounce.  If not, see <http://www.gnu.org/licenses/>.

"""Logging initialization, using Python's standard logging package."""

__all__ = [
    'get_handler',
    'initialize',
    'reopen',
    ]


import os
import sys
import logging

from lazr.config import as_boolean, as_log_level

from mailbounce.config import config


_handlers = {}



class ReopenableFileHandler(logging.Handler):
    """A file handler that supports reopening."""

    def __init__(self, name, filename):
        logging.Handler.__init__(self)
        self.name = name
        self.filename = filename
        self._stream = self._open()

    def _open(self):
        return open(self.filename, 'a', encoding='utf-8')

    def emit(self, record):
        try:
            self._stream.write(self.format(record) + '\n')
            self._stream.flush()
        except Exception:
            self.handleError(record)

    def close(self):
        if self._stream:
            self._stream.close()
            self._stream = None
        logging.Handler.close(self)

    def reopen(self):
        """Reopen the output stream, e.g. after the file was rotated."""
        if self._stream:
            self._stream.close()
        self._stream = self._open()



def initialize(propagate=None):
    """Initialize all logs.

    :param propagate: Flag specifying whether logs should propagate their
        messages to the root logger.  If omitted, propagation is determined
        from the configuration files.
    :type propagate: bool or None
    """
    # The root logger writes to stderr; every sub-log gets its own formatter
    # and, when a path is configured, its own file.
    logging.basicConfig(format=config.logging.root.format,
                        datefmt=config.logging.root.datefmt,
                        level=as_log_level(config.logging.root.level),
                        stream=sys.stderr)
    for logger_config in config.logger_configs:
        sub_name = logger_config.name.split('.')[-1]
        if sub_name == 'root':
            continue
        log = logging.getLogger('mailbounce.' + sub_name)
        log.propagate = (as_boolean(logger_config.propagate)
                         if propagate is None else propagate)
        log.setLevel(as_log_level(logger_config.level))
        path_str = logger_config.path.strip()
        if not path_str:
            continue
        formatter = logging.Formatter(fmt=logger_config.format,
                                      datefmt=logger_config.datefmt)
        path_abs = os.path.abspath(path_str)
        old_handler = _handlers.pop(sub_name, None)
        if old_handler is not None:
            log.removeHandler(old_handler)
            old_handler.close()
        handler = ReopenableFileHandler(sub_name, path_abs)
        _handlers[sub_name] = handler
        handler.setFormatter(formatter)
        log.addHandler(handler)



def reopen():
    """Re-open all log files."""
    for handler in _handlers.values():
        handler.reopen()



def get_handler(sub_name):
    """Return the handler associated with a named logger.

    :param sub_name: The logger name, sans the 'mailbounce.' prefix.
    :type sub_name: string
    :return: The file handler associated with the named logger.
    :rtype: `ReopenableFileHandler`
    """
    return _handlers[sub_name]
