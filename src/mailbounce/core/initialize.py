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

"""Initialize all global state.

Applications embedding mailbounce call `initialize()` once at startup, before
scanning or classifying any message.  Without it, the shipped default
configuration is loaded lazily and logging is left to the application.
"""

__all__ = [
    'INHIBIT_CONFIG_FILE',
    'initialize',
    'search_for_configuration_file',
    ]


import os

import mailbounce.core.logging

from mailbounce.config import config

# The test infrastructure uses this to prevent the search and loading of any
# existing configuration file.  Otherwise the existence of say a
# ~/.mailbounce.cfg file can break tests.
INHIBIT_CONFIG_FILE = object()



def search_for_configuration_file():
    """Search the file system for a configuration file to use.

    This is only called if no configuration path was given explicitly.
    """
    config_path = os.getenv('MAILBOUNCE_CONFIG_FILE')
    # Both None and the empty string are considered "missing".
    if config_path and os.path.exists(config_path):
        return os.path.abspath(config_path)
    # ./mailbounce.cfg
    config_path = os.path.abspath('mailbounce.cfg')
    if os.path.exists(config_path):
        return config_path
    # ~/.mailbounce.cfg
    config_path = os.path.join(os.path.expanduser('~'), '.mailbounce.cfg')
    if os.path.exists(config_path):
        return os.path.abspath(config_path)
    # /etc/mailbounce.cfg
    config_path = '/etc/mailbounce.cfg'
    if os.path.exists(config_path):
        return config_path
    return None



def initialize(config_path=None, propagate_logs=None):
    """Load the configuration and set up logging.

    :param config_path: The path to the configuration file.  When omitted the
        file system is searched, see `search_for_configuration_file()`.
    :type config_path: string
    :param propagate_logs: Should the log output propagate to stderr?
    :type propagate_logs: boolean or None
    """
    if config_path is None:
        config_path = search_for_configuration_file()
    elif config_path is INHIBIT_CONFIG_FILE:
        config_path = None
    config.load(config_path)
    mailbounce.core.logging.initialize(propagate_logs)
