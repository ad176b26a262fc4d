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

"""Configuration file loading and management."""

__all__ = [
    'Configuration',
    ]


from contextlib import ExitStack
from importlib.resources import as_file, files

from lazr.config import ConfigSchema, as_boolean
from zope.interface import Interface, implementer

from mailbounce.core.errors import BadConfigurationError



class IConfiguration(Interface):
    """Marker interface for the global configuration object."""



@implementer(IConfiguration)
class Configuration:
    """The core global configuration object."""

    def __init__(self):
        self._config = None
        self.filename = None

    def __getattr__(self, name):
        """Delegate to the configuration object."""
        # Only sections of the lazr.config object are looked up here, never
        # our own private attributes.
        if name.startswith('_'):
            raise AttributeError(name)
        if self._config is None:
            self.load()
        return getattr(self._config, name)

    def load(self, filename=None):
        """Load the configuration from the schema and config files.

        :param filename: Optional path to a user configuration file, which is
            pushed on top of the shipped defaults.
        :type filename: string
        :raise BadConfigurationError: when the user file cannot be read.
        """
        package = files('mailbounce.config')
        with ExitStack() as resources:
            schema_path = resources.enter_context(
                as_file(package / 'schema.cfg'))
            config_path = resources.enter_context(
                as_file(package / 'mailbounce.cfg'))
            schema = ConfigSchema(str(schema_path))
            self._config = schema.load(str(config_path))
        self.filename = None
        if filename is not None:
            try:
                with open(filename) as user_config:
                    self._config.push(filename, user_config.read())
            except OSError:
                raise BadConfigurationError(filename)
            self.filename = filename

    def push(self, config_name, config_string):
        """Push a new configuration onto the stack."""
        if self._config is None:
            self.load()
        self._config.push(config_name, config_string)

    def pop(self, config_name):
        """Pop a configuration from the stack."""
        self._config.pop(config_name)

    @property
    def logger_configs(self):
        """Return all log config sections."""
        return self.getByCategory('logging', [])

    @property
    def include_delivered(self):
        """Are delivered (2.x.x) records reported by default?"""
        return as_boolean(self.mailbounce.include_delivered)

    @property
    def retry_reasons(self):
        """The reasons which are re-inferred during classification."""
        return frozenset(self.reasons.retry.split())

    def header_order(self, kind):
        """Return the configured header search order.

        :param kind: One of 'addresser', 'recipient' or 'date'.
        :type kind: string
        :return: The lower-cased header field names, in search order.
        :rtype: list of strings
        """
        return [name.lower() for name in getattr(self.headers, kind).split()]
