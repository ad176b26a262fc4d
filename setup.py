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

import re
import sys

from setuptools import setup, find_packages


if sys.hexversion < 0x30800f0:
    print('mailbounce requires at least Python 3.8')
    sys.exit(1)


# Calculate the version number without importing the mailbounce package.
with open('src/mailbounce/version.py') as fp:
    for line in fp:
        mo = re.match("VERSION = '(?P<version>[^']+?)'", line)
        if mo:
            __version__ = mo.group('version')
            break
    else:
        print('No version number found')
        sys.exit(1)



setup(
    name            = 'mailbounce',
    version         = __version__,
    description     = 'mailbounce -- bounce message scanning and classification',
    long_description= """\
mailbounce reads the delivery status notifications produced by mail transfer
agents, extracts the per-recipient failure details from each vendor's
dialect, and classifies them into normalized bounce records.""",
    author          = 'The mailbounce Developers',
    license         = 'GPLv3',
    keywords        = 'email bounce dsn',
    packages        = find_packages('src'),
    package_dir     = {'': 'src'},
    package_data    = {
        'mailbounce.config': ['*.cfg'],
        'mailbounce.bouncers.tests': ['data/*.txt'],
        },
    include_package_data = True,
    python_requires = '>=3.8',
    install_requires = [
        'flufl.enum',
        'lazr.config',
        'zope.interface',
        ],
    extras_require  = {
        'test': ['pytest'],
        },
    )
