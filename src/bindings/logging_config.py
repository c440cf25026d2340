# Copyright (C) 2025 Anthony (Lonnie) Hutchinson <chinacat@chinacat.org>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
Logging level definitions and loading of the logging config from a file.
'''
from logging import DEBUG, addLevelName
from logging.config import fileConfig
from os import environ
from os.path import expanduser, exists


__all__ = ['VERBOSE', 'configure_logging']

# Define a custom log level.
VERBOSE = DEBUG - 5
addLevelName(VERBOSE, 'VERBOSE')


def configure_logging(path: str|None = None) -> bool:
    '''
    Load a logging.config file. The file is path, the file named by the
    BINDINGS_LOGGING_CONFIG environment variable, or logging.config in the
    users home directory, whichever is found first.
    Returns True if a file was loaded.
    '''
    path = (path or environ.get('BINDINGS_LOGGING_CONFIG')
            or f"{expanduser('~')}/logging.config")
    if not exists(path):
        return False
    fileConfig(path, disable_existing_loggers=False)
    return True
