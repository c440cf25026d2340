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
Runtime type checks for checked properties.
'''
from collections.abc import Callable


__all__ = ['TypeGuard', 'check_type', 'is_type', 'type_name']

type TypeGuard = Callable[[object], bool]


def type_name(type_: type|tuple[type, ...]) -> str:
    if isinstance(type_, tuple):
        return ' | '.join(type_name(t) for t in type_)
    return type_.__qualname__


def is_type(value: object, type_: type|tuple[type, ...]) -> bool:
    '''
    True if value is an instance of type_. A bool is not accepted as an int or
    float, but an int is accepted as a float.
    '''
    types = type_ if isinstance(type_, tuple) else (type_,)
    for t in types:
        if isinstance(value, bool) and t is not bool and t in (int, float):
            continue
        if isinstance(value, t):
            return True
        if t is float and isinstance(value, int) and not isinstance(value, bool):
            return True
    return False


def check_type(value: object, type_: type|tuple[type, ...]) -> None:
    '''
    Raise a TypeError if value is not None and not of type_.
    '''
    if value is None or is_type(value, type_):
        return
    raise TypeError(f'Expected value to be of type "{type_name(type_)}", '
                    f'but found "{type(value).__qualname__}".')
