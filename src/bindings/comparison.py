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
Value comparison.

Properties only notify when a write changes their value, and subscriptions
ignore notifications that did not change the observed value. What counts as
a change is decided by a comparison mode:
    'strict': values of primitive types (numbers, strings, bytes, bools,
              None) are compared by value, NaN equals NaN. Everything else is
              compared by identity.
    'shallow': strict, or lists/tuples of the same type and length whose
               items are strictly equal, or dicts with the same keys whose
               values are strictly equal.
    'auto': strict, or == for objects of the same type that implement
            __eq__, otherwise shallow for plain lists, tuples and dicts.
    callable: strict, or the result of calling it with both values (which
              must be a bool).
'''
from collections.abc import Callable
from math import isnan
from typing import Literal


__all__ = ['CompareMode', 'equals', 'is_primitive']

type CompareFn = Callable[[object, object], bool]
type CompareMode = Literal['strict', 'shallow', 'auto'] | CompareFn

_PRIMITIVES = (str, bytes, int, float, complex, bool, type(None))


def is_primitive(value: object) -> bool:
    '''True if value is compared by value rather than identity.'''
    return isinstance(value, _PRIMITIVES)


def equals(a: object, b: object, mode: CompareMode = 'strict') -> bool:
    '''Returns True if a and b are equal according to mode.'''
    if mode not in ('strict', 'shallow', 'auto') and not callable(mode):
        raise ValueError(f'Invalid compare mode {mode!r}')
    if _strict(a, b):
        return True
    if callable(mode):
        result = mode(a, b)
        if not isinstance(result, bool):
            raise TypeError(f'compare function returned {result!r}, '
                            'expected a bool')
        return result
    if mode == 'shallow':
        return _shallow(a, b)
    if mode == 'auto':
        return _auto(a, b)
    return False


def _strict(a: object, b: object) -> bool:
    if a is b:
        return True
    if not (is_primitive(a) and is_primitive(b)):
        return False
    if isinstance(a, float) and isinstance(b, float) and isnan(a) and isnan(b):
        return True
    # True == 1 in python, but they are different values for a property
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return bool(a == b)


def _shallow(a: object, b: object) -> bool:
    if type(a) is not type(b):
        return False
    if isinstance(a, (list, tuple)):
        assert isinstance(b, (list, tuple))
        return (len(a) == len(b)
                and all(_strict(x, y) for (x, y) in zip(a, b)))
    if isinstance(a, dict):
        assert isinstance(b, dict)
        return (a.keys() == b.keys()
                and all(_strict(value, b[key]) for (key, value) in a.items()))
    return False


def _auto(a: object, b: object) -> bool:
    if type(a) is not type(b):
        return False
    if type(a) in (list, tuple, dict):
        return _shallow(a, b)
    if type(a).__eq__ is not object.__eq__:
        return bool(a == b)
    return False
