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
Selector resolution.

Selectors identify objects in a tree:
    '#id'     the object with that id
    'Name'    objects whose class is named Name
    '*'       any object
    ':host'   the scope itself
'''
from collections.abc import Iterable
from typing import Protocol

from .error import SelectorAmbiguous, SelectorNotFound


__all__ = ['HOST', 'Searchable', 'matches', 'resolve']

HOST = ':host'


class Searchable(Protocol):
    '''A scope that can be searched for descendants matching a selector.'''
    def find(self, selector: str|None = None) -> Iterable[object]: ...


def matches(obj: object, selector: str|None) -> bool:
    '''True if obj matches selector. A selector of None matches everything.'''
    if selector is None or selector == '*':
        return True
    if selector.startswith('#'):
        return getattr(obj, 'id', None) == selector[1:]
    return type(obj).__name__ == selector


def resolve(scope: Searchable, selector: str) -> object:
    '''
    Resolve selector in scope to exactly one object.
    Raises SelectorNotFound if nothing matches and SelectorAmbiguous if more
    than one object matches.
    '''
    if selector == HOST:
        return scope
    results = list(scope.find(selector))
    if not results:
        raise SelectorNotFound(
            f'No widget matching "{selector}" was appended.')
    if len(results) > 1:
        raise SelectorAmbiguous(
            f'Multiple widgets matching "{selector}" were appended.')
    return results[0]
