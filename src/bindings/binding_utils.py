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
Helpers shared by one-way and two-way bindings.
'''
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from logging import getLogger

from .config import get_context
from .error import ConstructionError
from .properties import check_property_exists, is_unchecked


__all__ = ['Direction', 'TargetPath', 'check_path_syntax',
           'check_property_safety', 'claim_receiver', 'release_receiver']

logger = getLogger('bindings.binding_utils')

_INVALID_PATH_CHARS = re.compile(r'\s|\[|\]|\(|\)|<|>')


class Direction(Enum):
    '''The direction values flow between the local and the remote side.'''
    BIDIRECTIONAL = '<->'
    SEND_ONLY = '>>'
    RECEIVE_ONLY = '<<'

    @property
    def sends(self) -> bool:
        '''local changes are written to the remote side'''
        return self is not Direction.RECEIVE_ONLY

    @property
    def receives(self) -> bool:
        '''remote changes are written to the local side'''
        return self is not Direction.SEND_ONLY


def check_path_syntax(path: str) -> None:
    if _INVALID_PATH_CHARS.search(path):
        raise ConstructionError(
            f'Binding path "{path}" contains invalid characters.')


@dataclass(frozen=True)
class TargetPath:
    '''
    The remote side of a two-way binding, parsed from
    '[>>|<<] selector.property'.
    '''
    direction: Direction
    selector: str
    property: str

    @classmethod
    def parse(cls, path: str) -> TargetPath:
        direction = Direction.BIDIRECTIONAL
        path = path.strip()
        for candidate in (Direction.SEND_ONLY, Direction.RECEIVE_ONLY):
            prefix = candidate.value
            if path.startswith(prefix):
                direction = candidate
                path = path[len(prefix):].lstrip()
                break
        check_path_syntax(path)
        segments = path.split('.')
        if len(segments) < 2:
            raise ConstructionError(
                f'Binding path "{path}" needs at least two segments.')
        if len(segments) > 2:
            raise ConstructionError(
                f'Binding path "{path}" has too many segments.')
        selector, property_ = segments
        if not selector or not property_:
            raise ConstructionError(
                f'Binding path "{path}" contains empty segments.')
        return cls(direction, selector, property_)

    def __str__(self) -> str:
        return f'{self.selector}.{self.property}'


def check_property_safety(owner: object, target: object, name: str,
                          prefix: str) -> None:
    '''
    Check that property name of target exists and is type checked.
    An unchecked property is an error if the binding context of owner is
    strict, otherwise a warning is logged.
    prefix identifies the binding in messages.
    '''
    check_property_exists(target, name, f'{prefix}: ')
    if not is_unchecked(target, name):
        return
    if get_context(owner).strict:
        raise ConstructionError(
            f'{prefix}: Property "{name}" of {type(target).__qualname__} '
            'requires an explicit type check.')
    logger.warning('Unsafe binding %s: Property "%s" of %s has no type '
                   'check.', prefix, name, type(target).__qualname__)


_RECEIVERS = '_binding_receivers'


def claim_receiver(target: object, name: str, binding: object) -> None:
    '''
    Record that binding writes property name of target. A property can only
    be written by one binding.
    Raises ConstructionError if another binding already claimed it.
    '''
    receivers: dict[str, object]|None = getattr(target, _RECEIVERS, None)
    if receivers is None:
        receivers = {}
        setattr(target, _RECEIVERS, receivers)
    current = receivers.get(name)
    if current is not None and current is not binding:
        raise ConstructionError(
            f'Property "{name}" of {type(target).__qualname__} is already '
            f'the receiving end of binding {current}')
    receivers[name] = binding


def release_receiver(target: object, name: str, binding: object) -> None:
    '''Release a claim made by claim_receiver(), if binding holds it.'''
    receivers: dict[str, object]|None = getattr(target, _RECEIVERS, None)
    if receivers is not None and receivers.get(name) is binding:
        del receivers[name]
