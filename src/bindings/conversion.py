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
Value conversion for bindings.

A binding converter is called with the value and a ConversionContext:

    def convert(value, context):
        if context.targets(Slider, 'selection'):
            context.resolve(int(value))
        elif context.targets(TextInput):
            context.resolve(str(value))
        else:
            return value

The same converter is used for both directions of a two-way binding. The
context tells it which property the converted value is written to so it can
convert differently for each side.
'''
from __future__ import annotations

from collections.abc import Callable
from typing import Any, NamedTuple

from .error import ConversionError


__all__ = ['Conversion', 'ConversionContext', 'Converter', 'Binding', 'to']

type Converter = Callable[[Any, 'ConversionContext'], Any]


class Binding(NamedTuple):
    '''A binding path with an optional converter.'''
    path: str
    converter: Converter|None = None


def to(path: str, converter: Converter) -> Binding:
    '''
    Pair a path with a converter:
        bind_text=to('person.dob', lambda value, _: value.isoformat())
    '''
    return Binding(path, converter)


class ConversionContext:
    '''
    Describes the destination of a single conversion. Created by
    Conversion.convert() for each call of a converter.
    '''

    def __init__(self, target_type: type, name: str) -> None:
        self.target_type = target_type
        self.property = name
        self.result: Any = None
        self.resolved = False
        self.target_matched = False

    def targets(self, candidate_type: type, name: str|None = None) -> bool:
        '''
        True if the value is converted for property name of candidate_type
        (or any property of it if name is not given). Once this returned True
        the converter must call resolve() and not call targets() again.
        '''
        if self.target_matched:
            raise ConversionError('targets() may not be called again')
        self.target_matched = (candidate_type is self.target_type
                               and (not name or name == self.property))
        return self.target_matched

    def resolve(self, value: Any) -> None:
        '''Provide the result of the conversion.'''
        if self.resolved:
            raise ConversionError('resolve() was already called')
        self.resolved = True
        self.result = value

    def __str__(self) -> str:
        return f'ConversionContext({self.target_type.__qualname__}.{self.property})'
    __repr__ = __str__


class Conversion:
    '''Applies converters.'''

    @staticmethod
    def convert(value: Any,
                target_type: type,
                name: str,
                converter: Converter|None = None,
                fallback: Any = None) -> Any:
        '''
        Convert value for property name of target_type.
        None is never converted, fallback is returned instead. Without a
        converter value is returned as is.
        Raises ConversionError if the converter misuses the context.
        '''
        if value is None:
            return fallback
        if converter is None:
            return value
        context = ConversionContext(target_type, name)
        result = converter(value, context)
        if context.resolved:
            if result is not None:
                raise ConversionError(
                    'Converter may not return a value after resolve() was '
                    'called')
            return context.result
        if context.target_matched:
            raise ConversionError(
                f'Converter targeted {target_type.__qualname__}.{name} but did '
                'not call resolve()')
        return result
