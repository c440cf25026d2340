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
Error definitions.
'''
from collections.abc import Callable
from typing import NoReturn


__all__ = ['MustNotBeCalled', 'BindingError', 'ConstructionError',
           'SelectorError', 'SelectorNotFound', 'SelectorAmbiguous',
           'ConversionError', 'PropagationError', 'NotAttachedError',
           'BindingConfigurationError', 'PropertyConfigurationError',
           'PropertyTypeError', 'PathValueError']


class MustNotBeCalled(RuntimeError):
    '''
    Raised by methods that are easy to call when they really aren't what should
    be called.
    '''
    def __init__(self, func: Callable[..., object]|None,
                 *args: object, **kwargs: object) -> None:
        if func:
            # subclasses don't have to pass func if they already handled it.
            super().__init__(f'{func} must not be called', *args, **kwargs)
        else:
            super().__init__(*args, **kwargs)

    def __call__(self, *args: object, **kwargs: object) -> NoReturn:
        '''raises self to indicate a MustNotBeCalled was in fact called'''
        raise self


class BindingError(RuntimeError):
    '''base class for binding errors'''


class ConstructionError(BindingError):
    '''
    A binding could not be created. Raised synchronously when a binding is
    declared or activated and only fatal to that one binding.
    '''


class SelectorError(ConstructionError):
    '''A selector did not resolve to exactly one object.'''

class SelectorNotFound(SelectorError): ...
class SelectorAmbiguous(SelectorError): ...


class ConversionError(BindingError):
    '''
    A converter raised or did not follow the targets()/resolve() protocol.
    '''


class PropagationError(BindingError):
    '''
    Writing a value to one side of a binding failed. Raised to whoever
    triggered the originating mutation.
    '''


class NotAttachedError(BindingError):
    '''
    One-way bindings were declared on an object that was never attached to a
    binding root.
    '''


class BindingConfigurationError(BindingError):
    '''
    A binding was declared on a class that can not host bindings.
    '''


class PropertyConfigurationError(RuntimeError):
    '''Error indicating a property definition or management is improper.'''


class PropertyTypeError(TypeError):
    '''A value was rejected by the type check of a checked property.'''


class PathValueError(TypeError):
    '''
    An intermediate value of a subscribed path is neither an object nor None.
    '''
