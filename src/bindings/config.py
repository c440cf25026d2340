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
Binding configuration.

The only policy is how bindings to properties without a type check are
handled. In strict mode (the default) they are construction errors, otherwise
a warning is logged and the binding is created anyway.
'''
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from os import environ


__all__ = ['BindingContext', 'default_context', 'set_default_context',
           'binding_context', 'get_context']


@dataclass(frozen=True)
class BindingContext:
    '''Settings that apply to the bindings of an object tree.'''

    strict: bool = True
    '''Bindings to unchecked properties are errors (True) or warnings.'''

    @classmethod
    def from_env(cls) -> 'BindingContext':
        '''Create a context from the BINDINGS_STRICT environment variable.'''
        strict = environ.get('BINDINGS_STRICT', '1').lower()
        return cls(strict=strict not in ('0', 'false', 'no', 'off'))


_default = BindingContext.from_env()


def default_context() -> BindingContext:
    return _default


def set_default_context(context: BindingContext) -> BindingContext:
    '''Replace the default context. Returns the previous one.'''
    global _default  # pylint: disable=global-statement
    previous, _default = _default, context
    return previous


@contextmanager
def binding_context(**changes: bool) -> Iterator[BindingContext]:
    '''
    Temporarily replace the default context with a copy that has changes
    applied:
        with binding_context(strict=False):
            ...
    '''
    previous = set_default_context(replace(_default, **changes))
    try:
        yield _default
    finally:
        set_default_context(previous)


def get_context(obj: object) -> BindingContext:
    '''The context of obj if it has one, otherwise the default context.'''
    context = getattr(obj, 'context', None)
    if isinstance(context, BindingContext):
        return context
    return _default
