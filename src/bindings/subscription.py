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
Path subscriptions.

subscribe(root, ('a', 'b'), callback) calls callback with root.a.b now and
every time it changes, whether because b changed on the current root.a or
because root.a was replaced by another object. Each Subscription observes one
property of one object and owns the subscription for the rest of the path on
the object that property currently holds:

    Subscription(root, ('a', 'b'))
        listens for root 'aChanged'
        nested: Subscription(root.a, ('b',))
                    listens for root.a 'bChanged'

When root.a changes the nested subscription is cancelled and a new one is
created for the new object.
'''
from __future__ import annotations

from collections.abc import Callable, Sequence
from logging import getLogger
from types import TracebackType
from typing import Any

from .comparison import equals, is_primitive
from .error import PathValueError
from .listeners import Event, Listeners, change_event_type
from .logging_config import VERBOSE
from .properties import supports_change_events


__all__ = ['Subscription', 'subscribe', 'parse_path']

logger = getLogger('bindings.subscription')

type Callback = Callable[[Any], object]

_FORCE = object()
'''passed to the listener for the initial evaluation'''
_UNSET = object()
'''the observed value before the initial evaluation'''


def parse_path(path: str|Sequence[str]) -> tuple[str, ...]:
    '''
    Validate path and return it as a tuple. A string is split on '.'.
    Raises ValueError for empty paths or empty names.
    '''
    if isinstance(path, str):
        path = path.split('.')
    if not isinstance(path, (list, tuple)):
        raise TypeError(f'path is not a sequence: {path!r}')
    if not path:
        raise ValueError('path is empty')
    if any(not entry or not isinstance(entry, str) for entry in path):
        raise ValueError(f'path contains invalid entries: {path!r}')
    return tuple(path)


def read_property(obj: object, name: str) -> Any:
    '''The value of property name of obj, None if it has none.'''
    return getattr(obj, name, None)


class Subscription:
    '''
    A subscription to the value at path from root. Created (and started) by
    subscribe().

    The subscription can be cancelled by calling cancel(), calling the
    subscription, or leaving it as a context manager:
        with subscribe(root, ('a', 'b'), print):
            ...
    '''

    nested: Subscription|None = None
    '''The subscription for the rest of the path, if any.'''

    def __init__(self,
                 root: object,
                 path: str|Sequence[str],
                 callback: Callback) -> None:
        if root is None or is_primitive(root):
            raise TypeError(f'root is not an object: {root!r}')
        if not callable(callback):
            raise TypeError(f'callback is not callable: {callback!r}')
        self.root = root
        self.path = parse_path(path)
        self.callback = callback
        self.property, *rest = self.path
        self.sub_path = tuple(rest)
        self.cancelled = False
        self._value: object = _UNSET
        self._listeners: Listeners|None = None

    def start(self) -> Subscription:
        '''
        Listen for changes to the first property and call the callback with
        the current value. If that fails nothing is left listening.
        '''
        if supports_change_events(self.root, self.property):
            self._listeners = Listeners.of(self.root)
            assert self._listeners is not None
            self._listeners.on(change_event_type(self.property),
                               self._changed)
        try:
            self._changed(_FORCE)
        except BaseException:
            self.cancel()
            raise
        return self

    def _changed(self, event: Event[object]|object) -> None:
        '''
        Listener for changes to the first property.
        Changes that do not change the value are ignored unless they carry the
        event that caused them.
        '''
        if self.cancelled:
            return
        value = read_property(self.root, self.property)
        if (event is not _FORCE
                and equals(self._value, value)
                and getattr(event, 'original_event', None) is None):
            return
        self._value = value
        logger.log(VERBOSE, '%s changed to %r', self, value)
        if not self.sub_path:
            self.callback(value)
            return

        if self.nested is not None:
            self.nested.cancel()
            self.nested = None
        if value is None:
            self.callback(None)
        elif is_primitive(value):
            raise PathValueError(
                f'Value of property "{self.property}" is of type '
                f'{type(value).__qualname__}, expected object')
        else:
            self.nested = Subscription(value, self.sub_path,
                                       self.callback).start()

    def cancel(self) -> None:
        '''
        Stop listening and cancel the nested subscription. No callbacks are
        made after this returns. Calling it more than once does nothing.
        '''
        if self.cancelled:
            return
        self.cancelled = True
        if self._listeners is not None:
            self._listeners.off(change_event_type(self.property),
                                self._changed)
            self._listeners = None
        if self.nested is not None:
            self.nested.cancel()
            self.nested = None
    __call__ = cancel

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self,
                 exc_type: type[BaseException]|None,
                 exc_val: BaseException|None,
                 exc_tb: TracebackType|None) -> None:
        self.cancel()

    def __str__(self) -> str:
        return (f'Subscription({type(self.root).__qualname__}'
                f'({id(self.root)}).{".".join(self.path)})')
    __repr__ = __str__


def subscribe(root: object,
              path: str|Sequence[str],
              callback: Callback) -> Subscription:
    '''
    Call callback with the value at path from root now and whenever it
    changes. Returns the Subscription, cancel() it to stop.

    Raises TypeError or ValueError for invalid arguments, and PathValueError
    if an intermediate value of path is not an object or None.
    '''
    return Subscription(root, path, callback).start()
