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
Change notification.

Every object that takes part in bindings can have a Listeners store. Events
are dispatched synchronously by trigger() on the stack of whoever triggered
them. Listeners are plain callables that take the Event.
'''
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger

from .logging_config import VERBOSE


__all__ = ['Event', 'Listener', 'Listeners', 'change_event_type']

logger = getLogger('bindings.listeners')


def change_event_type(name: str) -> str:
    '''The type of the event fired when property name changes.'''
    return f'{name}Changed'


@dataclass(frozen=True, eq=False)
class Event[T]:
    '''
    A notification dispatched to listeners.
    target: the object the event is triggered on
    type: the event type, for property changes '<property>Changed'
    value: the new value of the property (for change events)
    old: the previous value of the property (for change events)
    original_event: the event that caused this one, if any. Subscriptions
                    always forward change events that have one, even if the
                    value did not change.
    '''
    target: object
    type: str
    value: T|None = None
    old: T|None = None
    original_event: Event[object]|None = None

    def __str__(self) -> str:
        return f'{self.type}({self.old!r} -> {self.value!r})'


type Listener = Callable[[Event[object]], object]


class Listeners:
    '''
    The listeners registered on a single target, by event type.

    The store is created on first use and kept on the target so that it is
    collected along with it.
    '''

    _attr = '_listeners_store'

    def __init__(self, target: object) -> None:
        self.target = target
        self._listeners: dict[str, list[Listener]] = {}

    @classmethod
    def of(cls, target: object, create: bool = True) -> Listeners|None:
        '''
        Get the store for target. If target has none and create is True one
        is created, otherwise None is returned.
        '''
        store = target.__dict__.get(cls._attr) if hasattr(
            target, '__dict__') else None
        if store is None and create:
            store = cls(target)
            try:
                setattr(target, cls._attr, store)
            except AttributeError:
                raise TypeError(
                    f'{type(target).__qualname__} objects can not have '
                    'listeners') from None
        return store

    def on(self, type_: str, listener: Listener) -> None:
        '''Register listener for events of type_.'''
        self._listeners.setdefault(type_, []).append(listener)

    def off(self, type_: str, listener: Listener) -> None:
        '''
        Unregister listener for type_. Unregistering a listener that is not
        registered is a no op.
        '''
        listeners = self._listeners.get(type_)
        if listeners and listener in listeners:
            listeners.remove(listener)
            if not listeners:
                del self._listeners[type_]

    def once(self, type_: str, listener: Listener) -> Listener:
        '''
        Register listener to be called for the next event of type_ only.
        Returns the wrapper that is registered so it can be removed with off().
        '''
        def _once(event: Event[object]) -> object:
            self.off(type_, _once)
            return listener(event)
        self.on(type_, _once)
        return _once

    def has(self, type_: str) -> bool:
        return bool(self._listeners.get(type_))

    def clear(self) -> None:
        self._listeners.clear()

    def trigger(self, type_: str, **kwargs: object) -> Event[object]:
        '''
        Create an event and dispatch it to the listeners registered for type_.
        Listeners unregistered while the event is dispatched are not called.
        Errors raised by listeners propagate to the caller.
        '''
        event = Event[object](self.target, type_, **kwargs)  # type: ignore
        self.dispatch(event)
        return event

    def dispatch(self, event: Event[object]) -> None:
        listeners = self._listeners.get(event.type)
        if not listeners:
            return
        logger.log(VERBOSE, '%s dispatching %s to %d listeners',
                   self, event, len(listeners))
        for listener in tuple(listeners):
            if listener in self._listeners.get(event.type, ()):
                listener(event)

    def __str__(self) -> str:
        return f'Listeners({type(self.target).__qualname__}({id(self.target)}))'
    __repr__ = __str__
