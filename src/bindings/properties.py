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
Checked properties and the classes that own them.

A Property is a descriptor that stores its value on the instance, type checks
writes when it has a type or type guard, and notifies listeners of the
instance with a '<name>Changed' event when a write changes the value.

    class Person(EventTarget):
        name = Property('', type=str)
        age = Property(0, type=int, convert='auto')

Classes created by PropertyManagerMeta (EventTarget and its subclasses) have a
_properties mapping of every Property they have, including inherited ones.
It is the schema bindings use to decide whether a property can be observed
and whether its writes are checked.
'''
from __future__ import annotations

from abc import ABC, ABCMeta
from collections.abc import Callable, Iterable, MutableMapping
from itertools import count
from logging import getLogger
from types import MappingProxyType
from typing import Any, Literal

from .comparison import CompareMode, equals
from .error import (MustNotBeCalled, PropertyConfigurationError,
                    PropertyTypeError, ConstructionError)
from .listeners import Listener, Listeners, change_event_type
from .type_check import TypeGuard, check_type, is_type


__all__ = ['Property', 'PropertyManagerMeta', 'EventTarget',
           'property_descriptor', 'supports_change_events', 'is_unchecked',
           'check_property_exists']

logger = getLogger('bindings.properties')

type Converter[T] = Literal['off', 'auto'] | Callable[[Any], T]


class Property[T]:
    '''
    An observable, optionally type checked, attribute.
    - T: is the type of value the property holds

    initial_value: the value of the property until it is written
    type: the type (or tuple of types) values must have
    type_guard: a callable that must return True for valid values
    convert: 'off' (default), 'auto' to call type(value) for values that are
             not of type, or a callable applied to values that are not of type
    equals: the comparison mode used to detect changes (see comparison.py)
    nullable: if False writing None writes initial_value instead, or fails if
              there is none
    classname, attr: names for display, provided by PropertyManagerMeta
    '''

    _property_count = count()  # class member for assigning default attr names

    def __init__(self,
                 initial_value: T|None = None,
                 *,
                 type: type|tuple[type, ...]|None = None,  # pylint: disable=redefined-builtin
                 type_guard: TypeGuard|None = None,
                 convert: Converter[T] = 'off',
                 equals: CompareMode = 'strict',  # pylint: disable=redefined-outer-name
                 nullable: bool = True,
                 classname: str|None = None,
                 attr: str|None = None) -> None:
        self.set_names(classname or '<no class associated>',
                       attr or f'property_{next(self._property_count)}')
        self.initial_value = initial_value
        self.type = type
        self.type_guard = type_guard
        self.equals = equals
        self.nullable = nullable
        if convert != 'off' and type is None:
            raise PropertyConfigurationError(
                f'{self} can only convert values if it has a type')
        self.convert = convert

    def set_names(self, classname: str, attr: str) -> None:
        '''
        Update the property with classname and attr.
        This is done by the PropertyManagerMeta namespace as soon as the
        property is added to the class body so the names are available to
        anything else in the class body that uses the property.
        '''
        self.classname = classname
        self.attr = attr
        self._attr: str = '_' + self.attr               # private
        self.change_event: str = change_event_type(attr)

    def __set_name__(self, owner: type, name: str) -> None:
        '''Name properties of classes not managed by PropertyManagerMeta.'''
        if not isinstance(owner, PropertyManagerMeta):
            self.set_names(owner.__qualname__, name)

    def __hash__(self) -> int:
        '''make Property hashable/immutable'''
        return id(self)

    @property
    def checked(self) -> bool:
        '''Writes to checked properties are type checked.'''
        return self.type is not None or self.type_guard is not None

    def check_type(self, value: object) -> None:
        '''Raise PropertyTypeError if value is not valid for this property.'''
        try:
            if self.type is not None:
                check_type(value, self.type)
            if self.type_guard is not None and not self.type_guard(value):
                raise TypeError('Type guard check failed')
        except TypeError as exc:
            raise PropertyTypeError(
                f'Failed to set property "{self.attr}": {exc}') from exc

    def _convert(self, value: object) -> object:
        if self.convert == 'off' or value is None:
            return value
        assert self.type is not None
        if is_type(value, self.type):
            return value
        convert = self.type if self.convert == 'auto' else self.convert
        if isinstance(convert, tuple):
            convert = convert[0]
        try:
            return convert(value)  # type: ignore
        except (TypeError, ValueError) as exc:
            raise PropertyTypeError(
                f'Failed to set property "{self.attr}": can not convert '
                f'{value!r}: {exc}') from exc

    def evaluate(self, instance: object) -> T|None:
        '''Get the value of the property on instance.'''
        try:
            return getattr(instance, self._attr)
        except AttributeError:
            setattr(instance, self._attr, self.initial_value)
            return self.initial_value

    ###########################################################################
    # Descriptor protocol for intercepting property updates
    ###########################################################################
    def __get__(self, instance: object, owner: type|None = None) -> Any:
        '''
        Get the value of the property.

        For instances (instance is not None) this returns the actual value.
        For classes (instance is None) the Property itself is returned.
        '''
        if instance is not None:
            return self.evaluate(instance)
        assert owner is not None
        return self

    def __set__(self, instance: object, value: T|None) -> None:
        new = self._convert(value)
        if new is None and not self.nullable:
            if self.initial_value is None:
                raise PropertyTypeError(
                    f'Failed to set property "{self.attr}": '
                    'Property is not nullable')
            new = self._convert(self.initial_value)
        old = self.evaluate(instance)
        if equals(old, new, self.equals):
            return
        if self.checked:
            self.check_type(new)
        setattr(instance, self._attr, new)
        listeners = Listeners.of(instance, create=False)
        if listeners is not None:
            listeners.trigger(self.change_event, value=new, old=old)

    __delete__ = MustNotBeCalled(
        None, "removal of properties is not permitted")
    # end Descriptor protocol.
    ###########################################################################

    def __str__(self) -> str:
        return f"{self.classname}.{self.attr}"
    __repr__ = __str__


class PropertyManagerMetaDict(dict[str, object]):
    '''
    A dict that is used by PropertyManagerMeta for class creation. It names
    Property members as they are added to the class body.
    '''

    def __init__(self, classname: str) -> None:
        super().__init__()
        self.classname = classname

    def __setitem__(self, attr: str, value: object) -> None:
        if isinstance(value, Property):
            value.set_names(self.classname, attr)
        super().__setitem__(attr, value)


class PropertyManagerMeta(ABCMeta, type):
    '''
    Metaclass to manage the Property members of classes.

    Property naming:
    Class members that are Properties will be named during class definition.
    (__prepare__) When a Property is set on the class after definition it will
    be named and added to the schema. (__setattr__)

    Schema:
    _properties maps each property name to its Property, including those
    inherited from bases. (__new__)
    '''

    _properties: MappingProxyType[str, Property[object]]

    @classmethod
    def __prepare__(metacls, name: str, bases: tuple[type, ...], \
                    # pylint: disable=unused-argument
                    /, **kwargs: object
                    ) -> MutableMapping[str, object]:
        return PropertyManagerMetaDict(name)

    def __setattr__(self, attr: str, value: object) -> None:
        '''
        call set_names() on Property attributes and add them to the schema
        '''
        if isinstance(value, Property):
            value.set_names(self.__qualname__, attr)
            super().__setattr__('_properties', MappingProxyType(
                {**self._properties, attr: value}))
        super().__setattr__(attr, value)

    def __new__[T: type](cls: T,
                         name: str,
                         bases: tuple[type, ...],
                         namespace: dict[str, object],
                         **kwargs: object) -> T:
        '''Create a new instance of a class managed by PropertyManagerMeta.'''
        own = {attr: value for (attr, value) in namespace.items()
               if isinstance(value, Property)}
        validate_properties_against_members(own.values(), namespace)
        properties: dict[str, Property[object]] = {}
        for base in reversed(bases):
            properties.update(getattr(base, '_properties', {}))
        properties.update(own)
        namespace['_properties'] = MappingProxyType(properties)
        ret: T = super().__new__(cls, name, bases, dict(namespace), **kwargs)
        return ret


def validate_properties_against_members(
        properties: Iterable[Property[object]],
        namespace: MutableMapping[str, object]) -> None:
    '''
    Check that none of the properties will clobber attributes with their
    storage attributes.
    Raises PropertyConfigurationError if there is a conflict.
    '''
    conflicts = {prop._attr for prop in properties} & namespace.keys()  # pylint: disable=protected-access
    if conflicts:
        raise PropertyConfigurationError(
            f'conflicting members: {", ".join(sorted(conflicts))}')


class EventTarget(ABC, metaclass=PropertyManagerMeta):
    '''
    Base class for objects with properties and events.

    Any event may be triggered on an EventTarget, so all of its attributes are
    considered observable, not only its Properties. EventTargets are disposed
    exactly once, notifying 'dispose' listeners.
    '''

    _disposed: bool = False

    @property
    def listeners(self) -> Listeners:
        listeners = Listeners.of(self)
        assert listeners is not None
        return listeners

    def on(self, type_: str, listener: Listener) -> None:
        self.listeners.on(type_, listener)

    def off(self, type_: str, listener: Listener) -> None:
        self.listeners.off(type_, listener)

    def once(self, type_: str, listener: Listener) -> Listener:
        return self.listeners.once(type_, listener)

    def trigger(self, type_: str, **kwargs: object) -> None:
        self.listeners.trigger(type_, **kwargs)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        '''
        Notify 'dispose' listeners and then drop all listeners. Subsequent
        calls do nothing.
        '''
        if self._disposed:
            return
        self._disposed = True
        logger.debug('disposing %s', self)
        try:
            self.trigger('dispose')
        finally:
            self.listeners.clear()


def property_descriptor(target: object, name: str) -> Property[object]|None:
    '''The Property for name on the class of target, if it has one.'''
    properties = getattr(type(target), '_properties', None)
    if properties is not None:
        prop = properties.get(name)
    else:
        # bare classes have no schema
        prop = getattr(type(target), name, None)
    return prop if isinstance(prop, Property) else None


def supports_change_events(target: object, name: str) -> bool:
    '''
    True if target notifies listeners of changes to name.
    EventTargets can trigger any event, other objects only for Properties.
    '''
    if isinstance(target, EventTarget):
        return True
    return property_descriptor(target, name) is not None


def is_unchecked(target: object, name: str) -> bool:
    '''
    True if name is a Property of target that does not type check writes.
    Other settable attributes (python properties, other descriptors)
    are trusted to do their own checking.
    '''
    prop = property_descriptor(target, name)
    return prop is not None and not prop.checked


def check_property_exists(target: object, name: str,
                          prefix: str = '') -> None:
    '''
    Raise ConstructionError unless target has a settable attribute name that
    is defined by its class (a Property or other data descriptor).
    '''
    for klass in type(target).__mro__:
        if name in vars(klass):
            attr = vars(klass)[name]
            if isinstance(attr, property):
                if attr.fset is None:
                    raise ConstructionError(
                        f'{prefix}Property "{name}" of '
                        f'{type(target).__qualname__} is read only.')
                return
            if hasattr(type(attr), '__set__'):
                return
            break
    if name in getattr(target, '__dict__', {}) or hasattr(target, name):
        raise ConstructionError(
            f'{prefix}Property "{name}" of {type(target).__qualname__} '
            'does not perform type checks.')
    raise ConstructionError(
        f'{prefix}{type(target).__qualname__} does not have a property '
        f'"{name}".')
