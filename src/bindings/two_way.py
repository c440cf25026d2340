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
Two-way bindings.

A Component property declared with bind() is kept in sync with a property of
an object in the component's tree:

    class Form(Component):
        text = bind('#input.text', '', type=str)

The binding is created when the component is appended to for the first time.
After that form.text and form's '#input' text have the same value no matter
which one is written.

The path may be prefixed to limit the direction values flow:
    '>> #input.text'  the component property is written to the input only
    '<< #input.text'  the input text is written to the component only

bind_all() binds the properties of a model object held by a component
property:

    class PersonForm(Component):
        person = bind_all({'name': '#name.text',
                           'age': to('#age.selection', convert_age)},
                          type=Person)
'''
from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from logging import getLogger
from typing import Any

from .binding_utils import (Direction, TargetPath, check_property_safety,
                            claim_receiver, release_receiver)
from .comparison import equals, is_primitive
from .conversion import Binding, Conversion, Converter
from .error import (BindingConfigurationError, ConstructionError,
                    ConversionError, PropagationError)
from .listeners import Event, Listener
from .logging_config import VERBOSE
from .properties import Property
from .selector import resolve
from .subscription import Subscription, read_property, subscribe


__all__ = ['TwoWayBinding', 'Bind', 'bind', 'bind_all']

logger = getLogger('bindings.two_way')

type LocalPath = tuple[str] | tuple[str, str]
type BindingDeclaration = str | Binding | Sequence[str | Binding]


class TwoWayBinding:
    '''
    Synchronizes a property of a component (or of the model object a
    component property holds) with a property of an object selected from the
    component's tree.

    The local path is (property,) to bind a component property or
    (property, sub_property) to bind sub_property of the object held by
    property. The remote object is resolved once when the binding is created.

    Both directions write through a single guard. While a value is
    propagated in one direction the change notifications caused by the writes
    are ignored, which is what stops the two sides from updating each other
    forever.
    '''

    def __init__(self,
                 component: Any,
                 local_path: Sequence[str],
                 target_path: TargetPath|str,
                 converter: Converter|None = None) -> None:
        self.component = component
        self.local_path: LocalPath = tuple(local_path)  # type: ignore
        self.target_path = (TargetPath.parse(target_path)
                            if isinstance(target_path, str) else target_path)
        self.direction = self.target_path.direction
        self.target_property = self.target_path.property
        self.converter = converter
        self.disposed = False
        self._initialized = False
        self._guard = False
        self._subscriptions: list[Subscription] = []
        self._claims: list[tuple[object, str]] = []
        self._model: object|None = None
        self._dispose_listener: Listener|None = None

        if not 1 <= len(self.local_path) <= 2:
            raise ConstructionError(
                f'Error in binding {self}: Invalid number of path segments')
        try:
            self.target = resolve(component, self.target_path.selector)
        except ConstructionError as exc:
            raise type(exc)(f'Error in binding {self}: {exc}') from exc

        self._check_property_safety(self.target, self.target_property)
        self._check_property_safety(component, self.local_path[0])
        self.fallback = self._get_remote()

        try:
            self._claim_receivers()
            self._subscribe_local()
            self._subscribe_remote()
        except BaseException:
            self.dispose()
            raise
        self._dispose_listener = component.once('dispose', self._on_dispose)
        self._initialized = True
        logger.debug('%s created with fallback %r', self, self.fallback)

    def __str__(self) -> str:
        arrow = self.direction.value
        return f'"{".".join(self.local_path)}" {arrow} "{self.target_path}"'
    __repr__ = __str__

    ###########################################################################
    # lifecycle
    ###########################################################################
    def dispose(self) -> None:
        '''Stop synchronizing. Subsequent calls do nothing.'''
        if self.disposed:
            return
        self.disposed = True
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        for (target, name) in self._claims:
            release_receiver(target, name, self)
        self._claims.clear()
        self._release_model()
        if self._dispose_listener is not None:
            self.component.off('dispose', self._dispose_listener)
            self._dispose_listener = None
        logger.debug('%s disposed', self)

    def _on_dispose(self, _event: Event[object]) -> None:
        self.dispose()

    def _claim_receivers(self) -> None:
        if self.direction.sends:
            claim_receiver(self.target, self.target_property, self)
            self._claims.append((self.target, self.target_property))
        if not self.direction.receives:
            return
        if self._binds_to_model():
            # the claim follows the model held by the component property
            self._subscriptions.append(subscribe(
                self.component, self.local_path[:1], self._claim_model))
        else:
            claim_receiver(self.component, self.local_path[0], self)
            self._claims.append((self.component, self.local_path[0]))

    def _claim_model(self, model: Any) -> None:
        '''Move the claim on the bound model property to model.'''
        self._release_model()
        if model is not None and not is_primitive(model):
            claim_receiver(model, self.local_path[1], self)
            self._model = model

    def _release_model(self) -> None:
        if self._model is not None:
            release_receiver(self._model, self.local_path[1], self)
            self._model = None

    def _check_property_safety(self, target: object, name: str) -> None:
        check_property_safety(self.component, target, name,
                              f'Binding {self} failed')

    ###########################################################################
    # subscriptions
    ###########################################################################
    @contextmanager
    def _suspended(self) -> Iterator[None]:
        '''Hold the guard for the duration of the context.'''
        self._guard = True
        try:
            yield
        finally:
            self._guard = False

    def _subscribe(self,
                   root: object,
                   path: Sequence[str],
                   callback: Callable[[Any], None]) -> None:
        def guarded(value: Any) -> None:
            if self._guard:
                logger.log(VERBOSE, '%s ignored %r while propagating',
                           self, value)
                return
            with self._suspended():
                callback(value)
        self._subscriptions.append(subscribe(root, path, guarded))

    def _subscribe_local(self) -> None:
        if self.direction.sends:
            self._subscribe(self.component, self.local_path, self._send)
        elif self._binds_to_model():
            self._subscribe(self.component, self.local_path[:1],
                            self._refresh_model)

    def _subscribe_remote(self) -> None:
        if self.direction.receives:
            self._subscribe(self.target, (self.target_property,),
                            self._receive)

    ###########################################################################
    # propagation
    ###########################################################################
    def _send(self, local_value: Any) -> None:
        '''local -> remote'''
        logger.log(VERBOSE, '%s sending %r', self, local_value)
        written = self._to_remote(local_value)
        self._set_remote(written)
        if local_value is None:
            self._apply_fallback_to_local()
            return
        stored = self._get_remote()
        if (self.direction.receives and self._has_valid_source()
                and not equals(stored, written)):
            # the remote coerced the value, make local agree with it
            value = self._to_local(stored)
            if value is not None:
                self._set_local(value)

    def _receive(self, remote_value: Any) -> None:
        '''remote -> local'''
        if not self._has_valid_source():
            return
        if not (self._initialized or self._target_has_priority()):
            return
        logger.log(VERBOSE, '%s receiving %r', self, remote_value)
        written = self._to_local(remote_value)
        self._set_local(written)
        stored = self._get_local()
        if self.direction.sends and not equals(stored, written):
            # the local side coerced the value, make remote agree with it
            value = self._to_remote(stored)
            if value is not None:
                self._set_remote(value)

    def _refresh_model(self, _model: Any) -> None:
        '''the model was replaced on a receive only binding'''
        if self._has_valid_source():
            self._set_local(self._to_local(self._get_remote()))

    def _apply_fallback_to_local(self) -> None:
        if (not self.direction.receives or not self._has_valid_source()
                or self.fallback is None):
            return
        value = self._to_local(self.fallback)
        if value is not None:
            self._set_local(value)

    def _target_has_priority(self) -> bool:
        '''
        During creation the local value is sent to the remote first. The
        remote value only wins if the binding does not send or the local
        value is missing.
        '''
        return (self.direction is Direction.RECEIVE_ONLY
                or self._get_local() is None)

    ###########################################################################
    # conversion
    ###########################################################################
    def _to_remote(self, local_value: Any) -> Any:
        try:
            value = Conversion.convert(local_value,
                                       type(self.target),
                                       self.target_property,
                                       self.converter,
                                       self.fallback)
        except Exception as exc:
            raise ConversionError(
                self._failure('convert local value', exc)) from exc
        return self.fallback if value is None else value

    def _to_local(self, remote_value: Any) -> Any:
        try:
            value = Conversion.convert(remote_value,
                                       type(self._get_source_object()),
                                       self._get_source_property_name(),
                                       self.converter,
                                       self.fallback)
        except Exception as exc:
            raise ConversionError(
                self._failure('convert remote value', exc)) from exc
        return self.fallback if value is None else value

    def _failure(self, action: str, exc: BaseException) -> str:
        return f'Binding {self} failed to {action}: {exc}'

    ###########################################################################
    # property access
    ###########################################################################
    def _binds_to_model(self) -> bool:
        return len(self.local_path) == 2

    def _has_valid_source(self) -> bool:
        if not self._binds_to_model():
            return True
        model = read_property(self.component, self.local_path[0])
        return model is not None and not is_primitive(model)

    def _get_source_object(self) -> Any:
        if not self._has_valid_source():
            raise PropagationError(
                f'Binding {self} has no valid source object')
        if self._binds_to_model():
            return read_property(self.component, self.local_path[0])
        return self.component

    def _get_source_property_name(self) -> str:
        return self.local_path[-1]

    def _get_local(self) -> Any:
        return read_property(self._get_source_object(),
                             self._get_source_property_name())

    def _set_local(self, value: Any) -> None:
        if not self._has_valid_source():
            return
        try:
            setattr(self._get_source_object(),
                    self._get_source_property_name(), value)
        except Exception as exc:
            raise PropagationError(
                self._failure('update local value', exc)) from exc

    def _get_remote(self) -> Any:
        return read_property(self.target, self.target_property)

    def _set_remote(self, value: Any) -> None:
        try:
            setattr(self.target, self.target_property, value)
        except Exception as exc:
            raise PropagationError(
                self._failure('update remote value', exc)) from exc


class Bind[T](Property[T]):
    '''
    A checked property of a Component that declares two-way bindings.
    Created by bind() and bind_all(), see the module documentation.

    Binds can only be declared on Components. If declared on another class an
    error is logged when the class is created and accessing the property on
    instances raises BindingConfigurationError.
    '''

    _host_error: str|None = None

    def __init__(self,
                 bindings: Mapping[str|None, Sequence[Binding]],
                 initial_value: T|None = None,
                 **kwargs: Any) -> None:
        super().__init__(initial_value, **kwargs)
        self.bindings = bindings

    def declarations(self) -> Iterator[tuple[LocalPath, str, Converter|None]]:
        '''(local path, target path, converter) of each declared binding'''
        for (sub_property, bindings) in self.bindings.items():
            local_path: LocalPath = ((self.attr,) if sub_property is None
                                     else (self.attr, sub_property))
            for binding in bindings:
                yield (local_path, binding.path, binding.converter)

    def __set_name__(self, owner: type, name: str) -> None:
        from .component import Component  # component imports this module
        if isinstance(owner, type) and issubclass(owner, Component):
            return
        self.set_names(owner.__qualname__, name)
        paths = ', '.join(f'"{path}"' for (_, path, _) in self.declarations())
        self._host_error = (f'Binding "{name}" -> {paths} failed to '
                            f'initialize: {owner.__qualname__} is not a '
                            'Component')
        logger.error(self._host_error)

    def _check_host(self) -> None:
        if self._host_error is not None:
            raise BindingConfigurationError(self._host_error)

    def __get__(self, instance: object, owner: type|None = None) -> Any:
        if instance is not None:
            self._check_host()
        return super().__get__(instance, owner)

    def __set__(self, instance: object, value: T|None) -> None:
        self._check_host()
        super().__set__(instance, value)


def _as_bindings(declaration: BindingDeclaration,
                 converter: Converter|None = None) -> tuple[Binding, ...]:
    if isinstance(declaration, str):
        return (Binding(declaration, converter),)
    if isinstance(declaration, Binding):
        return (declaration if converter is None or declaration.converter
                else Binding(declaration.path, converter),)
    if isinstance(declaration, Sequence):
        return tuple(binding for item in declaration
                     for binding in _as_bindings(item, converter))
    raise ConstructionError(f'Invalid binding declaration: {declaration!r}')


def bind[T](path: str|Binding,
            initial_value: T|None = None,
            *,
            converter: Converter|None = None,
            **kwargs: Any) -> Bind[T]:
    '''
    Declare a component property that is bound to path
    ('[>>|<<] selector.property'). converter converts values in both
    directions, see conversion.py. kwargs are passed to Property.
    '''
    bindings = _as_bindings(path, converter)
    for binding in bindings:
        TargetPath.parse(binding.path)
    return Bind[T]({None: bindings}, initial_value, **kwargs)


def bind_all[T](bindings: Mapping[str, BindingDeclaration],
                initial_value: T|None = None,
                *,
                converter: Converter|None = None,
                **kwargs: Any) -> Bind[T]:
    '''
    Declare a component property holding a model object whose properties are
    bound to paths. bindings maps model property names to one or more paths
    (or Bindings with converters). converter is used for paths without
    their own converter.
    '''
    if not bindings:
        raise ConstructionError('bind_all() requires at least one binding')
    declared: dict[str|None, Sequence[Binding]] = {}
    for (sub_property, declaration) in bindings.items():
        declared[sub_property] = _as_bindings(declaration, converter)
        for binding in declared[sub_property]:
            TargetPath.parse(binding.path)
    return Bind[T](declared, initial_value, **kwargs)
