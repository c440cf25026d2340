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
One-way bindings.

A widget created inside a component can have properties that follow a path
from the component:

    apply_one_way_bindings(text_view, {'bind_text': 'person.name',
                                       'template_hint': 'Age: ${person.age}'})

The bindings are compiled immediately but only take effect once the widget is
in the tree of a Component that is appended to for the first time. A widget
that is laid out before that happened fails with NotAttachedError.
'''
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Literal, NoReturn

from .binding_utils import (check_path_syntax, check_property_safety,
                            claim_receiver, release_receiver)
from .conversion import Binding, Conversion, Converter, ConversionContext
from .error import (BindingError, ConstructionError, ConversionError,
                    NotAttachedError, PathValueError, PropagationError)
from .listeners import Event, Listener
from .logging_config import VERBOSE
from .properties import check_property_exists
from .subscription import Subscription, subscribe


__all__ = ['OneWayBinding', 'apply_one_way_bindings',
           'process_one_way_bindings', 'one_way_bindings']

logger = getLogger('bindings.one_way')

type BindingKind = Literal['bind', 'template']

_PLACEHOLDER = re.compile(r'\$\{[^}]+\}')
_PENDING = '_one_way_bindings'


@dataclass(eq=False)
class OneWayBinding:
    '''
    A compiled one-way binding of property target_property of target to path
    from the component the target ends up in.
    '''
    kind: BindingKind
    target: Any
    target_property: str
    binding_string: str
    path: tuple[str, ...]
    fallback_value: Any
    converter: Converter|None = None
    subscription: Subscription|None = field(default=None, repr=False)
    dispose_listeners: list[tuple[Any, Listener]] = field(
        default_factory=list, repr=False)

    def __str__(self) -> str:
        kind = 'Template binding' if self.kind == 'template' else 'Binding'
        return f'{kind} "{self.target_property}" -> "{self.binding_string}"'

    def failed(self, exc: BaseException) -> NoReturn:
        '''Raise exc with the identity of this binding.'''
        error_type = (type(exc) if isinstance(exc, BindingError)
                      else PropagationError)
        raise error_type(f'{self} failed: {exc}') from exc

    def evaluate(self, raw_value: Any) -> Any:
        '''Convert raw_value to the value for the target property.'''
        try:
            return Conversion.convert(raw_value,
                                      type(self.target),
                                      self.target_property,
                                      self.converter,
                                      self.fallback_value)
        except Exception as exc:
            raise ConversionError(f'Converter exception: {exc}') from exc

    def apply(self, raw_value: Any) -> None:
        try:
            value = self.evaluate(raw_value)
            logger.log(VERBOSE, '%s applying %r', self, value)
            setattr(self.target, self.target_property, value)
        except Exception as exc:
            self.failed(exc)

    def dispose(self, _event: Event[object]|None = None) -> None:
        '''Stop following the path. Subsequent calls do nothing.'''
        if self.subscription is not None:
            self.subscription.cancel()
            self.subscription = None
            release_receiver(self.target, self.target_property, self)
        for (source, listener) in self.dispose_listeners:
            source.off('dispose', listener)
        self.dispose_listeners.clear()


def _compile_template(template: str, converter: Converter|None
                      ) -> Converter:
    def render(value: Any, context: ConversionContext) -> str:
        if converter is not None:
            value = Conversion.convert(value, context.target_type,
                                       context.property, converter)
        return _PLACEHOLDER.sub(lambda _: str(value), template)
    return render


def _extract_path(kind: BindingKind, binding_string: str) -> str:
    if kind == 'bind':
        return binding_string
    placeholders = _PLACEHOLDER.findall(binding_string)
    if not placeholders:
        raise ConstructionError(
            f'Template "{binding_string}" does not contain a valid '
            'placeholder')
    if len(placeholders) > 1:
        raise ConstructionError(
            f'Template "{binding_string}" contains too many placeholders')
    return placeholders[0][2:-1]


def _parse_attribute(attribute: str) -> tuple[BindingKind, str]:
    kind, _, target_property = attribute.partition('_')
    if kind not in ('bind', 'template') or not target_property:
        raise ConstructionError(
            f'"{attribute}" is not a one-way binding attribute, expected '
            'bind_<property> or template_<property>')
    return kind, target_property  # type: ignore


def compile_one_way_binding(target: Any,
                            attribute: str,
                            value: str|Binding) -> OneWayBinding:
    '''
    Create the OneWayBinding for attribute ('bind_<property>' or
    'template_<property>') of target.
    '''
    kind, target_property = _parse_attribute(attribute)
    binding = value if isinstance(value, Binding) else Binding(str(value))
    binding_string = binding.path
    prefix = ('Template binding' if kind == 'template' else 'Binding') + \
        f' "{target_property}" -> "{binding_string}" failed'
    try:
        path_string = _extract_path(kind, binding_string)
        check_path_syntax(path_string)
        if path_string.startswith(('.', '#')):
            raise ConstructionError(
                'One-way binding path can currently not contain a selector.')
        path = tuple(path_string.split('.'))
        if not all(path):
            raise ConstructionError(
                f'Binding path "{path_string}" contains empty segments.')
    except ConstructionError as exc:
        raise ConstructionError(f'{prefix}: {exc}') from exc
    check_property_safety(target, target, target_property, prefix)
    converter = (_compile_template(binding_string, binding.converter)
                 if kind == 'template' else binding.converter)
    return OneWayBinding(kind, target, target_property, binding_string, path,
                         getattr(target, target_property), converter)


def apply_one_way_bindings(target: Any,
                           attributes: Mapping[str, str|Binding]
                           ) -> list[OneWayBinding]:
    '''
    Compile the one-way bindings of target and keep them on target until they
    are processed by the Component target is appended to. The first layout()
    of target fails if that did not happen.
    '''
    bindings = [compile_one_way_binding(target, attribute, value)
                for (attribute, value) in attributes.items()]
    pending: list[OneWayBinding] = getattr(target, _PENDING, None) or []
    pending.extend(bindings)
    setattr(target, _PENDING, pending)
    if len(pending) == len(bindings):
        target.once('layout', _check_bindings_applied)
    return bindings


def one_way_bindings(target: object) -> list[OneWayBinding]:
    '''The one-way bindings of target that have not been processed yet.'''
    return list(getattr(target, _PENDING, None) or ())


def _check_bindings_applied(event: Event[object]) -> None:
    if one_way_bindings(event.target):
        raise NotAttachedError(
            f'Could not resolve one-way binding on {event.target}: '
            'not attached to a binding root')


def process_one_way_bindings(base: Any, target: Any) -> None:
    '''
    Activate the pending one-way bindings of target with base as root.
    Every pending binding is tried, then the first failure is raised and the
    rest are logged. Failed bindings are not retried.
    '''
    bindings = one_way_bindings(target)
    if not bindings:
        return
    setattr(target, _PENDING, None)
    errors: list[BindingError] = []
    for binding in bindings:
        try:
            init_one_way_binding(base, binding)
        except BindingError as exc:
            errors.append(exc)
    for exc in errors[1:]:
        logger.error('%s failed to activate: %s', target, exc)
    if errors:
        raise errors[0]


def init_one_way_binding(base: Any, binding: OneWayBinding) -> None:
    try:
        check_property_exists(base, binding.path[0])
        claim_receiver(binding.target, binding.target_property, binding)
    except ConstructionError as exc:
        binding.failed(exc)
    try:
        binding.subscription = subscribe(base, binding.path, binding.apply)
    except BaseException as exc:
        release_receiver(binding.target, binding.target_property, binding)
        if isinstance(exc, PathValueError):
            binding.failed(exc)
        raise
    binding.dispose_listeners = [
        (base, base.once('dispose', binding.dispose)),
        (binding.target, binding.target.once('dispose', binding.dispose))]
    logger.debug('%s applied to %s', binding, base)
