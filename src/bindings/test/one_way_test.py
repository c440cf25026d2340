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
Test one-way and template bindings.
'''
from typing import Any
from unittest import TestCase, main

from ..component import Component
from ..config import BindingContext
from ..conversion import ConversionContext, to
from ..error import (ConstructionError, ConversionError, NotAttachedError,
                     PropagationError)
from ..one_way import apply_one_way_bindings, one_way_bindings
from ..properties import Property
from ..widget import Widget
from .helpers import Host, Person, TextView


def ada() -> Person:
    person = Person()
    person.name = 'Ada'
    person.age = 36
    return person


class TestOneWayBinding(TestCase):

    def setUp(self) -> None:
        self.host = Host()
        self.view = TextView(id='view')

    def test_bind(self) -> None:
        apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.host.title = 'Hello'
        self.host.append(self.view)
        self.assertEqual('Hello', self.view.text)
        self.host.title = 'Bye'
        self.assertEqual('Bye', self.view.text)

    def test_pending_until_attached(self) -> None:
        (binding,) = apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.assertEqual([binding], one_way_bindings(self.view))
        self.assertEqual('Binding "text" -> "title"', str(binding))
        self.host.append(self.view)
        self.assertEqual([], one_way_bindings(self.view))
        self.assertIsNotNone(binding.subscription)
        self.view.layout()

    def test_nested_path(self) -> None:
        self.view.text = 'initial'
        apply_one_way_bindings(self.view, {'bind_text': 'person.name'})
        self.host.append(self.view)
        self.assertEqual('initial', self.view.text)

        person = ada()
        self.host.person = person
        self.assertEqual('Ada', self.view.text)
        person.name = 'Grace'
        self.assertEqual('Grace', self.view.text)
        self.host.person = None
        self.assertEqual('initial', self.view.text)

    def test_converter(self) -> None:
        def shout(value: Any, _: ConversionContext) -> Any:
            return value.upper()
        apply_one_way_bindings(self.view, {'bind_text': to('title', shout)})
        self.host.title = 'hello'
        self.host.append(self.view)
        self.assertEqual('HELLO', self.view.text)

    def test_template(self) -> None:
        (binding,) = apply_one_way_bindings(
            self.view, {'template_text': 'Name: ${person.name}'})
        self.assertEqual(('person', 'name'), binding.path)
        self.assertEqual('Template binding "text" -> "Name: ${person.name}"',
                         str(binding))
        self.host.person = ada()
        self.host.append(self.view)
        self.assertEqual('Name: Ada', self.view.text)
        self.host.person = None
        self.assertEqual('', self.view.text)

    def test_template_converter(self) -> None:
        apply_one_way_bindings(
            self.view,
            {'template_text': to('Age: ${person.age}',
                                 lambda value, _: value + 1)})
        self.host.person = ada()
        self.host.append(self.view)
        self.assertEqual('Age: 37', self.view.text)

    def test_invalid_template(self) -> None:
        with self.assertRaisesRegex(ConstructionError,
                                    'does not contain a valid placeholder'):
            apply_one_way_bindings(self.view, {'template_text': 'Name'})
        with self.assertRaisesRegex(ConstructionError, 'too many placeholders'):
            apply_one_way_bindings(self.view,
                                   {'template_text': '${title} ${title}'})

    def test_invalid_attribute(self) -> None:
        for attribute in ('value_text', 'bind_', 'bind'):
            with self.assertRaises(ConstructionError, msg=attribute):
                apply_one_way_bindings(self.view, {attribute: 'title'})

    def test_selector_not_allowed(self) -> None:
        with self.assertRaises(ConstructionError) as context:
            apply_one_way_bindings(self.view, {'bind_text': '#input.text'})
        self.assertEqual('Binding "text" -> "#input.text" failed: One-way '
                         'binding path can currently not contain a selector.',
                         str(context.exception))

    def test_invalid_path(self) -> None:
        for path in ('person..name', 'person name', 'items[0]'):
            with self.assertRaises(ConstructionError, msg=path):
                apply_one_way_bindings(self.view, {'bind_text': path})

    def test_missing_target_property(self) -> None:
        with self.assertRaisesRegex(ConstructionError,
                                    'TextView does not have a property'):
            apply_one_way_bindings(self.view, {'bind_missing': 'title'})

    def test_unchecked_target_property(self) -> None:
        view = TextView(context=BindingContext(strict=True))
        with self.assertRaisesRegex(ConstructionError,
                                    'requires an explicit type check'):
            apply_one_way_bindings(view, {'bind_anything': 'title'})

        view = TextView(context=BindingContext(strict=False))
        with self.assertLogs('bindings.binding_utils', 'WARNING'):
            apply_one_way_bindings(view, {'bind_anything': 'title'})
        self.host.title = 'anything'
        self.host.append(view)
        self.assertEqual('anything', view.anything)

    def test_missing_base_property(self) -> None:
        apply_one_way_bindings(self.view, {'bind_text': 'missing'})
        with self.assertRaises(ConstructionError) as context:
            self.host.append(self.view)
        self.assertEqual('Binding "text" -> "missing" failed: Host does not '
                         'have a property "missing".', str(context.exception))

    def test_duplicate_receiver(self) -> None:
        apply_one_way_bindings(self.view, {'bind_text': 'title'})
        apply_one_way_bindings(self.view, {'template_text': '${title}!'})
        self.assertEqual(2, len(one_way_bindings(self.view)))
        with self.assertRaisesRegex(ConstructionError,
                                    'already the receiving end'):
            self.host.append(self.view)

    def test_failure_does_not_stop_other_bindings(self) -> None:
        class Caption(Widget):
            text = Property[str]('', type=str)
            tooltip = Property[str]('', type=str)
            label = Property[str]('', type=str)
        caption = Caption(id='caption')
        apply_one_way_bindings(caption, {'bind_text': 'missing',
                                         'template_tooltip': '${title}!',
                                         'bind_label': 'unknown'})
        self.host.title = 'Hello'
        with self.assertLogs('bindings.one_way', 'ERROR') as logs:
            with self.assertRaisesRegex(ConstructionError,
                                        'have a property "missing"'):
                self.host.append(caption)
        (record,) = logs.records
        self.assertIn('have a property "unknown"', record.getMessage())
        self.assertEqual('Hello!', caption.tooltip)
        self.host.title = 'Bye'
        self.assertEqual('Bye!', caption.tooltip)
        self.assertEqual([], one_way_bindings(caption))
        caption.layout()

    def test_not_attached(self) -> None:
        apply_one_way_bindings(self.view, {'bind_text': 'title'})
        with self.assertRaises(NotAttachedError) as context:
            self.view.layout()
        self.assertEqual('Could not resolve one-way binding on TextView#view: '
                         'not attached to a binding root',
                         str(context.exception))

    def test_appended_after_activation(self) -> None:
        self.host.append(Widget())
        apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.host.append(self.view)
        with self.assertRaises(NotAttachedError):
            self.view.layout()

    def test_nested_component(self) -> None:
        inner = Host()
        inner.title = 'inner'
        apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.host.title = 'outer'
        inner.append(self.view)
        self.host.append(inner)
        self.assertEqual('inner', self.view.text)

    def test_converter_exception(self) -> None:
        def convert(value: Any, _: ConversionContext) -> Any:
            if value == 'bad':
                raise ValueError('bad value')
            return value
        apply_one_way_bindings(self.view, {'bind_text': to('title', convert)})
        self.host.append(self.view)
        with self.assertRaises(ConversionError) as context:
            self.host.title = 'bad'
        self.assertEqual('Binding "text" -> "title" failed: Converter '
                         'exception: bad value', str(context.exception))

    def test_type_error(self) -> None:
        apply_one_way_bindings(self.view, {'bind_text': 'person.age'})
        self.host.append(self.view)
        with self.assertRaises(PropagationError) as context:
            self.host.person = ada()
        self.assertEqual('Binding "text" -> "person.age" failed: Failed to set '
                         'property "text": Expected value to be of type "str", '
                         'but found "int".', str(context.exception))

    def test_primitive_in_path(self) -> None:
        class Loose(Component):
            data = Property[object]()
        loose = Loose()
        loose.data = 'text'
        apply_one_way_bindings(self.view, {'bind_text': 'data.name'})
        with self.assertRaises(PropagationError) as context:
            loose.append(self.view)
        self.assertEqual('Binding "text" -> "data.name" failed: Value of '
                         'property "data" is of type str, expected object',
                         str(context.exception))
        self.assertFalse(loose.listeners.has('dataChanged'))

    def test_dispose_target(self) -> None:
        (binding,) = apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.host.append(self.view)
        self.view.dispose()
        self.assertIsNone(binding.subscription)
        self.host.title = 'after'
        self.assertEqual('', self.view.text)
        self.assertFalse(self.host.listeners.has('titleChanged'))
        self.assertFalse(self.host.listeners.has('dispose'))

    def test_dispose_base(self) -> None:
        (binding,) = apply_one_way_bindings(self.view, {'bind_text': 'title'})
        self.host.append(self.view)
        self.host.dispose()
        self.assertIsNone(binding.subscription)


if __name__ == '__main__':
    main()
