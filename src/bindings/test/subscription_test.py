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
Test path subscriptions.
'''
from unittest import TestCase, main

from ..error import PathValueError
from ..listeners import Listeners
from ..properties import EventTarget, Property
from ..subscription import Subscription, parse_path, subscribe
from .helpers import Model, Person, Recorder


class Address(EventTarget):
    city = Property[str]('', type=str)


class Contact(EventTarget):
    address = Property[Address](None, type=Address)


class Bare:
    '''An object that can not be observed.'''
    def __init__(self) -> None:
        self.value = 1


class TestParsePath(TestCase):

    def test_parse_path(self) -> None:
        self.assertEqual(('a', 'b'), parse_path('a.b'))
        self.assertEqual(('a',), parse_path(['a']))
        for path in ('', 'a..b', (), ('a', '')):
            with self.assertRaises(ValueError, msg=repr(path)):
                parse_path(path)
        with self.assertRaises(TypeError):
            parse_path(1)  # type: ignore


class TestSubscribe(TestCase):

    def test_invalid_arguments(self) -> None:
        with self.assertRaises(TypeError):
            subscribe(None, 'a', print)
        with self.assertRaises(TypeError):
            subscribe('root', 'a', print)
        with self.assertRaises(TypeError):
            subscribe(Model(), 'a', 'print')  # type: ignore
        with self.assertRaises(ValueError):
            subscribe(Model(), [], print)

    def test_single_property(self) -> None:
        person = Person()
        person.name = 'Ada'
        recorder = Recorder()
        subscribe(person, ('name',), recorder)
        person.name = 'Grace'
        person.name = 'Grace'
        person.age = 3
        self.assertEqual(['Ada', 'Grace'], recorder.values)

    def test_nested_path(self) -> None:
        contact = Contact()
        recorder = Recorder()
        subscribe(contact, 'address.city', recorder)
        self.assertEqual([None], recorder.values)

        old = Address()
        old.city = 'Paris'
        contact.address = old
        old.city = 'Lyon'

        new = Address()
        new.city = 'Rome'
        contact.address = new
        old.city = 'Nice'  # no longer observed
        new.city = 'Milan'
        self.assertEqual([None, 'Paris', 'Lyon', 'Rome', 'Milan'],
                         recorder.values)
        self.assertFalse(Listeners.of(old).has('cityChanged'))

    def test_replace_intermediate(self) -> None:
        root = Model()
        root.child = Model()
        old = root.child
        old.value = 1
        recorder = Recorder()
        subscribe(root, ['child', 'value'], recorder)
        old.value = 2
        new = Model()
        new.value = 9
        root.child = new
        old.value = 3
        self.assertEqual([1, 2, 9], recorder.values)

    def test_intermediate_none(self) -> None:
        contact = Contact()
        contact.address = Address()
        contact.address.city = 'Paris'
        recorder = Recorder()
        subscribe(contact, ('address', 'city'), recorder)
        contact.address = None
        self.assertEqual(['Paris', None], recorder.values)

    def test_intermediate_primitive(self) -> None:
        model = Model()
        model.child = 'text'
        with self.assertRaises(PathValueError) as context:
            subscribe(model, ('child', 'value'), print)
        self.assertEqual('Value of property "child" is of type str, '
                         'expected object', str(context.exception))
        # nothing left listening after the failed initial evaluation
        self.assertFalse(model.listeners.has('childChanged'))

    def test_intermediate_primitive_after_start(self) -> None:
        model = Model()
        recorder = Recorder()
        subscribe(model, ('child', 'value'), recorder)
        with self.assertRaises(PathValueError):
            model.child = 42
        self.assertEqual([None], recorder.values)

    def test_cancel(self) -> None:
        contact = Contact()
        contact.address = Address()
        recorder = Recorder()
        subscription = subscribe(contact, ('address', 'city'), recorder)
        nested = subscription.nested
        assert nested is not None
        subscription.cancel()
        subscription.cancel()
        self.assertTrue(subscription.cancelled)
        self.assertTrue(nested.cancelled)
        contact.address.city = 'Paris'
        contact.address = Address()
        self.assertEqual([''], recorder.values)
        self.assertFalse(contact.listeners.has('addressChanged'))

    def test_cancel_during_dispatch(self) -> None:
        model = Model()
        recorder = Recorder()
        subscription: Subscription|None = None
        def cancel(_: object) -> None:
            if subscription is not None:
                subscription.cancel()
        model.on('valueChanged', cancel)
        subscription = subscribe(model, 'value', recorder)
        model.value = 1
        self.assertEqual([None], recorder.values)

    def test_context_manager_and_call(self) -> None:
        model = Model()
        recorder = Recorder()
        with subscribe(model, 'value', recorder):
            model.value = 1
        model.value = 2
        subscription = subscribe(model, 'value', recorder)
        subscription()
        model.value = 3
        self.assertEqual([None, 1, 2], recorder.values)

    def test_original_event_is_forwarded(self) -> None:
        model = Model()
        recorder = Recorder()
        subscribe(model, 'value', recorder)
        cause = model.listeners.trigger('somethingElse')
        model.trigger('valueChanged', original_event=cause)
        model.trigger('valueChanged')
        self.assertEqual([None, None], recorder.values)

    def test_unobservable_root_is_read_once(self) -> None:
        bare = Bare()
        recorder = Recorder()
        subscribe(bare, 'value', recorder)
        bare.value = 2
        self.assertEqual([1], recorder.values)

    def test_missing_property_is_none(self) -> None:
        recorder = Recorder()
        subscribe(Model(), 'missing', recorder)
        self.assertEqual([None], recorder.values)

    def test_nan_is_not_a_change(self) -> None:
        model = Model()
        recorder = Recorder()
        model.value = float('nan')
        subscribe(model, 'value', recorder)
        model.trigger('valueChanged')
        self.assertEqual(1, len(recorder.values))

    def test_callback_error_propagates_to_writer(self) -> None:
        model = Model()
        def fail(value: object) -> None:
            if value is not None:
                raise ValueError(value)
        subscribe(model, 'value', fail)
        with self.assertRaises(ValueError):
            model.value = 1


if __name__ == '__main__':
    main()
