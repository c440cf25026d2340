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
Classes shared by the tests.
'''
from ..component import Component
from ..properties import EventTarget, Property
from ..widget import Widget


class TextInput(Widget):
    text = Property[str]('', type=str)


class TextView(Widget):
    text = Property[str]('', type=str)
    anything = Property[object]()


class Slider(Widget):
    '''selection is clamped to [minimum, maximum]'''

    minimum = 0
    maximum = 100

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self._selection = 0

    @property
    def selection(self) -> int:
        return self._selection

    @selection.setter
    def selection(self, value: int) -> None:
        if not isinstance(value, int):
            raise TypeError(f'selection must be an int, not {value!r}')
        value = max(self.minimum, min(self.maximum, value))
        if value != self._selection:
            old, self._selection = self._selection, value
            self.trigger('selectionChanged', value=value, old=old)


class Person(EventTarget):
    name = Property[str]('', type=str)
    age = Property[int](0, type=int)


class Model(EventTarget):
    '''A model with an unchecked property.'''
    value = Property[object]()
    child = Property[object]()


class Host(Component):
    '''A component with plain properties for one-way bindings.'''
    title = Property[str]('', type=str)
    person = Property[Person](None, type=Person)


class Recorder:
    '''A callback that records the values it is called with.'''

    def __init__(self) -> None:
        self.values: list[object] = []

    def __call__(self, value: object) -> None:
        self.values.append(value)
