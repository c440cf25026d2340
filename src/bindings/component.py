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
Components are the roots of bindings.

The first time a component is appended to, the two-way bindings declared by
its Bind properties are created and the pending one-way bindings of its
descendants are activated. Appending more widgets later does not activate
their bindings.
'''
from logging import getLogger

from .error import BindingError
from .one_way import process_one_way_bindings
from .two_way import Bind, TwoWayBinding
from .widget import Composite, Widget


__all__ = ['Component']

logger = getLogger('bindings.component')


class Component(Composite):
    '''
    A composite that hosts bindings.

    The descendants of a component are not found by selectors of the
    components it is nested in.
    '''

    binding_root = True

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.attached = False
        self.bindings: list[TwoWayBinding] = []

    def append(self, *widgets: Widget) -> 'Component':
        super().append(*widgets)
        if not self.attached:
            self.attached = True
            self._attach()
        return self

    def _attach(self) -> None:
        '''
        Activate the bindings. A binding that fails does not keep the others
        from being activated. The first failure is raised once all bindings
        were tried, the rest are logged.
        '''
        logger.debug('%s activating bindings', self)
        errors: list[BindingError] = []
        for prop in type(self)._properties.values():
            if not isinstance(prop, Bind):
                continue
            for (local_path, target_path, converter) in prop.declarations():
                try:
                    self.bindings.append(TwoWayBinding(
                        self, local_path, target_path, converter))
                except BindingError as exc:
                    errors.append(exc)
        for child in self.find():
            try:
                process_one_way_bindings(self, child)
            except BindingError as exc:
                errors.append(exc)
        for exc in errors[1:]:
            logger.error('%s failed to activate a binding: %s', self, exc)
        if errors:
            raise errors[0]
