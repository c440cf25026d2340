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
A minimal object tree to host bindings. There is no rendering here, widgets
are EventTargets with an id, a parent and (for Composites) children.
'''
from __future__ import annotations

from collections.abc import Iterator
from logging import getLogger

from .config import BindingContext
from .logging_config import VERBOSE
from .properties import EventTarget, Property
from .selector import matches


__all__ = ['Widget', 'Composite']

logger = getLogger('bindings.widget')


class Widget(EventTarget):
    '''
    A node in the tree.
    context: binding settings for bindings on this widget, the default
             context is used if None.
    '''

    id = Property[str](None, type=str)

    def __init__(self,
                 *args: object,
                 id: str|None = None,  # pylint: disable=redefined-builtin
                 context: BindingContext|None = None,
                 **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.parent: Composite|None = None
        self.context = context
        if id is not None:
            self.id = id

    def layout(self) -> None:
        '''
        Notify 'layout' listeners that the widget is about to be laid out.
        Since there is no rendering this is all it does.
        '''
        self.trigger('layout')

    def detach(self) -> None:
        '''Remove the widget from its parent.'''
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None

    def dispose(self) -> None:
        if self.disposed:
            return
        super().dispose()
        self.detach()

    def __str__(self) -> str:
        ident = f'#{self.id}' if self.id else f'({id(self)})'
        return f'{type(self).__qualname__}{ident}'
    __repr__ = __str__


class Composite(Widget):
    '''A widget that contains other widgets.'''

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)
        self.children: list[Widget] = []

    def append(self, *widgets: Widget) -> Composite:
        '''Append widgets to the children, moving them from other parents.'''
        for widget in widgets:
            if widget is self:
                raise ValueError(f'{self} can not be appended to itself')
            logger.log(VERBOSE, '%s appending %s', self, widget)
            widget.detach()
            widget.parent = self
            self.children.append(widget)
        return self

    binding_root = False
    '''Widgets whose descendants are hidden from the descendants of parents.'''

    def descendants(self) -> Iterator[Widget]:
        '''
        All widgets below this one, depth first. The children of nested
        binding roots (Components) are not included since they are managed by
        those.
        '''
        for child in self.children:
            yield child
            if isinstance(child, Composite) and not child.binding_root:
                yield from child.descendants()

    def find(self, selector: str|None = None) -> list[Widget]:
        '''Descendants matching selector.'''
        return [widget for widget in self.descendants()
                if matches(widget, selector)]

    def dispose(self) -> None:
        if self.disposed:
            return
        for child in list(self.children):
            child.dispose()
        super().dispose()
