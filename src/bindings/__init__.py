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
Keep properties of objects in sync.

Objects announce changes to their properties with '<property>Changed' events
(Property does this for you). On top of that this package provides:
    - subscribe(): observe the value at a path like 'person.address.city',
      following the objects along the path as they are replaced
    - two-way bindings between a Component property and a property of a
      widget in the component's tree (bind(), bind_all())
    - one-way and template bindings from a component path to a widget
      property (apply_one_way_bindings())
    - converters that know which side of a binding they convert for
      (Conversion, ConversionContext)

For example:

class Person(EventTarget):
    name = Property('', type=str)

class TextInput(Widget):
    text = Property('', type=str)

class PersonForm(Component):
    person = bind_all({'name': '#name.text'}, type=Person)

form = PersonForm()
form.person = Person()
form.append(TextInput(id='name'))
form.person.name = 'Ada'    # the text input now shows 'Ada'
'''

from . import binding_utils
from . import comparison
from . import component
from . import config
from . import conversion
from . import error
from . import listeners
from . import logging_config
from . import one_way
from . import properties
from . import selector
from . import subscription
from . import two_way
from . import type_check
from . import widget
from .binding_utils import *
from .comparison import *
from .component import *
from .config import *
from .conversion import *
from .error import *
from .listeners import *
from .logging_config import *
from .one_way import *
from .properties import *
from .selector import *
from .subscription import *
from .two_way import *
from .type_check import *
from .widget import *


__all__ = (
           binding_utils.__all__ +
           comparison.__all__ +
           component.__all__ +
           config.__all__ +
           conversion.__all__ +
           error.__all__ +
           listeners.__all__ +
           logging_config.__all__ +
           one_way.__all__ +
           properties.__all__ +
           selector.__all__ +
           subscription.__all__ +
           two_way.__all__ +
           type_check.__all__ +
           widget.__all__ +
          [])
