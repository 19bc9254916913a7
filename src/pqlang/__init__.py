"""
PQLang Programming Language Implementation

A small dynamically typed scripting language with functions, fixed size
arrays and classes, run by a tree walking interpreter.
"""

__version__ = "0.3.0"

import logging

from ._error import *
from ._value import *
from ._env import *
from ._io import *
from ._ops import *
from . import ast
from ._lex import *
from ._prep import *
from ._split import *
from ._parse import *
from ._import import *
from ._interp import *

logging.getLogger(__name__).addHandler(logging.NullHandler())
