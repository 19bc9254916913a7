"""AST nodes designed for evaluation."""

from ._base import *
from ._assign import *
from ._block import *
from ._builtin import *
from ._class import *
from ._function import *
from ._literal import *
from ._op import *
