from .core import Stream
from .namespace import NS
from .menu import (
    MenuNode, MenuTree, filter_menu, find_key_by_path,
    root_of, ancestors_of, is_descendant_or_self,
)
from .permission import RoutePermissions, RouteNames
from .expansion import MenuExpansionController
from .reorder import move, DragGesture
from .scheduler import LoopScheduler, ManualScheduler
from .tabs import TabItem, TabSnapshot, Notice, TabSessionManager
from .bridge import Router, MemoryRouter, RouteBridge
from .session import NavigationSession
from .config import config

__version__ = '0.1.0'
