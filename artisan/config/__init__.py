# artisan/config/__init__.py
"""
Initializes the config package, making all settings available for direct import.
This allows other modules to use `from artisan.config import SETTING_NAME` without
knowing which specific file the setting is in.
"""

from .config_crafting import *
from .config_game import *
