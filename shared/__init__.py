"""
Elfview Shared Module
=====================

Configuration, logging and console utilities used across elfview.
"""

from shared.config import ElfviewConfig, GlobalConfig, ViewConfig

__all__ = ["ElfviewConfig", "GlobalConfig", "ViewConfig"]
