"""
Low-level API that translates binary data to Python structure.

All the data structures in this subpackage inherit from
:py:class:`~pie_tools.pie.base.BaseElement`.
"""

from .document import PIE as PIE
from .header import FileHeader as FileHeader
from .palette import Palette as Palette

__all__ = ["PIE", "FileHeader", "Palette"]
