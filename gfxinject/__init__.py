"""
gfxinject - graphics injection for Game Boy and Game Boy Advance ROMs.

Packs tile and palette data from bitmaps, writes it into a copy of a ROM
at configured offsets and patches the pointers that reference it.
"""

__version__ = "0.1.0"
