"""
OE_Libs - Open Editor Library Modules

This package contains core functionality for the Open Editor project,
organized into specialized sub-packages:

- ImageEditingLib: Raster models, transforms, overlay, sampling and encoding
- EditorLib: Editor session state machine and persisted editor settings
"""

__version__ = "0.1.0"
