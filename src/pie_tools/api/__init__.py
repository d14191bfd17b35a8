"""
High-level API for working with PIE files.

This subpackage provides the user-facing API for pie-tools. It wraps the
low-level :py:mod:`pie_tools.pie` binary structures with convenient methods
and properties.

Key modules:

- :py:mod:`pie_tools.api.pie_image`: Main PIEImage class
- :py:mod:`pie_tools.api.pil_io`: PIL/Pillow image I/O utilities
- :py:mod:`pie_tools.api.numpy_io`: NumPy array I/O utilities
"""
