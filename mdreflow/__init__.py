"""Break markdown prose after every sentence and rewrap it to a maximum width.

Structural markdown (code, tables, headings, HTML blocks) is copied verbatim.
"""

__version__ = '0.4.0'
