"""
Cloud Icons
===========
Builds Iconify-style JSON icon sets from the official AWS, Azure and GCP
architecture icon archives.
"""

__version__ = "0.1.0"
