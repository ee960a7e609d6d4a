"""ShelfMatch backend.

Matches OCR'd receipt lines and scanned barcodes against a tenant's inventory
catalog and learns confirmed corrections as aliases.
"""

__version__ = "0.1.0"
