"""
Custom Qt widgets for the GUI layer.
"""

from .listing_widget import ListingWidget

__all__ = [
    "ListingWidget",
]
