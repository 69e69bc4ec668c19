"""
Извлечение данных объявлений о недвижимости с MercadoLibre Argentina.
"""

from meli_listing.models import BlockedResult, Coordinates, ListingRecord

__version__ = "1.0.0"

__all__ = ['BlockedResult', 'Coordinates', 'ListingRecord']
