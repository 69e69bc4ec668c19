"""
Навигаторы для загрузки страниц объявлений.
"""

from meli_listing.parsers.base import BaseParser, NavigationTimeout, RetryException, ScrapeError
from meli_listing.parsers.mercadolibre import MercadoLibreParser

__all__ = ['BaseParser', 'NavigationTimeout', 'RetryException', 'ScrapeError', 'MercadoLibreParser']
