"""
Ядро извлечения данных со страницы объявления MercadoLibre.
"""

from meli_listing.extraction.assembler import RecordAssembler, extract_listing
from meli_listing.extraction.challenge import ChallengeDetector
from meli_listing.extraction.geo import GeoExtractor
from meli_listing.extraction.images import ImageResolver, canonicalize_image_url
from meli_listing.extraction.locator import FieldLocator
from meli_listing.extraction.normalizer import (
    extract_listing_code,
    infer_currency,
    infer_operation_type,
    to_number,
)
from meli_listing.extraction.profiles import FULL_PROFILE, LITE_PROFILE, SelectorProfile, get_profile

__all__ = [
    'RecordAssembler', 'extract_listing', 'ChallengeDetector', 'GeoExtractor',
    'ImageResolver', 'canonicalize_image_url', 'FieldLocator', 'extract_listing_code',
    'infer_currency', 'infer_operation_type', 'to_number', 'FULL_PROFILE', 'LITE_PROFILE',
    'SelectorProfile', 'get_profile',
]
