#!/usr/bin/env python3
"""
Сборка итоговой записи по одной загруженной странице объявления.

Порядок: проверка блокировки -> извлечение полей -> нормализация ->
изображения и координаты -> одна неизменяемая запись.
"""

import logging
from typing import Any, Dict, Optional

from meli_listing.dom import DocumentQuery
from meli_listing.extraction.challenge import ChallengeDetector
from meli_listing.extraction.geo import GeoExtractor
from meli_listing.extraction.images import ImageResolver
from meli_listing.extraction.locator import FieldLocator
from meli_listing.extraction.normalizer import (
    extract_listing_code,
    infer_currency,
    infer_operation_type,
    to_number,
)
from meli_listing.extraction.profiles import FULL_PROFILE, SelectorProfile
from meli_listing.models import BlockedResult, ExtractionResult, ListingRecord

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = (
    "total_area",
    "covered_area",
    "rooms",
    "bedrooms",
    "bathrooms",
    "parking_spots",
    "age",
)


class RecordAssembler:
    """
    Извлекает объявление со страницы.

    Args:
        profile: Профиль селекторов (по умолчанию "full")
    """

    def __init__(self, profile: Optional[SelectorProfile] = None):
        self.profile = profile or FULL_PROFILE

    def assemble(self, document: DocumentQuery, url: str) -> ExtractionResult:
        """
        Возвращает ровно один результат: BlockedResult или ListingRecord.

        Args:
            document: Снимок загруженной страницы
            url: Текущий URL страницы
        """
        if ChallengeDetector(document, self.profile).is_blocked():
            return self._blocked(document, url)

        locator = FieldLocator.for_profile(document, self.profile)

        draft: Dict[str, Any] = {"source_url": url, "listing_code": extract_listing_code(url)}
        draft.update(self._text_fields(locator))
        draft.update(self._price_fields(locator))
        draft.update(self._numeric_fields(locator))
        draft["images"] = ImageResolver(
            document, self.profile.image_selectors, self.profile.image_attributes
        ).collect()
        draft["coordinates"] = GeoExtractor(document, self.profile.map_selector).extract()
        draft["success"] = bool(draft["title"]) and (draft["price"] > 0 or len(draft["images"]) > 0)

        record = ListingRecord(**draft)
        if not record.success:
            logger.info(f"Неполные данные для {url}: заголовок={bool(record.title)}, "
                        f"цена={record.price}, фото={len(record.images)}")
        return record

    def _blocked(self, document: DocumentQuery, url: str) -> BlockedResult:
        return BlockedResult(
            page_title=document.title(),
            body_preview=document.body_text()[: self.profile.body_preview_length],
            source_url=url,
            listing_code=extract_listing_code(url),
        )

    @staticmethod
    def _text_fields(locator: FieldLocator) -> Dict[str, Any]:
        title = locator.locate("title")
        subtitle = locator.locate("subtitle")
        return {
            "title": title,
            "description": locator.locate("description"),
            "operation_type": infer_operation_type(subtitle, title),
            "location": locator.locate("location") or subtitle,
        }

    @staticmethod
    def _price_fields(locator: FieldLocator) -> Dict[str, Any]:
        return {
            "price": to_number(locator.locate("price")) or 0,
            "currency": infer_currency(locator.locate("currency_symbol")),
            "maintenance_fee": to_number(locator.locate("maintenance_fee")) or 0,
        }

    @staticmethod
    def _numeric_fields(locator: FieldLocator) -> Dict[str, Any]:
        return {name: to_number(locator.locate(name)) for name in NUMERIC_FIELDS}


def extract_listing(document: DocumentQuery, url: str, profile: Optional[SelectorProfile] = None) -> ExtractionResult:
    """Короткая форма: RecordAssembler(profile).assemble(document, url)."""
    return RecordAssembler(profile).assemble(document, url)
