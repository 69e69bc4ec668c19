#!/usr/bin/env python3
"""
Координаты объекта из URL статической карты Google Maps.
"""

import logging
import re
from typing import Optional

from meli_listing.dom import DocumentQuery
from meli_listing.models import Coordinates

logger = logging.getLogger(__name__)

CENTER_RE = re.compile(r"center=([-\d.]+)%2C([-\d.]+)")


def parse_center(src: Optional[str]) -> Optional[Coordinates]:
    """Разбирает параметр center=<lat>%2C<lng>; диапазоны не проверяются."""
    if not src:
        return None
    match = CENTER_RE.search(src)
    if not match:
        return None
    try:
        return Coordinates(latitude=float(match.group(1)), longitude=float(match.group(2)))
    except ValueError:
        logger.debug(f"Не удалось разобрать координаты: {match.group(0)}")
        return None


class GeoExtractor:
    """Ищет статическую карту на странице и извлекает из нее координаты."""

    def __init__(self, document: DocumentQuery, map_selector: str):
        self.document = document
        self.map_selector = map_selector

    def extract(self) -> Optional[Coordinates]:
        map_image = self.document.select_one(self.map_selector)
        if map_image is None:
            return None
        return parse_center(map_image.attribute("src"))
