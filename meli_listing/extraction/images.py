#!/usr/bin/env python3
"""
Сбор изображений галереи и приведение URL к максимальному разрешению.
"""

import logging
from typing import List, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

from meli_listing.dom import DocumentQuery, ElementQuery

logger = logging.getLogger(__name__)

# Суффиксы разрешения в имени файла mlstatic; порядок важен (сначала более длинный)
RESOLUTION_SUFFIXES = ("-F-null.", "-F.", "-I.")
ORIGINAL_SUFFIX = "-O."


def canonicalize_image_url(url: str) -> str:
    """
    Переписывает суффикс разрешения в имени файла на '-O.' (оригинал).

    Применяется не более одной замены; URL с '-O.' не меняется.
    """
    parts = urlsplit(url)
    directory, _, filename = parts.path.rpartition("/")
    for suffix in RESOLUTION_SUFFIXES:
        if suffix in filename:
            filename = filename.replace(suffix, ORIGINAL_SUFFIX, 1)
            return urlunsplit(parts._replace(path=f"{directory}/{filename}"))
    return url


def is_absolute_url(url: Optional[str]) -> bool:
    if not url:
        return False
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class ImageResolver:
    """
    Собирает URL изображений из нескольких групп селекторов.

    Args:
        document: Снимок страницы
        selectors: Группы селекторов в порядке приоритета
        attributes: Атрибуты-источники (data-zoom, data-src, src)
    """

    def __init__(self, document: DocumentQuery, selectors: Sequence[str], attributes: Sequence[str]):
        self.document = document
        self.selectors = selectors
        self.attributes = attributes

    def _source(self, element: ElementQuery) -> Optional[str]:
        for attribute in self.attributes:
            value = element.attribute(attribute)
            if value:
                return value.strip()
        return None

    def collect(self) -> List[str]:
        """Возвращает уникальные URL в порядке обнаружения."""
        images: List[str] = []
        seen = set()
        for selector in self.selectors:
            for element in self.document.select_all(selector):
                src = self._source(element)
                if not is_absolute_url(src):
                    continue
                high_res = canonicalize_image_url(src)
                if high_res in seen:
                    continue
                seen.add(high_res)
                images.append(high_res)
        logger.debug(f"Найдено изображений: {len(images)}")
        return images
