#!/usr/bin/env python3
"""
Поиск полей объявления по упорядоченным цепочкам селекторов.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from meli_listing.dom import DocumentQuery
from meli_listing.extraction.profiles import SelectorProfile

logger = logging.getLogger(__name__)

# Стратегия: чистая функция "страница -> текст или None"
Strategy = Callable[[DocumentQuery], Optional[str]]


def css_text(selector: str) -> Strategy:
    """Текст первого элемента, найденного селектором."""

    def strategy(document: DocumentQuery) -> Optional[str]:
        element = document.select_one(selector)
        if element is None:
            return None
        return element.text() or None

    strategy.__name__ = f"css_text({selector})"
    return strategy


def spec_row(label: str, row_selector: str, header_selector: str, value_selector: str) -> Strategy:
    """
    Значение строки таблицы характеристик, заголовок которой содержит label.

    Сравнение по вхождению без учета регистра: "Baño" находит и "Baños".
    """
    needle = label.lower()

    def strategy(document: DocumentQuery) -> Optional[str]:
        for row in document.select_all(row_selector):
            header = row.select_one(header_selector)
            value = row.select_one(value_selector)
            if header is None or value is None:
                continue
            if needle in header.text().lower():
                return value.text() or None
        return None

    strategy.__name__ = f"spec_row({label})"
    return strategy


def build_chains(profile: SelectorProfile) -> Dict[str, List[Strategy]]:
    """Собирает цепочки стратегий для всех полей профиля."""
    chains: Dict[str, List[Strategy]] = {}
    for field_name, selectors in profile.text_fields.items():
        chains[field_name] = [css_text(selector) for selector in selectors]
    for field_name, labels in profile.spec_labels.items():
        chains[field_name] = [
            spec_row(label, profile.spec_row_selector, profile.spec_header_selector, profile.spec_value_selector)
            for label in labels
        ]
    chains["maintenance_fee"] = [
        css_text(profile.maintenance_fee_selector),
        spec_row("Expensas", profile.spec_row_selector, profile.spec_header_selector, profile.spec_value_selector),
    ]
    return chains


def first_match(document: DocumentQuery, strategies: Sequence[Strategy]) -> str:
    """Выполняет стратегии по порядку и возвращает первый непустой результат."""
    for strategy in strategies:
        value = strategy(document)
        if value:
            return value
    return ""


class FieldLocator:
    """
    Находит сырой текст семантического поля на странице.

    Args:
        document: Снимок страницы
        chains: Цепочки стратегий по имени поля
    """

    def __init__(self, document: DocumentQuery, chains: Dict[str, List[Strategy]]):
        self.document = document
        self.chains = chains

    @classmethod
    def for_profile(cls, document: DocumentQuery, profile: SelectorProfile) -> "FieldLocator":
        return cls(document, build_chains(profile))

    def locate(self, field_name: str) -> str:
        """Возвращает текст поля или пустую строку, если ничего не найдено."""
        strategies = self.chains.get(field_name)
        if not strategies:
            logger.debug(f"Нет стратегий для поля '{field_name}'")
            return ""
        value = first_match(self.document, strategies)
        logger.debug(f"Поле '{field_name}': {value[:60]!r}")
        return value
