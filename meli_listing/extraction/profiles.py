#!/usr/bin/env python3
"""
Профили селекторов для страницы объявления MercadoLibre.

Профиль "full" соответствует боевому сценарию (больше запасных селекторов,
проверка кнопки логина), "lite" - облегченному локальному прогону.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

# Таблица характеристик
SPEC_ROW_SELECTOR = "tr.andes-table__row, .ui-pdp-specs__table .andes-table__row"
SPEC_HEADER_SELECTOR = "th.andes-table__header, .andes-table__header"
SPEC_VALUE_SELECTOR = "td.andes-table__column, .andes-table__column"

MAINTENANCE_FEE_SELECTOR = (
    ".ui-pdp-color--GRAY.ui-pdp-size--XSMALL.ui-pdp-family--REGULAR"
    ".ui-pdp-maintenance-fee-ltr"
)

# Подписи строк таблицы; несколько подписей проверяются по порядку
SPEC_LABELS: Dict[str, Tuple[str, ...]] = {
    "total_area": ("Superficie total",),
    "covered_area": ("Superficie cubierta",),
    "rooms": ("Ambientes",),
    "bedrooms": ("Dormitorios",),
    "bathrooms": ("Baños", "Baño"),
    "parking_spots": ("Cocheras", "Cochera"),
    "age": ("Antigüedad",),
}

CHALLENGE_PHRASES = (
    "Para continuar, ingresa a",
    "¡Hola! Para continuar",
)


@dataclass(frozen=True)
class SelectorProfile:
    """Набор селекторов и правил для одного варианта пайплайна."""

    name: str
    text_fields: Dict[str, Tuple[str, ...]]
    spec_labels: Dict[str, Tuple[str, ...]]
    spec_row_selector: str
    spec_header_selector: str
    spec_value_selector: str
    image_selectors: Tuple[str, ...]
    image_attributes: Tuple[str, ...]
    map_selector: str = 'img[src*="maps.googleapis.com"]'
    maintenance_fee_selector: str = MAINTENANCE_FEE_SELECTOR
    verification_selectors: Tuple[str, ...] = (".account-verification-main",)
    challenge_phrases: Tuple[str, ...] = CHALLENGE_PHRASES
    login_button_selector: str = ""
    body_preview_length: int = 500


FULL_PROFILE = SelectorProfile(
    name="full",
    text_fields={
        "title": ("h1.ui-pdp-title", 'h1[class*="title"]', "h1"),
        "price": ("span.andes-money-amount__fraction",),
        "currency_symbol": ("span.andes-money-amount__currency-symbol",),
        "description": ("p.ui-pdp-description__content", ".ui-pdp-description__content"),
        "subtitle": (
            "div.ui-pdp-header__subtitle span.ui-pdp-subtitle",
            ".ui-pdp-subtitle",
        ),
        "location": (".ui-pdp-media__title", ".ui-pdp-location", ".ui-vip-location"),
    },
    spec_labels=SPEC_LABELS,
    spec_row_selector=SPEC_ROW_SELECTOR,
    spec_header_selector=SPEC_HEADER_SELECTOR,
    spec_value_selector=SPEC_VALUE_SELECTOR,
    image_selectors=(
        "figure.ui-pdp-gallery__figure img",
        ".ui-pdp-gallery__figure img",
        ".ui-pdp-image img",
        "img[data-zoom]",
    ),
    image_attributes=("data-zoom", "data-src", "src"),
    login_button_selector='.andes-button--loud[href*="login"]',
    body_preview_length=500,
)

LITE_PROFILE = SelectorProfile(
    name="lite",
    text_fields={
        "title": ("h1.ui-pdp-title", "h1"),
        "price": ("span.andes-money-amount__fraction",),
        "currency_symbol": ("span.andes-money-amount__currency-symbol",),
        "description": ("p.ui-pdp-description__content",),
        "subtitle": (".ui-pdp-subtitle",),
        "location": (".ui-pdp-media__title",),
    },
    spec_labels=SPEC_LABELS,
    spec_row_selector="tr.andes-table__row",
    spec_header_selector="th.andes-table__header",
    spec_value_selector="td.andes-table__column",
    image_selectors=("figure.ui-pdp-gallery__figure img",),
    image_attributes=("data-zoom", "src"),
    body_preview_length=300,
)

PROFILES: Dict[str, SelectorProfile] = {
    FULL_PROFILE.name: FULL_PROFILE,
    LITE_PROFILE.name: LITE_PROFILE,
}


def get_profile(name: str) -> SelectorProfile:
    """Возвращает профиль по имени; неизвестное имя - ValueError."""
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Неизвестный профиль селекторов: {name!r} (доступны: {', '.join(sorted(PROFILES))})"
        ) from None
