#!/usr/bin/env python3
"""
Нормализация сырых значений со страницы объявления.

Числа записаны в аргентинском формате: точка - разделитель тысяч,
запятая - десятичный разделитель ("1.234,56" -> 1234.56).
"""

import re
from typing import Optional

NUMBER_RE = re.compile(r"[0-9.,]+")
# Начало строки, которое можно прочитать как число ("1.5,2" -> "1.5")
FLOAT_PREFIX_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")
LISTING_CODE_RE = re.compile(r"(MLA-?\d+)", re.IGNORECASE)

RENT_MARKER = "alquiler"


def to_number(raw: Optional[str]) -> Optional[float]:
    """
    Извлекает первое число из текста.

    Args:
        raw: Сырой текст ("USD 120.000", "65,5 m²", ...)

    Returns:
        Optional[float]: Число или None, если распознать не удалось
    """
    if not raw:
        return None
    match = NUMBER_RE.search(raw)
    if not match:
        return None
    cleaned = match.group(0).replace(".", "").replace(",", ".", 1)
    prefix = FLOAT_PREFIX_RE.match(cleaned)
    if not prefix:
        return None
    return float(prefix.group(0))


def infer_currency(symbol: Optional[str]) -> str:
    """'US$' и подобные символы -> USD, все остальное -> ARS."""
    if symbol and "U" in symbol:
        return "USD"
    return "ARS"


def infer_operation_type(*texts: Optional[str]) -> str:
    """Определяет тип операции по подзаголовку/заголовку: аренда или продажа."""
    for text in texts:
        if text and RENT_MARKER in text.lower():
            return "rent"
    return "sale"


def extract_listing_code(url: Optional[str]) -> str:
    """
    Код публикации из URL: "MLA-2402497778" -> "MLA2402497778".
    Не зависит от содержимого страницы.
    """
    if not url:
        return ""
    match = LISTING_CODE_RE.search(url)
    if not match:
        return ""
    return match.group(1).replace("-", "")
