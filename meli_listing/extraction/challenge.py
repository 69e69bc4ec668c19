#!/usr/bin/env python3
"""
Обнаружение страниц верификации/логина.

MercadoLibre отдает подозрительному трафику промежуточную страницу с кодом 200,
поэтому блокировка определяется по содержимому, а не по статусу ответа.
"""

import logging
from typing import Optional

from meli_listing.dom import DocumentQuery
from meli_listing.extraction.profiles import SelectorProfile

logger = logging.getLogger(__name__)


class ChallengeDetector:
    """
    Проверяет маркеры страницы верификации.

    Args:
        document: Снимок страницы
        profile: Профиль селекторов (маркеры и фразы)
    """

    def __init__(self, document: DocumentQuery, profile: SelectorProfile):
        self.document = document
        self.profile = profile

    def find_marker(self) -> Optional[str]:
        """Возвращает сработавший маркер или None."""
        for selector in self.profile.verification_selectors:
            if self.document.select_one(selector) is not None:
                return selector

        body_text = self.document.body_text()
        for phrase in self.profile.challenge_phrases:
            if phrase in body_text:
                return phrase

        login_selector = self.profile.login_button_selector
        if login_selector and self.document.select_one(login_selector) is not None:
            return login_selector
        return None

    def is_blocked(self) -> bool:
        marker = self.find_marker()
        if marker:
            logger.warning(f"Обнаружена страница верификации/логина (маркер: '{marker}')")
            return True
        return False
