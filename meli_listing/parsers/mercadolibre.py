#!/usr/bin/env python3
"""
Навигатор для страниц объявлений MercadoLibre Argentina.

Прогревает сессию, открывает объявление, ждет отрисовки и прокручивает
страницу для ленивой загрузки, после чего передает снимок DOM в ядро
извлечения ровно один раз.
"""

import re
import base64
import time
from typing import Optional

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from config import settings
from meli_listing.dom import PageSnapshot
from meli_listing.extraction import RecordAssembler, get_profile
from meli_listing.models import BlockedResult, ScrapeMetadata, ScrapeOutcome
from meli_listing.parsers.base import BaseParser, NavigationTimeout, ScrapeError
from meli_listing.utils.proxy_manager import ProxyManager, proxy_id

# Допустимые адреса объявлений
URL_PATTERNS = [
    re.compile(r"mercadolibre\.com\.ar", re.IGNORECASE),
    re.compile(r"inmueble\.mercadolibre", re.IGNORECASE),
    re.compile(r"casa\.mercadolibre", re.IGNORECASE),
    re.compile(r"departamento\.mercadolibre", re.IGNORECASE),
    re.compile(r"terreno\.mercadolibre", re.IGNORECASE),
]

ITEM_ID_PATTERNS = [
    re.compile(r"MLA-?(\d+)", re.IGNORECASE),
    re.compile(r"/(\d+)-"),
]


def validate_mercadolibre_url(url: str) -> bool:
    """Проверяет, что URL относится к MercadoLibre Argentina."""
    return any(pattern.search(url or "") for pattern in URL_PATTERNS)


def extract_item_id(url: str) -> Optional[str]:
    """Извлекает ID объявления из URL в формате MLA<цифры>."""
    for pattern in ITEM_ID_PATTERNS:
        match = pattern.search(url or "")
        if match:
            return f"MLA{match.group(1)}"
    return None


def proxy_error_type(error: BaseException) -> str:
    """Тип ошибки для ProxyManager: "timeout", если в цепочке причин есть таймаут."""
    cause: Optional[BaseException] = error
    while cause is not None:
        if isinstance(cause, (NavigationTimeout, PlaywrightTimeoutError)):
            return "timeout"
        cause = cause.__cause__
    return "general"


class MercadoLibreParser(BaseParser):
    """
    Загружает одну страницу объявления и извлекает из нее запись.
    """
    SOURCE_NAME = "mercadolibre"

    def __init__(self,
                 proxy_manager: Optional[ProxyManager] = None,
                 selector_profile: str = settings.SELECTOR_PROFILE,
                 warmup_url: Optional[str] = settings.WARMUP_URL,
                 **kwargs):
        """
        Args:
            proxy_manager: Менеджер прокси (если None, запросы идут напрямую)
            selector_profile: Профиль селекторов ядра извлечения (full | lite)
            warmup_url: Страница для прогрева сессии (None - без прогрева)
            **kwargs: Параметры BaseParser
        """
        self.proxy_manager = proxy_manager
        proxy = proxy_manager.get_proxy() if proxy_manager else None
        super().__init__(proxy=ProxyManager.to_playwright(proxy), **kwargs)
        self._proxy_config = proxy
        self.assembler = RecordAssembler(get_profile(selector_profile))
        self.warmup_url = warmup_url

        self.logger.info(f"Инициализирован парсер {self.SOURCE_NAME}" +
                         (f" с прокси {proxy_id(proxy)}" if proxy else " без прокси"))

    async def _warmup(self, page: Page):
        """Заходит на страницу листинга, чтобы сессия выглядела естественно."""
        self.logger.info(f"Прогрев сессии: {self.warmup_url}")
        try:
            await self._page_navigation(page, self.warmup_url)
        except ScrapeError as e:
            # Без прогрева объявление все равно можно загрузить
            self.logger.warning(f"Прогрев не удался: {e}")
            return
        await self._delay(settings.WARMUP_DELAY)

    async def _settle(self, page: Page):
        """Ждет отрисовки и прокручивает страницу для ленивой загрузки."""
        self.logger.info("Ожидание загрузки...")
        await self._delay()

        self.logger.info("Прокрутка страницы...")
        for fraction in (3, 2):
            await page.evaluate(f"window.scrollTo(0, document.body.scrollHeight / {fraction})")
            await self._delay((settings.SCROLL_PAUSE, settings.SCROLL_PAUSE))

    async def scrape(self,
                     url: str,
                     include_html: bool = False,
                     include_screenshot: bool = False) -> ScrapeOutcome:
        """
        Основной метод: загружает объявление и извлекает данные.

        Args:
            url: URL объявления
            include_html: Сохранить HTML страницы
            include_screenshot: Сделать скриншот (base64)

        Returns:
            ScrapeOutcome: Запись (или BlockedResult) и метаданные

        Raises:
            ValueError: URL не относится к MercadoLibre Argentina
            ScrapeError: Не удалось запустить браузер или загрузить страницу
        """
        if not validate_mercadolibre_url(url):
            raise ValueError("URL no válida. Debe ser de MercadoLibre Argentina.")

        item_id = extract_item_id(url)
        self.logger.info(f"URL объявления: {url} (ID: {item_id})")
        start_time = time.monotonic()

        try:
            await self._init_browser()
            page = await self._new_page()

            if self.warmup_url:
                await self._warmup(page)

            await self._page_navigation(page, url)
            await self._settle(page)

            html = await page.content()
            snapshot = PageSnapshot(html)
            result = self.assembler.assemble(snapshot, url)

            screenshot_base64 = None
            if include_screenshot:
                self.logger.info("Снимаем скриншот...")
                screenshot = await page.screenshot(full_page=False)
                screenshot_base64 = base64.b64encode(screenshot).decode("ascii")

            self._report_proxy(result)
        except Exception as e:
            if self.proxy_manager and self._proxy_config:
                self.proxy_manager.report_error(self._proxy_config, proxy_error_type(e))
            raise
        finally:
            await self.close()

        duration_ms = int((time.monotonic() - start_time) * 1000)
        metadata = ScrapeMetadata(
            page_title=snapshot.title(),
            images_count=len(getattr(result, "images", [])),
            scraping_duration=duration_ms,
            item_id=item_id,
            proxy=proxy_id(self._proxy_config) if self._proxy_config else None,
            proxy_country=self._proxy_config.get("country") if self._proxy_config else None,
            screenshot_base64=screenshot_base64,
            html_length=len(html) if include_html else None,
        )
        self.logger.info(f"Извлечение завершено за {duration_ms / 1000:.2f} сек, success={result.success}")
        return ScrapeOutcome(result=result, metadata=metadata, html=html if include_html else None)

    def _report_proxy(self, result):
        if not (self.proxy_manager and self._proxy_config):
            return
        if isinstance(result, BlockedResult):
            self.proxy_manager.report_error(self._proxy_config, "blocked")
        else:
            self.proxy_manager.report_success(self._proxy_config)

