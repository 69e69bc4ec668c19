#!/usr/bin/env python3
"""
Базовый класс навигатора: браузер, маскировка, навигация с повторными попытками.
"""

import asyncio
import logging
import random
import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any, Callable, List

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    Error as PlaywrightError,
)
from playwright_stealth import Stealth

from config import settings


class RetryException(Exception):
    """Исключение, указывающее на необходимость повторной попытки."""
    pass


class NavigationTimeout(RetryException):
    """Страница не загрузилась за отведенное время."""
    pass


class ScrapeError(Exception):
    """Операция не удалась после всех попыток."""
    pass


class BaseParser:
    """
    Базовый класс навигатора.
    Отвечает за браузер, профиль маскировки, задержки и повторные попытки;
    извлечение данных со страницы делают наследники.
    """
    SOURCE_NAME: str = "base"  # Должен быть переопределен в дочерних классах

    def __init__(self,
                 max_retries: int = settings.MAX_RETRIES,
                 request_delay: tuple = (settings.REQUEST_DELAY_MIN, settings.REQUEST_DELAY_MAX),
                 headless_mode: bool = settings.HEADLESS_MODE,
                 retry_base_delay: float = settings.RETRY_BASE_DELAY,
                 retry_max_delay: float = settings.RETRY_MAX_DELAY,
                 stealth_profile: str = settings.STEALTH_PROFILE,
                 proxy: Optional[Dict[str, Any]] = None):
        """
        Инициализирует навигатор.

        Args:
            max_retries: Максимальное количество попыток при ошибке
            request_delay: Диапазон задержки "успокоения" страницы в секундах (мин, макс)
            headless_mode: Запускать браузер в фоновом режиме без GUI
            retry_base_delay: Базовая задержка перед повторной попыткой (секунды)
            retry_max_delay: Максимальная задержка перед повторной попыткой (секунды)
            stealth_profile: Имя профиля маскировки из settings.STEALTH_PROFILES
            proxy: Конфигурация прокси (см. ProxyManager)
        """
        if stealth_profile not in settings.STEALTH_PROFILES:
            raise ValueError(f"Неизвестный профиль маскировки: {stealth_profile!r}")

        self.logger = logging.getLogger(f"parsers.{self.SOURCE_NAME}")
        self.max_retries = max_retries
        self.headless_mode = headless_mode
        self.request_delay_min, self.request_delay_max = request_delay
        self.retry_base_delay = retry_base_delay
        self.retry_max_delay = retry_max_delay
        self.stealth_profile_name = stealth_profile
        self.stealth_profile = settings.STEALTH_PROFILES[stealth_profile]
        self.proxy = proxy

        # Playwright-ресурсы
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

        # Список для сохранения данных об ошибках
        self.error_log: List[Dict[str, Any]] = []

    def _get_random_user_agent(self) -> str:
        return random.choice(settings.USER_AGENTS)

    async def _init_browser(self) -> bool:
        """
        Инициализирует браузер Playwright.

        Returns:
            bool: True если инициализация прошла успешно
        """
        return await self._with_retry(self._init_browser_impl, "инициализация браузера", max_retries=3)

    async def _init_browser_impl(self) -> bool:
        """
        Внутренняя реализация инициализации браузера.
        """
        try:
            self.logger.info(f"Инициализация браузера (headless={self.headless_mode}, "
                             f"профиль={self.stealth_profile_name})")

            self.playwright = await async_playwright().start()

            launch_options: Dict[str, Any] = {
                "headless": self.headless_mode,
                "args": self.stealth_profile["launch_args"],
            }
            if self.proxy and self.proxy.get("server"):
                launch_options["proxy"] = self.proxy
            self.browser = await self.playwright.chromium.launch(**launch_options)

            user_agent = self._get_random_user_agent()
            self.logger.info(f"User-Agent: {user_agent[:50]}...")
            self.context = await self.browser.new_context(
                user_agent=user_agent,
                **settings.BROWSER_CONTEXT_OPTIONS
            )

            if self.stealth_profile["extra_headers"]:
                await self.context.set_extra_http_headers(self.stealth_profile["extra_headers"])
            if self.stealth_profile["init_script"]:
                await self.context.add_init_script(self.stealth_profile["init_script"])

            self.logger.info("Браузер успешно инициализирован")
            return True

        except PlaywrightError as e:
            self.logger.error(f"Ошибка при инициализации браузера: {e}")
            await self.close()
            raise RetryException(f"Ошибка инициализации браузера: {str(e)}")

    async def _new_page(self) -> Page:
        """Создает страницу; при включенном профиле применяет playwright-stealth."""
        page = await self.context.new_page()
        if self.stealth_profile["use_stealth_plugin"]:
            await Stealth().apply_stealth_async(page)
        return page

    async def _page_navigation(self, page: Page, url: str) -> bool:
        """
        Выполняет навигацию на указанный URL с обработкой ошибок.

        Args:
            page: Страница браузера
            url: URL для загрузки

        Returns:
            bool: True если навигация успешна
        """
        return await self._with_retry(
            lambda: self._page_navigation_impl(page, url),
            f"навигация на {url}",
            max_retries=self.max_retries
        )

    async def _page_navigation_impl(self, page: Page, url: str) -> bool:
        """
        Внутренняя реализация навигации.
        """
        try:
            self.logger.debug(f"Переход на URL: {url}")

            response = await page.goto(url, wait_until="domcontentloaded",
                                       timeout=settings.NAVIGATION_TIMEOUT_MS)

            if response and response.ok:
                self.logger.debug(f"Страница успешно загружена: {url}")
                return True
            else:
                status = response.status if response else "нет ответа"
                err_msg = f"Ошибка загрузки страницы: {status}"
                self.logger.warning(err_msg)
                raise RetryException(err_msg)

        except PlaywrightTimeoutError as e:
            self.logger.warning(f"Таймаут при загрузке {url}: {e}")
            raise NavigationTimeout(f"Таймаут загрузки страницы: {str(e)}") from e

        except PlaywrightError as e:
            self.logger.warning(f"Ошибка Playwright при загрузке {url}: {e}")
            raise RetryException(f"Ошибка Playwright: {str(e)}")

    async def _with_retry(self,
                          func: Callable,
                          operation_name: str,
                          max_retries: Optional[int] = None) -> Any:
        """
        Выполняет операцию с повторными попытками при RetryException.

        Args:
            func: Корутинная функция без аргументов
            operation_name: Название операции для логирования
            max_retries: Максимальное количество попыток (если None, используется self.max_retries)

        Returns:
            Any: Результат функции при успешном выполнении

        Raises:
            ScrapeError: Если все попытки завершились неудачей
        """
        if max_retries is None:
            max_retries = self.max_retries

        for attempt in range(max_retries):
            try:
                if attempt > 0:
                    self.logger.info(f"Повторная попытка {attempt+1}/{max_retries} для операции: {operation_name}")

                return await func()

            except RetryException as e:
                if attempt < max_retries - 1:
                    # Экспоненциальная задержка с случайным компонентом
                    retry_delay = min(
                        self.retry_base_delay * (2 ** attempt) + random.uniform(0, 1),
                        self.retry_max_delay
                    )

                    self.logger.debug(f"{operation_name}: {e}. Повторная попытка через {retry_delay:.2f} сек...")
                    await asyncio.sleep(retry_delay)
                else:
                    self._log_error(operation_name, attempt + 1, e)
                    self.logger.error(f"Операция '{operation_name}' не удалась после {max_retries} попыток: {e}")
                    raise ScrapeError(f"Операция '{operation_name}' не удалась после {max_retries} попыток: {e}") from e

            except Exception as e:
                self._log_error(operation_name, attempt + 1, e, traceback.format_exc())
                self.logger.error(f"Критическая ошибка в операции '{operation_name}': {e}")
                raise

    def _log_error(self, operation_name: str, attempts: int, error: Exception, tb: Optional[str] = None):
        error_info = {
            "operation": operation_name,
            "attempts": attempts,
            "error": str(error),
            "timestamp": datetime.now().isoformat()
        }
        if tb:
            error_info["traceback"] = tb
        self.error_log.append(error_info)

    async def _delay(self, delay_range: Optional[tuple] = None):
        """Выполняет случайную задержку в заданном диапазоне (по умолчанию request_delay)."""
        low, high = delay_range or (self.request_delay_min, self.request_delay_max)
        delay = random.uniform(low, high)
        self.logger.debug(f"Задержка: {delay:.2f} сек")
        await asyncio.sleep(delay)

    async def close(self):
        """Освобождает ресурсы браузера."""
        if self.context:
            try:
                await self.context.close()
            except PlaywrightError as e:
                self.logger.error(f"Ошибка при закрытии контекста: {e}")
            finally:
                self.context = None

        if self.browser:
            try:
                await self.browser.close()
            except PlaywrightError as e:
                self.logger.error(f"Ошибка при закрытии браузера: {e}")
            finally:
                self.browser = None

        if self.playwright:
            await self.playwright.stop()
            self.playwright = None

        # Сохраняем лог ошибок, если они были
        if self.error_log:
            self._dump_error_log()

    def _dump_error_log(self):
        try:
            error_log_dir = Path(settings.LOGS_DIR)
            error_log_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            error_log_path = error_log_dir / f"error_log_{self.SOURCE_NAME}_{timestamp}.json"

            with open(error_log_path, "w", encoding="utf-8") as f:
                json.dump(self.error_log, f, ensure_ascii=False, indent=2)

            self.logger.info(f"Сохранен лог ошибок: {error_log_path}")
        except OSError as e:
            self.logger.error(f"Не удалось сохранить лог ошибок: {e}")
        finally:
            self.error_log = []
