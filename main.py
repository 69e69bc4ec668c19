#!/usr/bin/env python3
"""
Извлечение одного объявления MercadoLibre Argentina.

Пример:
    python main.py "https://inmueble.mercadolibre.com.ar/MLA-2402497778-venta-ph-belgrano-r-2-ambientes-_JM"
"""

import sys
import logging
import asyncio
import argparse

from config import settings
from meli_listing.extraction.profiles import PROFILES
from meli_listing.models import ListingRecord
from meli_listing.parsers import MercadoLibreParser
from meli_listing.storage import ResultStore
from meli_listing.utils.proxy_manager import ProxyManager

logger = logging.getLogger("main")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Извлечение объявления MercadoLibre")
    parser.add_argument("url", nargs="?", help="URL объявления (https://inmueble.mercadolibre.com.ar/MLA-...)")
    parser.add_argument("--include-html", action="store_true",
                        help="Сохранить HTML страницы в результат")
    parser.add_argument("--include-screenshot", action="store_true",
                        help="Добавить скриншот (base64) в метаданные")
    parser.add_argument("--no-headless", dest="headless", action="store_false",
                        default=settings.HEADLESS_MODE, help="Показать окно браузера")
    parser.add_argument("--profile", choices=sorted(PROFILES), default=settings.SELECTOR_PROFILE,
                        help="Профиль селекторов")
    parser.add_argument("--stealth", choices=sorted(settings.STEALTH_PROFILES),
                        default=settings.STEALTH_PROFILE, help="Профиль маскировки браузера")
    parser.add_argument("--no-proxy", dest="use_proxy", action="store_false",
                        help="Не использовать прокси")
    parser.add_argument("--check-proxies", action="store_true",
                        help="Только проверить прокси и выйти")
    return parser


def build_proxy_manager() -> ProxyManager:
    return ProxyManager(
        config_file=settings.PROXY_CONFIG_FILE,
        proxies=[settings.SMARTPROXY_CONFIG],
        cooldown_minutes=settings.PROXY_COOLDOWN_MINUTES,
    )


def log_summary(data: dict):
    """Выводит краткую сводку по результату."""
    logger.info(f"Успех: {data['success']}")
    if data["success"]:
        logger.info(f"Заголовок: {data['title']}")
        logger.info(f"Цена: {data['currency']} {data['price']}")
        logger.info(f"Спальни: {data.get('bedrooms') or 'N/A'}")
        logger.info(f"Изображения: {len(data.get('images') or [])}")
    else:
        logger.warning(f"Ошибка: {data.get('reason') or data.get('error') or 'неполные данные'}")


async def run(args) -> int:
    store = ResultStore(settings.RESULTS_DIR)
    proxy_manager = build_proxy_manager() if args.use_proxy else None

    try:
        parser = MercadoLibreParser(
            proxy_manager=proxy_manager,
            selector_profile=args.profile,
            stealth_profile=args.stealth,
            headless_mode=args.headless,
        )
        outcome = await parser.scrape(
            args.url,
            include_html=args.include_html,
            include_screenshot=args.include_screenshot,
        )
    except Exception as e:
        logger.error(f"Ошибка: {e}")
        store.save_error(args.url, e)
        return 1

    store.save(outcome)
    log_summary(outcome.result.to_output())
    return 0 if isinstance(outcome.result, ListingRecord) else 2


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings.setup_logging()

    if args.check_proxies:
        results = build_proxy_manager().verify_all_proxies()
        for pid, ok in results.items():
            logger.info(f"{pid}: {'OK' if ok else 'FAIL'}")
        return 0 if all(results.values()) else 1

    if not args.url:
        logger.error('URL es requerida. Formato: https://inmueble.mercadolibre.com.ar/MLA-...')
        return 1

    return asyncio.run(run(args))


# Точка входа
if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Выполнение прервано пользователем")
        sys.exit(0)
