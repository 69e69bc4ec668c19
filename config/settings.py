#!/usr/bin/env python3
"""
Модуль конфигурации приложения.
Загружает настройки из переменных окружения и .env файла.
"""

import os
import logging
from typing import Dict, Any, List
from pathlib import Path

from dotenv import load_dotenv

# Определяем корневую директорию проекта
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Путь к .env файлу
ENV_PATH = PROJECT_ROOT / 'config' / '.env'

# Загружаем переменные окружения из .env файла
load_dotenv(ENV_PATH)

# Общие настройки
HEADLESS_MODE = os.getenv('HEADLESS_MODE', 'True').lower() in ('true', '1', 't', 'yes')
MAX_RETRIES = int(os.getenv('MAX_RETRIES', '3'))
REQUEST_DELAY_MIN = float(os.getenv('REQUEST_DELAY_MIN', '4'))
REQUEST_DELAY_MAX = float(os.getenv('REQUEST_DELAY_MAX', '6'))
RETRY_BASE_DELAY = float(os.getenv('RETRY_BASE_DELAY', '2'))
RETRY_MAX_DELAY = float(os.getenv('RETRY_MAX_DELAY', '60'))
NAVIGATION_TIMEOUT_MS = int(os.getenv('NAVIGATION_TIMEOUT_MS', '60000'))

# Прогрев сессии перед переходом на объявление
WARMUP_URL = os.getenv('WARMUP_URL', 'https://listado.mercadolibre.com.ar/inmuebles/')
WARMUP_DELAY = (
    float(os.getenv('WARMUP_DELAY_MIN', '2')),
    float(os.getenv('WARMUP_DELAY_MAX', '4')),
)
SCROLL_PAUSE = float(os.getenv('SCROLL_PAUSE', '1.5'))

# Профиль селекторов ядра извлечения: full | lite
SELECTOR_PROFILE = os.getenv('SELECTOR_PROFILE', 'full')
# Профиль маскировки браузера: standard | minimal
STEALTH_PROFILE = os.getenv('STEALTH_PROFILE', 'standard')

# Настройки прокси
PROXY_CONFIG_FILE = os.getenv('PROXY_CONFIG_FILE', str(PROJECT_ROOT / 'config' / 'proxies.json'))
PROXY_COOLDOWN_MINUTES = int(os.getenv('PROXY_COOLDOWN_MINUTES', '30'))
SMARTPROXY_CONFIG = {
    "server": os.getenv('SMARTPROXY_SERVER', ''),
    "username": os.getenv('SMARTPROXY_USER', ''),
    "password": os.getenv('SMARTPROXY_PASSWORD', ''),
    "country": os.getenv('SMARTPROXY_COUNTRY', 'ar'),
}

# Пути к файлам и директориям
LOGS_DIR = Path(os.getenv('LOGS_DIR', str(PROJECT_ROOT / 'logs')))
RESULTS_DIR = Path(os.getenv('RESULTS_DIR', str(PROJECT_ROOT / 'results')))

# Настройки логирования
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FILE = LOGS_DIR / 'scraper.log'
LOG_FORMAT = os.getenv('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')

USER_AGENTS: List[str] = [
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36',
]

# Скрипт, выполняемый до загрузки страницы
HIDE_WEBDRIVER_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['es-AR', 'es', 'en'] });
window.chrome = { runtime: {} };
"""

# Профили маскировки (выбирает навигатор, ядро извлечения о них не знает)
STEALTH_PROFILES: Dict[str, Dict[str, Any]] = {
    'standard': {
        'launch_args': [
            '--no-sandbox',
            '--disable-setuid-sandbox',
            '--disable-dev-shm-usage',
            '--disable-blink-features=AutomationControlled',
        ],
        'extra_headers': {
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8',
            'Accept-Language': 'es-AR,es;q=0.9,en;q=0.8',
            'DNT': '1',
        },
        'init_script': HIDE_WEBDRIVER_SCRIPT,
        'use_stealth_plugin': True,
    },
    'minimal': {
        'launch_args': [
            '--no-sandbox',
            '--disable-blink-features=AutomationControlled',
        ],
        'extra_headers': {},
        'init_script': HIDE_WEBDRIVER_SCRIPT,
        'use_stealth_plugin': False,
    },
}

BROWSER_CONTEXT_OPTIONS = {
    'viewport': {'width': 1920, 'height': 1080},
    'locale': 'es-AR',
    'timezone_id': 'America/Argentina/Buenos_Aires',
}


def ensure_directories():
    """Создает директории для логов и результатов."""
    for directory in [LOGS_DIR, RESULTS_DIR]:
        directory.mkdir(parents=True, exist_ok=True)


# Настраиваем логирование
def setup_logging():
    """Настройка системы логирования"""
    ensure_directories()

    # Уровень логирования
    log_level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)

    # Настраиваем базовое логирование
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )


if __name__ == "__main__":
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Загружена конфигурация приложения")

    # Вывод основных настроек для отладки
    logger.debug(f"HEADLESS_MODE: {HEADLESS_MODE}")
    logger.debug(f"SELECTOR_PROFILE: {SELECTOR_PROFILE}")
    logger.debug(f"STEALTH_PROFILE: {STEALTH_PROFILE}")
    logger.debug(f"WARMUP_URL: {WARMUP_URL}")

    if SMARTPROXY_CONFIG['server']:
        logger.debug(f"Smartproxy config: {SMARTPROXY_CONFIG['server']}")
    else:
        logger.warning("Прокси не настроен, запросы пойдут напрямую")
