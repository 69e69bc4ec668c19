#!/usr/bin/env python3
"""
Модуль для управления прокси-серверами и обработки блокировок.
"""

import os
import json
import random
import logging
from typing import List, Dict, Any, Optional
from datetime import datetime, timedelta

import requests

logger = logging.getLogger(__name__)

IP_CHECK_URL = "https://httpbin.org/ip"

# Поля статуса, которые в proxy_status.json хранятся строками
DATETIME_FIELDS = ('last_error', 'last_success', 'cooldown_until')


def proxy_id(proxy: Dict[str, Any]) -> str:
    return proxy.get('id') or proxy.get('server') or 'unknown'


class ProxyManager:
    """
    Управляет пулом прокси-серверов для обработки блокировок и ротации IP-адресов.
    Отслеживает статус каждого прокси и выбирает оптимальный для запросов.
    """

    def __init__(self,
                 config_file: Optional[str] = None,
                 proxies: Optional[List[Dict[str, Any]]] = None,
                 cooldown_minutes: int = 30,
                 persist_status: bool = True):
        """
        Инициализирует менеджер прокси.

        Args:
            config_file: Путь к файлу конфигурации прокси ({"proxies": [...]})
            proxies: Дополнительные прокси (например, из SMARTPROXY_CONFIG)
            cooldown_minutes: Время "охлаждения" прокси после блокировки (в минутах)
            persist_status: Сохранять статус прокси рядом с файлом конфигурации
        """
        self.config_file = config_file
        self.cooldown_minutes = cooldown_minutes
        self.persist_status = persist_status and bool(config_file)
        self.proxies: List[Dict[str, Any]] = []
        self.proxy_status: Dict[str, Dict[str, Any]] = {}
        self.load_proxies()
        for proxy in proxies or []:
            if proxy.get('server'):
                self._register(proxy)
        self.load_proxy_status()

    def _register(self, proxy: Dict[str, Any]):
        self.proxies.append(proxy)
        self.proxy_status.setdefault(proxy_id(proxy), {
            'errors': 0,
            'last_error': None,
            'last_success': None,
            'blocked': False,
            'cooldown_until': None
        })

    def load_proxies(self):
        """Загружает конфигурацию прокси из файла."""
        if not self.config_file:
            return
        if not os.path.exists(self.config_file):
            logger.info(f"Файл конфигурации прокси {self.config_file} не найден")
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Ошибка при загрузке конфигурации прокси: {e}")
            return

        for proxy in config.get('proxies', []):
            self._register(proxy)
        logger.info(f"Загружено {len(self.proxies)} прокси-серверов из конфигурации")

    def _status_file(self) -> str:
        return os.path.join(os.path.dirname(self.config_file), "proxy_status.json")

    def load_proxy_status(self):
        """Восстанавливает статус прокси (ошибки, охлаждение) после предыдущего запуска."""
        if not self.persist_status or not os.path.exists(self._status_file()):
            return
        try:
            with open(self._status_file(), 'r', encoding='utf-8') as f:
                saved = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Ошибка при загрузке статуса прокси: {e}")
            return

        for pid, status in saved.items():
            if pid not in self.proxy_status:
                continue
            for key in DATETIME_FIELDS:
                value = status.get(key)
                try:
                    status[key] = datetime.fromisoformat(value) if value else None
                except (TypeError, ValueError):
                    logger.warning(f"Некорректное значение {key} у прокси {pid}: {value!r}")
                    status[key] = None
            self.proxy_status[pid].update(status)
        logger.debug(f"Восстановлен статус {len(saved)} прокси")

    def save_proxy_status(self):
        """Сохраняет статус прокси-серверов в файл."""
        if not self.persist_status:
            return
        status_file = self._status_file()
        try:
            with open(status_file, 'w', encoding='utf-8') as f:
                json.dump(self.proxy_status, f, ensure_ascii=False, indent=2, default=str)
        except OSError as e:
            logger.error(f"Ошибка при сохранении статуса прокси: {e}")

    def _is_available(self, pid: str, now: datetime) -> bool:
        status = self.proxy_status[pid]
        cooldown_until = status.get('cooldown_until')
        if cooldown_until and cooldown_until > now:
            logger.debug(f"Прокси {pid} находится в периоде охлаждения до {cooldown_until}")
            return False

        # Сбрасываем блокировку, если период охлаждения истек
        if status.get('blocked') and cooldown_until and cooldown_until <= now:
            status['blocked'] = False
            status['errors'] = 0
            status['cooldown_until'] = None
            logger.info(f"Прокси {pid} разблокирован после периода охлаждения")

        return not status.get('blocked', False)

    def get_proxy(self) -> Optional[Dict[str, Any]]:
        """
        Выбирает оптимальный прокси для использования.

        Returns:
            Optional[Dict[str, Any]]: Конфигурация прокси или None, если все прокси недоступны
        """
        if not self.proxies:
            return None

        now = datetime.now()
        available = [p for p in self.proxies if self._is_available(proxy_id(p), now)]
        if not available:
            logger.error("Нет доступных прокси-серверов")
            return None

        # Сортируем прокси по количеству ошибок (меньше - лучше)
        available.sort(key=lambda p: self.proxy_status[proxy_id(p)].get('errors', 0))

        # Выбираем один из трех лучших прокси случайным образом
        selected = random.choice(available[:min(3, len(available))])
        logger.info(f"Выбран прокси {proxy_id(selected)}")
        return selected

    def report_success(self, proxy: Dict[str, Any]):
        """Отмечает успешное использование прокси."""
        pid = proxy_id(proxy)
        status = self.proxy_status.get(pid)
        if status is None:
            return

        now = datetime.now()
        status['last_success'] = now
        status['blocked'] = False
        logger.debug(f"Прокси {pid} успешно использован")

        # Сбрасываем счетчик ошибок, если последняя ошибка была давно
        last_error = status.get('last_error')
        if last_error and (now - last_error) > timedelta(hours=1):
            status['errors'] = 0

        self.save_proxy_status()

    def report_error(self, proxy: Dict[str, Any], error_type: str = "general"):
        """
        Отмечает ошибку использования прокси.

        Args:
            proxy: Конфигурация используемого прокси
            error_type: Тип ошибки (general, timeout, blocked)
        """
        pid = proxy_id(proxy)
        status = self.proxy_status.get(pid)
        if status is None:
            return

        now = datetime.now()
        status['last_error'] = now
        status['errors'] = status.get('errors', 0) + 1

        if error_type == "blocked":
            # Страница верификации: сразу отключаем прокси на период охлаждения
            cooldown = timedelta(minutes=self.cooldown_minutes)
        elif error_type == "timeout" and status['errors'] >= 3:
            cooldown = timedelta(minutes=self.cooldown_minutes // 2)
        elif status['errors'] >= 5:
            cooldown = timedelta(minutes=self.cooldown_minutes // 3)
        else:
            cooldown = None

        if cooldown is not None:
            status['blocked'] = True
            status['cooldown_until'] = now + cooldown
            logger.warning(f"Прокси {pid} заблокирован до {status['cooldown_until']} "
                           f"после {status['errors']} ошибок ({error_type})")

        self.save_proxy_status()

    @staticmethod
    def to_playwright(proxy: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
        """Преобразует конфигурацию прокси в формат Playwright."""
        if not proxy or not proxy.get('server'):
            return None
        settings = {"server": proxy['server']}
        if proxy.get('username'):
            settings["username"] = proxy['username']
        if proxy.get('password'):
            settings["password"] = proxy['password']
        return settings

    def check_proxy(self, proxy: Dict[str, Any], timeout: float = 10) -> bool:
        """
        Проверяет работоспособность прокси.

        Returns:
            bool: True, если прокси работает
        """
        pid = proxy_id(proxy)
        server = proxy['server']
        if "://" not in server:
            server = f"http://{server}"

        auth = None
        if proxy.get('username') and proxy.get('password'):
            auth = (proxy['username'], proxy['password'])

        try:
            response = requests.get(
                IP_CHECK_URL,
                proxies={'http': server, 'https': server},
                auth=auth,
                timeout=timeout
            )
        except requests.RequestException as e:
            logger.error(f"Ошибка при проверке прокси {pid}: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"Прокси {pid} вернул код статуса {response.status_code}")
            return False

        ip = response.json().get('origin', 'unknown')
        logger.info(f"Прокси {pid} работает, внешний IP: {ip}")
        return True

    def verify_all_proxies(self) -> Dict[str, bool]:
        """
        Проверяет все прокси и обновляет их статус.

        Returns:
            Dict[str, bool]: Словарь с результатами проверки (ID прокси -> статус)
        """
        results = {}
        for proxy in self.proxies:
            pid = proxy_id(proxy)
            is_working = self.check_proxy(proxy)
            results[pid] = is_working
            if is_working:
                self.proxy_status[pid].update(blocked=False, errors=0, cooldown_until=None,
                                              last_success=datetime.now())
            else:
                self.report_error(proxy, "blocked")

        self.save_proxy_status()
        return results
