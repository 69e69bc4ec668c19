import asyncio
from datetime import datetime, timedelta

import pytest

from meli_listing.models import BlockedResult, ListingRecord
from meli_listing.parsers import BaseParser, MercadoLibreParser, NavigationTimeout, RetryException, ScrapeError
from meli_listing.parsers.mercadolibre import extract_item_id, proxy_error_type, validate_mercadolibre_url
from meli_listing.utils.proxy_manager import ProxyManager

from tests.conftest import BLOCKED_HTML, LISTING_HTML, LISTING_URL

PROXIES = [
    {"id": "p1", "server": "http://10.0.0.1:8000", "username": "user", "password": "secret", "country": "ar"},
    {"id": "p2", "server": "http://10.0.0.2:8000"},
]


def test_validate_url():
    assert validate_mercadolibre_url(LISTING_URL)
    assert validate_mercadolibre_url("https://casa.mercadolibre.com.ar/MLA-1-_JM")
    assert not validate_mercadolibre_url("https://www.zonaprop.com.ar/propiedades/123")
    assert not validate_mercadolibre_url("")


def test_extract_item_id():
    assert extract_item_id(LISTING_URL) == "MLA2402497778"
    assert extract_item_id("https://inmueble.mercadolibre.com.ar/987654-depto") == "MLA987654"
    assert extract_item_id("https://www.mercadolibre.com.ar/") is None


def test_unknown_stealth_profile():
    with pytest.raises(ValueError):
        BaseParser(stealth_profile="ninja")


def test_unknown_selector_profile():
    with pytest.raises(ValueError):
        MercadoLibreParser(selector_profile="ultra")


class FakePage:
    def __init__(self, html, url=LISTING_URL):
        self.html = html
        self.url = url
        self.scrolls = []

    async def content(self):
        return self.html

    async def evaluate(self, script):
        self.scrolls.append(script)

    async def screenshot(self, full_page=False):
        return b"\x89PNG"


def make_parser(monkeypatch, page, proxy_manager=None, navigation_error=None):
    parser = MercadoLibreParser(proxy_manager=proxy_manager, warmup_url=None)
    calls = {"closed": False}

    async def noop(*args, **kwargs):
        return True

    async def new_page():
        return page

    async def navigate(p, url):
        if navigation_error:
            raise navigation_error
        return True

    async def close():
        calls["closed"] = True

    monkeypatch.setattr(parser, "_init_browser", noop)
    monkeypatch.setattr(parser, "_delay", noop)
    monkeypatch.setattr(parser, "_new_page", new_page)
    monkeypatch.setattr(parser, "_page_navigation", navigate)
    monkeypatch.setattr(parser, "close", close)
    return parser, calls


def test_scrape_listing(monkeypatch):
    page = FakePage(LISTING_HTML)
    parser, calls = make_parser(monkeypatch, page)

    outcome = asyncio.run(parser.scrape(LISTING_URL, include_html=True, include_screenshot=True))

    assert isinstance(outcome.result, ListingRecord)
    assert outcome.result.success is True
    assert outcome.metadata.item_id == "MLA2402497778"
    assert outcome.metadata.images_count == 2
    assert outcome.metadata.page_title == "PH en venta en Belgrano R | MercadoLibre"
    assert outcome.metadata.screenshot_base64 == "iVBORw=="
    assert outcome.metadata.html_length == len(LISTING_HTML)
    assert outcome.html == LISTING_HTML
    assert len(page.scrolls) == 2
    assert calls["closed"] is True


def test_scrape_blocked_cools_down_proxy(monkeypatch):
    manager = ProxyManager(proxies=PROXIES[:1], persist_status=False)
    parser, _ = make_parser(monkeypatch, FakePage(BLOCKED_HTML), proxy_manager=manager)

    outcome = asyncio.run(parser.scrape(LISTING_URL))

    assert isinstance(outcome.result, BlockedResult)
    assert outcome.metadata.proxy == "p1"
    assert outcome.metadata.proxy_country == "ar"
    assert outcome.html is None
    assert manager.proxy_status["p1"]["blocked"] is True
    assert manager.get_proxy() is None


def test_scrape_rejects_foreign_url(monkeypatch):
    parser, calls = make_parser(monkeypatch, FakePage(LISTING_HTML))

    with pytest.raises(ValueError):
        asyncio.run(parser.scrape("https://www.zonaprop.com.ar/propiedades/123"))
    assert calls["closed"] is False


def test_scrape_navigation_failure_closes_browser(monkeypatch):
    manager = ProxyManager(proxies=PROXIES[:1], persist_status=False)
    parser, calls = make_parser(monkeypatch, FakePage(LISTING_HTML), proxy_manager=manager,
                                navigation_error=ScrapeError("timeout"))

    with pytest.raises(ScrapeError):
        asyncio.run(parser.scrape(LISTING_URL))
    assert calls["closed"] is True
    assert manager.proxy_status["p1"]["errors"] == 1


def test_with_retry_gives_up_after_max_retries():
    parser = BaseParser(retry_base_delay=0, retry_max_delay=0)
    attempts = []

    async def flaky():
        attempts.append(1)
        raise RetryException("HTTP 503")

    with pytest.raises(ScrapeError):
        asyncio.run(parser._with_retry(flaky, "navigation", max_retries=3))
    assert len(attempts) == 3
    assert parser.error_log[-1]["attempts"] == 3


def test_with_retry_returns_after_recovery():
    parser = BaseParser(retry_base_delay=0, retry_max_delay=0)
    attempts = []

    async def recovers():
        attempts.append(1)
        if len(attempts) < 2:
            raise RetryException("timeout")
        return "ok"

    assert asyncio.run(parser._with_retry(recovers, "navigation")) == "ok"
    assert len(attempts) == 2


def test_proxy_to_playwright():
    assert ProxyManager.to_playwright(PROXIES[0]) == {
        "server": "http://10.0.0.1:8000", "username": "user", "password": "secret",
    }
    assert ProxyManager.to_playwright(PROXIES[1]) == {"server": "http://10.0.0.2:8000"}
    assert ProxyManager.to_playwright(None) is None
    assert ProxyManager.to_playwright({"server": ""}) is None


def test_proxy_manager_skips_proxies_without_server():
    manager = ProxyManager(proxies=[{"server": ""}, PROXIES[1]], persist_status=False)
    assert [p["id"] for p in manager.proxies] == ["p2"]


def test_proxy_cooldown_and_recovery():
    manager = ProxyManager(proxies=PROXIES, cooldown_minutes=30, persist_status=False)

    manager.report_error(PROXIES[0], "blocked")
    assert manager.get_proxy()["id"] == "p2"

    manager.proxy_status["p1"]["cooldown_until"] = datetime.now() - timedelta(seconds=1)
    assert manager.get_proxy() is not None
    assert manager.proxy_status["p1"]["blocked"] is False
    assert manager.proxy_status["p1"]["errors"] == 0


def test_proxy_timeouts_accumulate():
    manager = ProxyManager(proxies=PROXIES[1:], persist_status=False)

    manager.report_error(PROXIES[1], "timeout")
    manager.report_error(PROXIES[1], "timeout")
    assert manager.get_proxy() is not None

    manager.report_error(PROXIES[1], "timeout")
    assert manager.get_proxy() is None


def test_proxy_status_persisted(tmp_path):
    config = tmp_path / "proxies.json"
    config.write_text('{"proxies": [{"id": "p3", "server": "http://10.0.0.3:8000"}]}', encoding="utf-8")

    manager = ProxyManager(config_file=str(config))
    manager.report_success(manager.get_proxy())

    assert (tmp_path / "proxy_status.json").exists()


def test_blocked_proxy_stays_in_cooldown_for_next_run(tmp_path):
    config = tmp_path / "proxies.json"
    config.write_text('{"proxies": [{"id": "p3", "server": "http://10.0.0.3:8000"}]}', encoding="utf-8")

    first = ProxyManager(config_file=str(config))
    first.report_error(first.get_proxy(), "blocked")

    second = ProxyManager(config_file=str(config))
    assert second.proxy_status["p3"]["blocked"] is True
    assert isinstance(second.proxy_status["p3"]["cooldown_until"], datetime)
    assert second.proxy_status["p3"]["errors"] == 1
    assert second.get_proxy() is None


def test_expired_cooldown_from_previous_run_is_released(tmp_path):
    config = tmp_path / "proxies.json"
    config.write_text('{"proxies": [{"id": "p3", "server": "http://10.0.0.3:8000"}]}', encoding="utf-8")

    first = ProxyManager(config_file=str(config))
    first.report_error(first.get_proxy(), "blocked")
    first.proxy_status["p3"]["cooldown_until"] = datetime.now() - timedelta(minutes=1)
    first.save_proxy_status()

    second = ProxyManager(config_file=str(config))
    assert second.get_proxy()["id"] == "p3"
    assert second.proxy_status["p3"]["errors"] == 0


def test_proxy_error_type():
    timeout = NavigationTimeout("Таймаут загрузки страницы")
    exhausted = ScrapeError("навигация не удалась")
    exhausted.__cause__ = timeout

    assert proxy_error_type(exhausted) == "timeout"
    assert proxy_error_type(timeout) == "timeout"
    assert proxy_error_type(ScrapeError("HTTP 503")) == "general"
    assert proxy_error_type(RuntimeError("boom")) == "general"


def test_scrape_timeout_reported_to_proxy_manager(monkeypatch):
    manager = ProxyManager(proxies=PROXIES[:1], persist_status=False)
    reported = []
    monkeypatch.setattr(manager, "report_error", lambda proxy, error_type="general": reported.append(error_type))

    error = ScrapeError("навигация не удалась")
    error.__cause__ = NavigationTimeout("Таймаут загрузки страницы")
    parser, _ = make_parser(monkeypatch, FakePage(LISTING_HTML), proxy_manager=manager,
                            navigation_error=error)

    with pytest.raises(ScrapeError):
        asyncio.run(parser.scrape(LISTING_URL))
    assert reported == ["timeout"]
