#!/usr/bin/env python3
"""
Синхронный доступ к DOM загруженной страницы.

Ядро извлечения не работает с браузером напрямую: навигатор снимает HTML
после того, как страница "успокоилась", и передает снимок сюда.
"""

from typing import List, Optional, Protocol

from bs4 import BeautifulSoup, Tag


class ElementQuery(Protocol):
    """Элемент DOM, доступный для чтения."""

    def text(self) -> str: ...

    def attribute(self, name: str) -> Optional[str]: ...

    def select_one(self, selector: str) -> Optional["ElementQuery"]: ...


class DocumentQuery(Protocol):
    """Минимальный интерфейс страницы, который нужен ядру извлечения."""

    def select_one(self, selector: str) -> Optional[ElementQuery]: ...

    def select_all(self, selector: str) -> List[ElementQuery]: ...

    def body_text(self) -> str: ...

    def title(self) -> str: ...


class SnapshotElement:
    """Обертка над тегом BeautifulSoup."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    def text(self) -> str:
        """Аналог element.textContent.trim()."""
        return self._tag.get_text().strip()

    def attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            # class и подобные мультизначные атрибуты
            return " ".join(value)
        return value

    def select_one(self, selector: str) -> Optional["SnapshotElement"]:
        found = self._tag.select_one(selector)
        return SnapshotElement(found) if found is not None else None

    def __repr__(self) -> str:
        return f"<SnapshotElement {self._tag.name}>"


class PageSnapshot:
    """
    Снимок отрендеренной страницы.

    Args:
        html: HTML-содержимое страницы (page.content())
    """

    def __init__(self, html: str):
        self._soup = BeautifulSoup(html or "", "html.parser")

    def select_one(self, selector: str) -> Optional[SnapshotElement]:
        found = self._soup.select_one(selector)
        return SnapshotElement(found) if found is not None else None

    def select_all(self, selector: str) -> List[SnapshotElement]:
        return [SnapshotElement(tag) for tag in self._soup.select(selector)]

    def body_text(self) -> str:
        """Аналог document.body.textContent (без обрезки пробелов)."""
        body = self._soup.body
        if body is None:
            return self._soup.get_text()
        return body.get_text()

    def title(self) -> str:
        title_tag = self._soup.title
        return title_tag.get_text().strip() if title_tag is not None else ""
