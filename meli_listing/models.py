#!/usr/bin/env python3
"""
Модели данных Pydantic для извлечения объявлений MercadoLibre.
"""

from datetime import datetime, timezone
from typing import Optional, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SOURCE_SITE = "mercadolibre"


class _Record(BaseModel):
    """Общая конфигурация: неизменяемые модели, вывод в camelCase."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_output(self) -> dict:
        """Возвращает словарь для сохранения (ключи в camelCase)."""
        return self.model_dump(by_alias=True)


class Coordinates(_Record):
    """Координаты, извлеченные из статической карты"""

    latitude: float = Field(..., description="Широта")
    longitude: float = Field(..., description="Долгота")


class ListingRecord(_Record):
    """Нормализованное объявление о недвижимости"""

    success: bool = Field(..., description="Есть заголовок и (цена > 0 или хотя бы одно фото)")

    # Основные данные
    title: str = Field("", description="Заголовок объявления")
    description: str = Field("", description="Полное описание объявления")
    operation_type: Literal["sale", "rent"] = Field("sale", description="Тип операции")

    # Ценовая информация
    price: float = Field(0, description="Цена (0, если не удалось распознать)")
    currency: Literal["ARS", "USD"] = Field("ARS", description="Валюта цены")
    maintenance_fee: float = Field(0, description="Expensas (0 по умолчанию)")

    # Характеристики
    total_area: Optional[float] = Field(None, description="Общая площадь, м²")
    covered_area: Optional[float] = Field(None, description="Крытая площадь, м²")
    rooms: Optional[float] = Field(None, description="Ambientes")
    bedrooms: Optional[float] = Field(None, description="Dormitorios")
    bathrooms: Optional[float] = Field(None, description="Baños")
    parking_spots: Optional[float] = Field(None, description="Cocheras")
    age: Optional[float] = Field(None, description="Antigüedad, лет")

    # Медиа-контент
    images: List[str] = Field(default_factory=list, description="URL изображений в максимальном разрешении")

    # Местоположение
    location: str = Field("", description="Местоположение объекта")
    coordinates: Optional[Coordinates] = Field(None, description="Координаты со статической карты")

    # Идентификация
    listing_code: str = Field("", description="Код публикации (MLA...)")
    source_url: str = Field(..., description="URL объявления")
    source_site: str = Field(SOURCE_SITE, description="Источник объявления")


class BlockedResult(_Record):
    """Страница верификации/логина вместо объявления"""

    success: Literal[False] = False
    reason: Literal["blocked"] = "blocked"
    message: str = Field(
        "MercadoLibre está mostrando página de login/verificación",
        description="Диагностическое сообщение",
    )
    page_title: str = Field("", description="Заголовок страницы (document.title)")
    body_preview: str = Field("", description="Начало текста страницы")
    source_url: str = Field(..., description="URL объявления")
    listing_code: str = Field("", description="Код публикации, извлеченный из URL")


ExtractionResult = Union[ListingRecord, BlockedResult]


class ScrapeMetadata(_Record):
    """Метаданные навигатора, которые добавляются к записи при сохранении"""

    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Время извлечения")
    page_title: str = Field("", description="Заголовок страницы")
    images_count: int = Field(0, description="Количество изображений")
    scraping_duration: int = Field(0, description="Длительность, мс")
    item_id: Optional[str] = Field(None, description="ID объявления из URL")
    proxy: Optional[str] = Field(None, description="Использованный прокси")
    proxy_country: Optional[str] = Field(None, description="Страна прокси")
    screenshot_base64: Optional[str] = Field(None, description="Скриншот (PNG, base64)")
    html_length: Optional[int] = Field(None, description="Длина сохраненного HTML")


class ScrapeOutcome(BaseModel):
    """Результат одного запуска навигатора: запись ядра + метаданные"""

    model_config = ConfigDict(frozen=True)

    result: Union[ListingRecord, BlockedResult]
    metadata: ScrapeMetadata
    html: Optional[str] = None
