#!/usr/bin/env python3
"""
Сохранение результатов извлечения в JSON.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from meli_listing.models import ScrapeOutcome

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "OUTPUT.json"


def merge_outcome(outcome: ScrapeOutcome) -> Dict[str, Any]:
    """
    Объединяет запись ядра с метаданными навигатора.

    Необязательные метаданные (скриншот, длина HTML, прокси) попадают
    в результат только если они есть.
    """
    result = outcome.result.to_output()
    metadata = outcome.metadata.model_dump(by_alias=True, exclude_none=True, mode="json")
    result["metadata"] = metadata
    if outcome.html is not None:
        result["html"] = outcome.html
    return result


def error_result(url: Optional[str], error: str) -> Dict[str, Any]:
    """Запись об ошибке, когда извлечь страницу не удалось."""
    return {
        "success": False,
        "error": error,
        "url": url or "unknown",
        "scrapedAt": datetime.now(timezone.utc).isoformat(),
    }


class ResultStore:
    """
    Пишет результат в results/<код>_<время>.json и дублирует в OUTPUT.json.

    Args:
        results_dir: Директория для результатов
    """

    def __init__(self, results_dir: Path):
        self.results_dir = Path(results_dir)

    def _write(self, path: Path, data: Dict[str, Any]):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=str)

    def save_data(self, data: Dict[str, Any], name: Optional[str] = None) -> Path:
        """Сохраняет произвольный результат; возвращает путь к файлу с меткой времени."""
        self.results_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = self.results_dir / f"{name or 'result'}_{timestamp}.json"

        self._write(file_path, data)
        self._write(self.results_dir / OUTPUT_FILENAME, data)

        logger.info(f"Результат сохранен: {file_path}")
        return file_path

    def save(self, outcome: ScrapeOutcome) -> Path:
        """Сохраняет результат навигатора вместе с метаданными."""
        data = merge_outcome(outcome)
        name = data.get("listingCode") or outcome.metadata.item_id
        return self.save_data(data, name)

    def save_error(self, url: Optional[str], error: Exception) -> Path:
        return self.save_data(error_result(url, str(error)), "error")

