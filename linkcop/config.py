# === FILE: linkcop/config.py ===
"""
Модуль для загрузки и валидации конфигурации linkcop.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, ValidationError, field_validator


class CrawlConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: HttpUrl = Field(..., description="Стартовая страница; её хост ограничивает обход.")
    verbose: bool = Field(False, description="Подробное логирование (DEBUG).")
    max_visits: int = Field(10000, ge=1, description="Бюджет полных GET-запросов.")
    random_delay: float = Field(1.0, ge=0, description="Случайная задержка перед запросом (секунд).")
    parallelism: int = Field(2, ge=1, description="Параллельных запросов на один хост.")
    only_failures: bool = Field(False, description="Скрывать ссылки, чей https-вариант отвечает 200.")
    csv: bool = Field(False, description="Выводить отчёт в CSV.")
    csv_path: Path = Field(Path("report.csv"), description="Файл CSV-отчёта.")
    cache_dir: Path = Field(Path(".url-cache"), description="Каталог кэша ответов.")
    disallowed_domains: List[str] = Field(
        default_factory=lambda: ["facebook.com"],
        description="Домены, которые нельзя обходить GET-запросами.",
    )
    user_agent: str = Field("linkcop/0.1", min_length=1, description="Заголовок User-Agent.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    strip_same_host_query: bool = Field(
        True, description="Убирать query и fragment у ссылок на тот же хост."
    )
    probe_ssl: bool = Field(True, description="Проверять https-вариант каждой http-ссылки.")

    @field_validator("disallowed_domains", mode="before")
    def _split_domains(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [d.strip() for d in v.split(",") if d.strip()]
        return v

    @field_validator("disallowed_domains")
    def _lower_domains(cls, v: List[str]) -> List[str]:
        return [d.lower().lstrip(".") for d in v]

    @property
    def hostname(self) -> str:
        return (self.host.host or "").lower()


_DEFAULT_CFG = Path("linkcop.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON и возвращает сырой mapping без валидации."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Собирает CrawlConfig из файла и переопределений (например, из флагов CLI).
    Переопределения со значением None игнорируются.
    Без пути используется linkcop.yaml из текущего каталога, если он есть.
    """
    if path is None:
        data = _read_yaml(_DEFAULT_CFG) if _DEFAULT_CFG.is_file() else {}
    else:
        data = read_config_file(path)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CrawlConfig(**data)
    except ValidationError:
        raise


__all__ = ["CrawlConfig", "load_config", "read_config_file"]
