"""
Configuration loader for AI Secretary

로드 순서:
    1. 프로젝트 루트의 .env (python-dotenv)
    2. config/base.yaml
    3. config/environments/{environment}.yaml (깊은 병합)
    4. 문자열 값의 ${VAR} / ${VAR:-default} 치환
    5. ENV_OVERRIDES 표에 있는 환경 변수 직접 적용
    6. RootConfig(Pydantic) 검증 후 기본값이 채워진 dict 반환
"""

import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from ..config.schemas import validate_config_dict
from .errors import ConfigError, ErrorCode
from .logger import get_logger

logger = get_logger(__name__)

CONFIG_DIR = Path(__file__).parent.parent / "config"
PROJECT_ROOT = CONFIG_DIR.parent.parent

ENVIRONMENTS = ("development", "test", "production")

_ENV_REF = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


# 환경 변수 → (설정 경로, 변환 함수)
ENV_OVERRIDES: dict[str, tuple[tuple[str, ...], Callable[[str], Any]]] = {
    "HOST": (("server", "host"), str),
    "PORT": (("server", "port"), int),
    "LLM_ENABLED": (("llm", "enabled"), _as_bool),
    "LLM_BASE_URL": (("llm", "base_url"), str),
    "LLM_MODEL": (("llm", "model"), str),
    "PII_FAIL_CLOSED": (("privacy", "fail_closed"), _as_bool),
}


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """overlay가 우선하는 재귀 병합 (입력은 변경하지 않음)"""
    result = dict(base)
    for key, value in overlay.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def expand_env(value: Any) -> Any:
    """중첩 구조 안의 모든 문자열에 ${VAR:-default} 치환 적용

    정의되지 않았고 기본값도 없는 참조는 원문 그대로 남깁니다.
    """
    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            env_value = os.getenv(match.group("name"))
            if env_value is not None:
                return env_value
            default = match.group("default")
            return default if default is not None else match.group(0)

        return _ENV_REF.sub(_replace, value)
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value


def apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    for env_name, (path, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None:
            continue
        try:
            value = convert(raw)
        except ValueError as e:
            raise ConfigError(
                ErrorCode.CONFIG_002, validation_errors=f"{env_name}={raw!r}: {e}"
            ) from e

        section = config
        for key in path[:-1]:
            if not isinstance(section.get(key), dict):
                section[key] = {}
            section = section[key]
        section[path[-1]] = value
        logger.debug("환경 변수 오버라이드 적용", env=env_name, path=".".join(path))
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


class ConfigLoader:
    """환경별 YAML 설정 로더"""

    def __init__(self, base_path: Path | None = None, environment: str | None = None) -> None:
        dotenv_path = PROJECT_ROOT / ".env"
        if dotenv_path.exists():
            load_dotenv(dotenv_path)

        self.base_path = base_path or CONFIG_DIR
        requested = (environment or os.getenv("ENVIRONMENT") or "development").lower()
        if requested not in ENVIRONMENTS:
            logger.warning("알 수 없는 환경, development 사용", requested=requested, fallback="development")
            requested = "development"
        self.environment = requested

    @property
    def overlay_path(self) -> Path:
        return self.base_path / "environments" / f"{self.environment}.yaml"

    def load_config(self, validate: bool = True) -> dict[str, Any]:
        """
        설정 로드

        Args:
            validate: False면 RootConfig 검증과 기본값 채우기를 건너뜀

        Raises:
            ConfigError: CONFIG-001 (base.yaml 없음), CONFIG-002 (검증 실패),
                CONFIG-003 (YAML 문법 오류)
        """
        base_file = self.base_path / "base.yaml"
        if not base_file.exists():
            raise ConfigError(ErrorCode.CONFIG_001, config_path=str(base_file))

        try:
            raw = _read_yaml(base_file)
            if self.overlay_path.exists():
                raw = deep_merge(raw, _read_yaml(self.overlay_path))
        except yaml.YAMLError as e:
            raise ConfigError(ErrorCode.CONFIG_003, original_error=str(e)) from e

        raw = apply_env_overrides(expand_env(raw))
        if not validate:
            return raw

        try:
            root = validate_config_dict(raw)
        except ValidationError as e:
            raise ConfigError(ErrorCode.CONFIG_002, validation_errors=str(e)) from e

        logger.info("설정 로드 완료", environment=self.environment, base_path=str(self.base_path))
        return root.model_dump()


def load_config(validate: bool = True, environment: str | None = None) -> dict[str, Any]:
    """
    기본 설정 디렉터리에서 설정 로드

    Examples:
        >>> config = load_config(environment="test")
        >>> config["classification"]["llm_threshold"]
        0.7
    """
    return ConfigLoader(environment=environment).load_config(validate=validate)
