"""설정 파일과 Pydantic 스키마"""

from .schemas import RootConfig, validate_config_dict

__all__ = ["RootConfig", "validate_config_dict"]
