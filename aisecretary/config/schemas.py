"""
Configuration Schemas - Pydantic 기반 설정 검증
YAML 설정을 타입 안전하게 검증하고 IDE 자동완성 지원
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PriorityName = Literal["low", "medium", "high", "urgent"]

# ========================================
# App & Server Configuration
# ========================================


class AppConfig(BaseModel):
    """애플리케이션 기본 설정"""

    name: str = Field(default="ai-secretary", min_length=1)
    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+$")
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False


class ServerConfig(BaseModel):
    """서버 설정"""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)


# ========================================
# Intake Pipeline
# ========================================


class IntakeConfig(BaseModel):
    """접수 파이프라인 설정"""

    max_content_length: int = Field(default=5000, ge=1)
    auto_ticket_priorities: list[PriorityName] = Field(default_factory=lambda: ["high", "urgent"])
    auto_classify_use_llm: bool = True
    min_unit_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    recent_limit: int = Field(default=10, ge=1)


class PrivacyConfig(BaseModel):
    """개인정보 마스킹 설정"""

    # True면 마스킹 실패 시 원문 대신 대체 문구 반환
    fail_closed: bool = False
    fail_closed_placeholder: str = "[마스킹 실패]"
    address_placeholder: str = "[주소]"
    name_whitelist: list[str] = Field(default_factory=list)


# ========================================
# Classification & Priority
# ========================================


class ClassificationConfig(BaseModel):
    """규칙 기반 분류 설정"""

    rules_file: str = "rules/classification_rules.yaml"
    llm_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    default_confidence: float = Field(default=0.3, ge=0.0, le=1.0)


class PriorityConfig(BaseModel):
    """우선순위 키워드 설정"""

    urgent_keywords: list[str] = Field(
        default_factory=lambda: ["응급", "긴급", "위험", "화재", "가스", "누수"]
    )
    high_keywords: list[str] = Field(default_factory=lambda: ["소음", "민원", "고장", "문제"])
    high_channels: list[str] = Field(default_factory=lambda: ["call"])


class LLMConfig(BaseModel):
    """LLM 폴백 분류기 설정 (Ollama 호환)"""

    enabled: bool = False
    provider: Literal["ollama", "none"] = "ollama"
    base_url: str = "http://localhost:11434"
    model: str = "mistral:7b"
    model_family: str = "mistral"
    availability_timeout: float = Field(default=5.0, gt=0.0)
    request_timeout: float = Field(default=30.0, gt=0.0)
    availability_cache_ttl: int = Field(default=30, ge=0)
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    top_p: float = Field(default=0.9, ge=0.0, le=1.0)
    num_predict: int = Field(default=500, ge=1)


# ========================================
# SLA & Staff
# ========================================


class SLARuleConfig(BaseModel):
    """SLA 규칙 (우선순위 + 선택적 카테고리)"""

    priority: PriorityName
    category: str | None = None
    response_hours: float = Field(..., gt=0.0)
    resolution_hours: float = Field(..., gt=0.0)

    @model_validator(mode="after")
    def check_order(self) -> "SLARuleConfig":
        if self.response_hours > self.resolution_hours:
            raise ValueError("response_hours must not exceed resolution_hours")
        return self


class SLAConfig(BaseModel):
    """SLA 설정"""

    default_response_hours: float = Field(default=24.0, gt=0.0)
    default_resolution_hours: float = Field(default=168.0, gt=0.0)
    rules: list[SLARuleConfig] = Field(default_factory=list)


class StaffMemberConfig(BaseModel):
    """직원 명부 항목"""

    id: str = Field(..., min_length=1)
    name: str
    role: str = ""
    department: str = ""
    specialties: list[str] = Field(default_factory=list)
    active: bool = True


class StaffConfig(BaseModel):
    """직원 명부 설정"""

    fallback_staff_id: str = "staff_001"
    members: list[StaffMemberConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "StaffConfig":
        ids = [m.id for m in self.members]
        if len(ids) != len(set(ids)):
            raise ValueError("staff member ids must be unique")
        return self


# ========================================
# Root
# ========================================


class RootConfig(BaseModel):
    """전체 설정"""

    model_config = ConfigDict(extra="allow")

    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    intake: IntakeConfig = Field(default_factory=IntakeConfig)
    privacy: PrivacyConfig = Field(default_factory=PrivacyConfig)
    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    priority: PriorityConfig = Field(default_factory=PriorityConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    sla: SLAConfig = Field(default_factory=SLAConfig)
    staff: StaffConfig = Field(default_factory=StaffConfig)


def validate_config_dict(config: dict[str, Any]) -> RootConfig:
    """설정 딕셔너리 검증"""
    return RootConfig.model_validate(config)
