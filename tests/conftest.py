"""
테스트 공통 설정 및 픽스처

pytest conftest.py - 모든 테스트에서 공유되는 설정과 픽스처 정의.
"""

import os
import sys
from pathlib import Path
from typing import Any

import pytest

# 프로젝트 루트 경로를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def pytest_configure(config: pytest.Config) -> None:
    """
    pytest 설정 훅

    테스트 환경에서는 LLM 서버 연결을 사용하지 않음.
    """
    os.environ["LLM_ENABLED"] = "false"
    # 테스트 환경임을 명시
    os.environ["ENVIRONMENT"] = "test"


@pytest.fixture(scope="session")
def project_root_path() -> Path:
    """프로젝트 루트 경로"""
    return project_root


@pytest.fixture
def app_config() -> dict[str, Any]:
    """test 환경 설정 (base.yaml + environments/test.yaml)"""
    from aisecretary.lib.config_loader import ConfigLoader

    return ConfigLoader(environment="test").load_config(validate=True)


@pytest.fixture
def container(app_config: dict[str, Any]):
    """test 설정으로 만든 DI 컨테이너"""
    from aisecretary.core.di_container import create_container

    return create_container(app_config)


@pytest.fixture
def store():
    """빈 인메모리 저장소"""
    from aisecretary.infrastructure.persistence import InMemoryStore

    return InMemoryStore()
