"""우선순위 판정 모듈"""

from .priority import PriorityEngine

__all__ = ["PriorityEngine"]
