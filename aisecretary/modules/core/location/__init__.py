"""
위치 추출 모듈

- ApartmentParser: 민원 텍스트에서 동/호/층 추출
"""

from .apartment_parser import NO_LOCATION, ApartmentParser, ApartmentUnit, ParsedLocation

__all__ = ["ApartmentParser", "ApartmentUnit", "ParsedLocation", "NO_LOCATION"]
