"""HTTP API (FastAPI 라우터, 요청/응답 스키마)"""
