"""공용 라이브러리 (로깅, 에러, 설정, 동시성 유틸리티)"""
