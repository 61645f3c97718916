"""logo-cdn - 도메인/회사명 기반 로고 조회 서비스"""

__version__ = "1.0.0"
