"""webcalc - 웹 검색/추출/계산 도구 서비스"""

__version__ = "0.2.0"
