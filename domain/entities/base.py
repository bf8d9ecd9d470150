"""
모든 도메인 엔티티의 공통 Base
순환 import 를 피하기 위해 별도 모듈로 둔다
"""

from sqlalchemy.orm import declarative_base

# 모든 모델이 공유하는 Base
Base = declarative_base()
