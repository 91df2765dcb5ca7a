"""Google Compute Engine authentication."""

# 필요한 모듈 임포트
from gce_credentials.compute_engine._metadata import on_app_engine_flexible
from gce_credentials.compute_engine.credentials import Credentials

# 외부에 노출되는 클래스 선별
__all__ = ["Credentials", "on_app_engine_flexible"]
