"""Compute Engine metadata server credentials for Python."""

import logging

from gce_credentials import version as gce_credentials_version


__version__ = gce_credentials_version.__version__


__all__ = ["__version__"]


# 라이브러리를 사용하는 애플리케이션이 로깅을 설정하지 않았을 때 경고가 출력되지 않도록 한다
logging.getLogger(__name__).addHandler(logging.NullHandler())
