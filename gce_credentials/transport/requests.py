"""Transport adapter for Requests."""

import logging

try:
    import requests
except ImportError as caught_exc:  # pragma: NO COVER
    raise ImportError(
        "The requests library is not installed, please install the "
        "requests package to use the requests transport."
    ) from caught_exc

from gce_credentials import exceptions
from gce_credentials import transport

_LOGGER = logging.getLogger(__name__)

# 요청 시 timeout이 지정되지 않았을 때 사용하는 기본값 (초 단위)
_DEFAULT_TIMEOUT = 120


# requests.Response를 transport.Response 인터페이스에 맞게 감싸는 클래스
class _Response(transport.Response):
    def __init__(self, response):
        self._response = response

    @property
    def status(self):
        return self._response.status_code

    @property
    def headers(self):
        return self._response.headers

    @property
    def data(self):
        return self._response.content


# requests 라이브러리를 이용해 HTTP 요청을 보내는 클래스
class Request(transport.Request):
    """Requests request adapter.

    This class is used internally for making requests using the
    ``requests`` library. A single instance (and its underlying
    :class:`requests.Session`) can be shared across credentials.

    Args:
        session (requests.Session): An instance :class:`requests.Session`
            used to make HTTP requests. If not specified, a session will be
            created.
    """

    def __init__(self, session=None):
        if not session:
            session = requests.Session()

        self.session = session

    # 세션을 닫는다
    def __del__(self):
        try:
            if hasattr(self, "session") and self.session is not None:
                self.session.close()
        except TypeError:
            # 인터프리터 종료 시점에는 세션 모듈이 이미 정리되어 있을 수 있다
            pass

    def __call__(
        self,
        url,
        method="GET",
        body=None,
        headers=None,
        timeout=_DEFAULT_TIMEOUT,
        **kwargs
    ):
        if timeout is None:
            timeout = _DEFAULT_TIMEOUT
        try:
            _LOGGER.debug("Making request: %s %s", method, url)
            response = self.session.request(
                method, url, data=body, headers=headers, timeout=timeout, **kwargs
            )
            return _Response(response)
        # requests에서 발생한 모든 예외를 TransportError로 변환한다
        except requests.exceptions.RequestException as caught_exc:
            new_exc = exceptions.TransportError(caught_exc)
            raise new_exc from caught_exc
