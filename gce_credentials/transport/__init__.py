"""Transport - HTTP client library support.

:mod:`gce_credentials` talks to the metadata server and to the IAM
Credentials API through a small request/response interface so that any HTTP
library can be plugged in. :mod:`gce_credentials.transport.requests` provides
the default implementation.
"""

import abc


# HTTP 응답을 나타내는 추상 클래스
class Response(metaclass=abc.ABCMeta):
    # HTTP 상태 코드
    @abc.abstractproperty
    def status(self):
        raise NotImplementedError("status must be implemented.")

    # 응답 헤더 (대소문자를 구분하지 않는 매핑)
    @abc.abstractproperty
    def headers(self):
        raise NotImplementedError("headers must be implemented.")

    # 응답 본문 (바이트열)
    @abc.abstractproperty
    def data(self):
        raise NotImplementedError("data must be implemented.")


# HTTP 요청을 보내는 호출 가능한 객체를 나타내는 추상 클래스
# 여러 Credential 인스턴스가 공유할 수 있도록 재진입 가능하게 구현해야 한다
class Request(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def __call__(
        self, url, method="GET", body=None, headers=None, timeout=None, **kwargs
    ):
        """Make an HTTP request.

        Args:
            url (str): The URI to be requested.
            method (str): The HTTP method to use for the request. Defaults
                to 'GET'.
            body (bytes): The payload or body in HTTP request.
            headers (Mapping[str, str]): Request headers.
            timeout (Optional[float]): The number of seconds to wait for a
                response from the server. If not specified or if None, the
                transport-specific default timeout will be used.
            kwargs: Additionally arguments passed on to the transport's
                request method.

        Returns:
            Response: The HTTP response.

        Raises:
            gce_credentials.exceptions.TransportError: If any exception
                occurred.
        """
        raise NotImplementedError("__call__ must be implemented.")
