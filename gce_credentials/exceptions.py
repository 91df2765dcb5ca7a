"""Exceptions used in the gce_credentials library."""


# 모든 인증 관련 예외의 최상위 클래스
class GoogleAuthError(Exception):
    pass


# HTTP 요청 도중 발생한 오류 (연결 거부, 타임아웃, 200이 아닌 응답 등)
class TransportError(GoogleAuthError):
    pass


# 토큰을 받아오는 데 실패했을 때 발생한다 (잘못된 형식의 응답 등)
class RefreshError(GoogleAuthError):
    pass


# 생성자 인자나 입력 값의 형식이 잘못되었을 때 발생한다
class MalformedError(GoogleAuthError, ValueError):
    pass


# 현재 Credential 상태에서는 수행할 수 없는 작업을 요청했을 때 발생한다
class InvalidOperation(GoogleAuthError):
    pass
