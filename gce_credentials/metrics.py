"""Values for the x-goog-api-client request attribution header."""

import platform

from gce_credentials import version

# 요청 출처를 서버에 알리기 위한 헤더 이름
API_CLIENT_HEADER = "x-goog-api-client"

# Credential 종류
CRED_TYPE_SA_MDS = "cred-type/mds"

# 요청 종류
REQUEST_TYPE_ACCESS_TOKEN = "auth-request-type/at"
REQUEST_TYPE_ID_TOKEN = "auth-request-type/it"
REQUEST_TYPE_MDS_PING = "auth-request-type/mds"


# 파이썬 버전과 라이브러리 버전을 "gl-python/3.x.y auth/0.1.0" 형태로 반환한다
def python_and_auth_lib_version():
    return "gl-python/{} auth/{}".format(
        platform.python_version(), version.__version__
    )


# 메타데이터 서버 핑 요청에 사용할 헤더 값
def mds_ping():
    return "{} {}".format(python_and_auth_lib_version(), REQUEST_TYPE_MDS_PING)


# 메타데이터 서버에서 액세스 토큰을 요청할 때 사용할 헤더 값
def token_request_access_token_mds():
    return "{} {} {}".format(
        python_and_auth_lib_version(), REQUEST_TYPE_ACCESS_TOKEN, CRED_TYPE_SA_MDS
    )


# 메타데이터 서버에서 ID 토큰을 요청할 때 사용할 헤더 값
def token_request_id_token_mds():
    return "{} {} {}".format(
        python_and_auth_lib_version(), REQUEST_TYPE_ID_TOKEN, CRED_TYPE_SA_MDS
    )
