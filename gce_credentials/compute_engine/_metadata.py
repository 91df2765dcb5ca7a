import http.client as http_client
import logging
import os

from gce_credentials import _helpers
from gce_credentials import environment_vars
from gce_credentials import exceptions
from gce_credentials import metrics

# 로거 설정: 현재 모듈의 로그를 가져온다
_LOGGER = logging.getLogger(__name__)

# GCE 메타데이터 서버의 IP주소를 가져온다 (단, 환경변수가 설정되어 있지 않다면 기본값으로 "169.254.169.254"를 사용한다)
# 도메인 이름 대신 IP를 사용하는 이유는 GCE가 아닌 환경에서 DNS 조회로 오래 멈추지 않기 위해서이다
_METADATA_IP_ROOT = "http://{}".format(
    os.getenv(environment_vars.GCE_METADATA_IP, "169.254.169.254")
)
# 메타데이터 서버의 루트 URL
_METADATA_ROOT = "{}/computeMetadata/".format(_METADATA_IP_ROOT)

# 메타데이터 서버의 각 리소스 경로
_TOKEN_URI_PATH = "v1/instance/service-accounts/default/token"
_ID_TOKEN_URI_PATH = "v1/instance/service-accounts/default/identity"
_CLIENT_ID_URI_PATH = "v1/instance/service-accounts/default/email"
_PROJECT_ID_URI_PATH = "v1/project/project-id"

# HTTP 요청 헤더의 이름 (응답에 이 헤더가 있으면 GCE 메타데이터 서버로 판단한다)
_METADATA_FLAVOR_HEADER = "metadata-flavor"
# HTTP 요청 헤더의 값
_METADATA_FLAVOR_VALUE = "Google"
# HTTP 요청 시 사용할 헤더들을 나타내는 딕셔너리
_METADATA_HEADERS = {_METADATA_FLAVOR_HEADER: _METADATA_FLAVOR_VALUE}

# 핑 시도 횟수와 시도당 타임아웃(초)
# GCE가 아닌 환경(개발자 PC 등)에서 알 수 없는 호스트를 조회하면 20~30초가 걸릴 수 있으므로
# 타임아웃을 짧게 잡아 전체 감지 시간을 최대 약 1.5초로 제한한다
_MAX_COMPUTE_PING_TRIES = 3
_COMPUTE_PING_CONNECTION_TIMEOUT_S = 0.5

# App Engine Flexible 인스턴스 이름의 접두사
_APP_ENGINE_FLEXIBLE_PREFIX = "aef-"


# 기본 서비스 계정의 액세스 토큰을 요청할 URL을 만드는 함수
def get_token_uri(scopes=None):
    url = _METADATA_ROOT + _TOKEN_URI_PATH
    if scopes:
        # 스코프는 쉼표로 이어붙여 쿼리 파라미터로 전달한다
        if not isinstance(scopes, str):
            scopes = ",".join(scopes)
        url = _helpers.update_query(url, {"scopes": scopes})
    return url


# 특정 audience에 대한 ID 토큰을 요청할 URL을 만드는 함수
def get_id_token_uri(audience):
    return _helpers.update_query(
        _METADATA_ROOT + _ID_TOKEN_URI_PATH, {"audience": audience}
    )


# 기본 서비스 계정의 이메일을 요청할 URL
def get_client_name_uri():
    return _METADATA_ROOT + _CLIENT_ID_URI_PATH


# 프로젝트 ID를 요청할 URL
def get_project_id_uri():
    return _METADATA_ROOT + _PROJECT_ID_URI_PATH


# GAE_INSTANCE 환경변수를 통해 App Engine Flexible 환경인지 확인하는 함수
def on_app_engine_flexible():
    instance = os.environ.get(environment_vars.GAE_INSTANCE, "")
    return instance.startswith(_APP_ENGINE_FLEXIBLE_PREFIX)


# GCE 메타데이터 서버에 핑을 보내서 서버의 응답여부 확인하는 함수
def ping(
    request,
    timeout=_COMPUTE_PING_CONNECTION_TIMEOUT_S,
    retry_count=_MAX_COMPUTE_PING_TRIES,
):
    retries = 0
    headers = _METADATA_HEADERS.copy()
    headers[metrics.API_CLIENT_HEADER] = metrics.mds_ping()

    # 주어진 횟수만큼 서버에 핑을 보내고, 처음으로 정상 응답이 오면 헤더를 확인해 결과를 반환한다
    while retries < retry_count:
        try:
            response = request(
                url=_METADATA_IP_ROOT, method="GET", headers=headers, timeout=timeout
            )
        except exceptions.TransportError as e:
            # GCE 메타데이터 서버 접근 불가 경고
            _LOGGER.warning(
                "Compute Engine Metadata server unavailable on "
                "attempt %s of %s. Reason: %s",
                retries + 1,
                retry_count,
                e,
            )
            retries += 1
            continue

        # 4xx, 5xx 응답도 실패한 시도로 취급한다
        if response.status >= http_client.BAD_REQUEST:
            _LOGGER.warning(
                "Compute Engine Metadata server unavailable on "
                "attempt %s of %s. Status: %s",
                retries + 1,
                retry_count,
                response.status,
            )
            retries += 1
            continue

        metadata_flavor = response.headers.get(_METADATA_FLAVOR_HEADER)
        return metadata_flavor == _METADATA_FLAVOR_VALUE

    return False


# 메타데이터 서버에서 리소스를 가져오는 함수
# 이 시점에는 이미 GCE 환경임이 확인되었으므로 재시도하지 않는다
def get(request, url, headers=None):
    headers_to_use = _METADATA_HEADERS.copy()
    if headers:
        headers_to_use.update(headers)

    _LOGGER.debug("Fetching %s from the Compute Engine metadata server", url)
    # TransportError는 호출한 쪽으로 그대로 전달된다
    response = request(url=url, method="GET", headers=headers_to_use)

    # 상태코드가 200이면 응답 본문을 문자열로 그대로 반환한다
    if response.status == http_client.OK:
        return _helpers.from_bytes(response.data)

    raise exceptions.TransportError(
        "Failed to retrieve {} from the Google Compute Engine "
        "metadata service. Status: {} Response:\n{}".format(
            url, response.status, response.data
        ),
        response,
    )
