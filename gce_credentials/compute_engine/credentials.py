"""Google Compute Engine credentials.

This module provides authentication for an application running on Google
Compute Engine using the Compute Engine metadata server. The credentials
detect whether they are running on Compute Engine at most once, and return
empty results rather than raising when they are not.

"""

import datetime
import json
import logging
import threading

from gce_credentials import _helpers
from gce_credentials import exceptions
from gce_credentials import iam
from gce_credentials import metrics
from gce_credentials.compute_engine import _metadata
from gce_credentials.transport import requests as gce_requests

_LOGGER = logging.getLogger(__name__)

# 할당량 프로젝트를 지정하는 요청 헤더
_QUOTA_PROJECT_HEADER = "x-goog-user-project"


class Credentials(object):
    """Compute Engine Credentials.

    Exactly one kind of token is configured per instance: the default-scope
    access token, an access token for ``scopes``, or an ID token for
    ``target_audience``.

    Args:
        scopes (Union[str, Sequence[str]]): The scopes of the access request,
            as a sequence or a space-delimited string.
        target_audience (str): The audience for the ID token.
        quota_project_id (str): The project to bill for access charges
            associated with requests.
        request (gce_credentials.transport.Request): The object used to make
            HTTP requests. Defaults to a
            :class:`gce_credentials.transport.requests.Request`.
        blob_signer (Callable): Called as
            ``blob_signer(request, service_account_email, access_token,
            message)`` by :meth:`sign_blob`. Defaults to
            :func:`gce_credentials.iam.sign_blob`.

    Raises:
        gce_credentials.exceptions.MalformedError: If both ``scopes`` and
            ``target_audience`` are supplied.
    """

    def __init__(
        self,
        scopes=None,
        target_audience=None,
        quota_project_id=None,
        request=None,
        blob_signer=None,
    ):
        # 스코프와 audience는 동시에 지정할 수 없다 (네트워크 요청 전에 실패해야 한다)
        if scopes and target_audience:
            raise exceptions.MalformedError(
                "scopes and target_audience cannot both be supplied"
            )

        # 문자열로 주어진 스코프는 공백을 기준으로 나눈다
        if isinstance(scopes, str):
            scopes = scopes.split()
        self._scopes = tuple(scopes) if scopes else None
        self._target_audience = target_audience or None

        # 설정에 따라 토큰을 요청할 URL을 결정한다
        if self._target_audience:
            self._token_uri = _metadata.get_id_token_uri(self._target_audience)
        else:
            self._token_uri = _metadata.get_token_uri(self._scopes)

        self._quota_project_id = quota_project_id
        self._request = request if request is not None else gce_requests.Request()
        self._blob_signer = blob_signer if blob_signer is not None else iam.sign_blob

        # GCE 환경 감지 상태 (인스턴스 당 한 번만 감지한다)
        self._detection_lock = threading.Lock()
        self._checked_on_gce = False
        self._on_gce = False

        # 한 번 가져오면 바뀌지 않는 값들
        self._facts_lock = threading.Lock()
        self._client_name = None
        self._project_id = None

        # 마지막으로 받아온 토큰
        self._last_received_token = None
        self.token = None
        self.expiry = None

    @property
    def scopes(self):
        return self._scopes

    @property
    def target_audience(self):
        return self._target_audience

    @property
    def token_uri(self):
        return self._token_uri

    @property
    def quota_project_id(self):
        return self._quota_project_id

    # 토큰의 만료 여부 (만료 시간이 없다면 만료되지 않은 것으로 본다)
    # 만료되었다고 해서 자동으로 갱신하지는 않는다
    @property
    def expired(self):
        if self.expiry is None:
            return False
        return _helpers.utcnow() >= self.expiry

    def _request_for(self, request):
        return request if request is not None else self._request

    def is_on_gce(self, request=None):
        """Checks whether the process is running on Compute Engine.

        The metadata server is probed the first time this is called; every
        later call returns the same answer without any network activity.

        Args:
            request (gce_credentials.transport.Request): Overrides the
                transport given to the constructor.

        Returns:
            bool: True if the metadata server was detected.
        """
        # 여러 호출자가 동시에 처음 호출하더라도 핑은 한 번만 수행된다
        with self._detection_lock:
            if not self._checked_on_gce:
                self._on_gce = _metadata.ping(self._request_for(request))
                self._checked_on_gce = True
                _LOGGER.debug("Compute Engine detection result: %s", self._on_gce)
        return self._on_gce

    def fetch_token(self, request=None):
        """Fetches a token from the metadata server.

        Every call issues a new request and replaces the cached token.

        Args:
            request (gce_credentials.transport.Request): Overrides the
                transport given to the constructor.

        Returns:
            Mapping[str, Any]: ``{}`` when not running on Compute Engine,
            ``{"id_token": ...}`` when configured with a target audience,
            otherwise the decoded token response (``access_token``,
            ``expires_in``, ``token_type``) plus ``expires_at``.

        Raises:
            gce_credentials.exceptions.TransportError: If the metadata server
                can not be reached or returns an error.
            gce_credentials.exceptions.RefreshError: If the token response is
                malformed.
        """
        if not self.is_on_gce(request):
            # GCE가 아니라면 오류 대신 빈 결과를 반환한다
            return {}

        request = self._request_for(request)

        # audience가 지정되어 있다면 응답 본문(JWT)을 그대로 ID 토큰으로 사용한다
        if self._target_audience:
            id_token = _metadata.get(
                request,
                self._token_uri,
                headers={
                    metrics.API_CLIENT_HEADER: metrics.token_request_id_token_mds()
                },
            )
            self._last_received_token = {"id_token": id_token}
            self.token = id_token
            self.expiry = None
            return {"id_token": id_token}

        content = _metadata.get(
            request,
            self._token_uri,
            headers={
                metrics.API_CLIENT_HEADER: metrics.token_request_access_token_mds()
            },
        )
        try:
            token_json = json.loads(content)
        except ValueError as caught_exc:
            new_exc = exceptions.RefreshError(
                "Received invalid JSON from the Google Compute Engine "
                "metadata service: {:.20}".format(content)
            )
            raise new_exc from caught_exc

        if not isinstance(token_json, dict) or not isinstance(
            token_json.get("expires_in"), int
        ):
            raise exceptions.RefreshError(
                "No expires_in in the Google Compute Engine metadata service "
                "token response."
            )

        # 액세스 토큰의 만료 시간을 계산한다
        token_json["expires_at"] = _helpers.utcnow() + datetime.timedelta(
            seconds=token_json["expires_in"]
        )

        # 나중에 사용할 수 있도록 저장해둔다
        self._last_received_token = token_json
        self.token = token_json.get("access_token")
        self.expiry = token_json["expires_at"]
        return dict(token_json)

    def get_last_received_token(self):
        """Optional[Mapping[str, Any]]: The result of the last successful
        :meth:`fetch_token`, if any."""
        if self._last_received_token is None:
            return None
        return dict(self._last_received_token)

    def get_client_name(self, request=None):
        """Gets the default service account email from the metadata server.

        Subsequent calls return the cached value.

        Returns:
            str: The email, or ``""`` when not running on Compute Engine.
        """
        with self._facts_lock:
            if self._client_name:
                return self._client_name

            if not self.is_on_gce(request):
                return ""

            self._client_name = _metadata.get(
                self._request_for(request), _metadata.get_client_name_uri()
            )
            return self._client_name

    def get_project_id(self, request=None):
        """Gets the project ID from the metadata server.

        Subsequent calls return the cached value.

        Returns:
            Optional[str]: The project ID, or None when not running on
            Compute Engine.
        """
        with self._facts_lock:
            if self._project_id:
                return self._project_id

            if not self.is_on_gce(request):
                return None

            self._project_id = _metadata.get(
                self._request_for(request), _metadata.get_project_id_uri()
            )
            return self._project_id

    def get_quota_project(self):
        return self._quota_project_id

    def sign_blob(self, message, request=None):
        """Signs a message with the default service account's key.

        The signature is produced by ``blob_signer`` (the IAM signBlob API by
        default) using the cached access token when one exists.

        Args:
            message (Union[str, bytes]): The message to sign.
            request (gce_credentials.transport.Request): Overrides the
                transport given to the constructor.

        Returns:
            bytes: The signature, as returned by ``blob_signer``.

        Raises:
            gce_credentials.exceptions.InvalidOperation: If no access token
                is available, for example when configured with a target
                audience.
        """
        # ID 토큰만 받을 수 있는 설정이라면 네트워크 요청 없이 바로 실패한다
        if self._target_audience:
            raise exceptions.InvalidOperation(
                "Credentials configured with a target_audience can not sign bytes"
            )

        email = self.get_client_name(request)

        # 이전에 받아온 토큰이 있다면 재사용하고, 없다면 새로 받아온다
        previous_token = self._last_received_token or {}
        access_token = previous_token.get("access_token")
        if not access_token:
            access_token = self.fetch_token(request).get("access_token")

        if not access_token:
            raise exceptions.InvalidOperation(
                "An access token is required to sign bytes; credentials outside "
                "Compute Engine can not sign"
            )

        return self._blob_signer(
            self._request_for(request), email, access_token, message
        )

    # 요청 헤더에 인증 정보를 추가하는 메소드
    def apply(self, headers, token=None):
        token = token or self.token
        if not token:
            raise exceptions.InvalidOperation(
                "No token available; call fetch_token first"
            )
        headers["authorization"] = "Bearer {}".format(
            _helpers.from_bytes(token)
        )
        if self._quota_project_id:
            headers[_QUOTA_PROJECT_HEADER] = self._quota_project_id

    # 주어진 quota_project_id로 새로운 Credential 인스턴스를 생성하는 메소드
    # 감지 결과나 캐시된 토큰은 공유하지 않는다
    def with_quota_project(self, quota_project_id):
        return self.__class__(
            scopes=self._scopes,
            target_audience=self._target_audience,
            quota_project_id=quota_project_id,
            request=self._request,
            blob_signer=self._blob_signer,
        )
