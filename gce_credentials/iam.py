"""Tools for using the Google `Cloud Identity and Access Management (IAM)
API`_'s auth-related functionality.

.. _Cloud Identity and Access Management (IAM) API:
    https://cloud.google.com/iam/docs/
"""

import base64
import http.client as http_client
import json
import logging

from gce_credentials import _helpers
from gce_credentials import exceptions

_LOGGER = logging.getLogger(__name__)

# IAM Credentials API의 signBlob 엔드포인트
_IAM_API_ROOT_URI = "https://iamcredentials.googleapis.com/v1"
_SIGN_BLOB_URI = _IAM_API_ROOT_URI + "/projects/-/serviceAccounts/{}:signBlob?alt=json"


# IAM signBlob API를 호출하여 서비스 계정의 개인 키로 메시지에 서명하는 함수
def sign_blob(request, service_account_email, access_token, message):
    """Signs a message with the service account's system-managed key.

    The key never leaves Google; the IAM Credentials API signs ``message`` on
    behalf of ``service_account_email`` using ``access_token`` to authorize
    the call.

    Args:
        request (gce_credentials.transport.Request): The object used to make
            HTTP requests.
        service_account_email (str): The service account whose key is used.
        access_token (str): An OAuth 2.0 access token for the caller.
        message (Union[str, bytes]): The message to sign.

    Returns:
        bytes: The signature.

    Raises:
        gce_credentials.exceptions.TransportError: If the IAM API can not be
            reached, returns an error or returns a malformed response.
    """
    message = _helpers.to_bytes(message)
    url = _SIGN_BLOB_URI.format(service_account_email)
    headers = {
        "Content-Type": "application/json",
        "authorization": "Bearer {}".format(access_token),
    }
    body = json.dumps(
        {"payload": base64.b64encode(message).decode("utf-8")}
    ).encode("utf-8")

    _LOGGER.debug("Signing blob as %s", service_account_email)
    response = request(url=url, method="POST", body=body, headers=headers)

    # 서명에 실패했다면 TransportError를 발생시킨다
    if response.status != http_client.OK:
        raise exceptions.TransportError(
            "Error calling the IAM signBlob API: {}".format(response.data)
        )

    # 응답 형식이 잘못되었다면 TransportError로 변환한다
    content = _helpers.from_bytes(response.data)
    try:
        signed_blob = json.loads(content)["signedBlob"]
        return base64.b64decode(signed_blob)
    except (ValueError, KeyError, TypeError) as caught_exc:
        new_exc = exceptions.TransportError(
            "Received an invalid response from the IAM signBlob API: "
            "{:.20}".format(content)
        )
        raise new_exc from caught_exc
