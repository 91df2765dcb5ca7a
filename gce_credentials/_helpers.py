"""Helper functions for commonly used utilities."""

import datetime
import urllib.parse


# 현재 UTC 시각을 timezone 정보가 없는 datetime으로 반환한다
def utcnow():
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.replace(tzinfo=None)


# 문자열을 바이트열로 변환하는 함수 (이미 바이트열이라면 그대로 반환한다)
def to_bytes(value, encoding="utf-8"):
    result = value.encode(encoding) if isinstance(value, str) else value
    if isinstance(result, bytes):
        return result
    else:
        raise ValueError("{0!r} could not be converted to bytes".format(value))


# 바이트열을 문자열로 변환하는 함수 (이미 문자열이라면 그대로 반환한다)
def from_bytes(value):
    result = value.decode("utf-8") if isinstance(value, bytes) else value
    if isinstance(result, str):
        return result
    else:
        raise ValueError("{0!r} could not be converted to unicode".format(value))


# URL의 쿼리 파라미터를 추가하거나 갱신하는 함수
def update_query(url, params):
    # URL을 구성요소로 분해하고 기존 쿼리 문자열을 딕셔너리로 파싱한다
    parts = urllib.parse.urlparse(url)
    query_params = urllib.parse.parse_qs(parts.query)
    # 새로운 파라미터로 기존 값을 덮어쓴다
    query_params.update(params)
    # 쿼리 문자열을 다시 만들고 URL을 재조립한다
    new_query = urllib.parse.urlencode(query_params, doseq=True)
    new_parts = parts._replace(query=new_query)
    return urllib.parse.urlunparse(new_parts)
