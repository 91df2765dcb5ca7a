"""Environment variables consulted by gce_credentials."""

# App Engine 인스턴스 이름이 들어있는 환경변수 (Flexible 환경에서는 "aef-"로 시작한다)
GAE_INSTANCE = "GAE_INSTANCE"

# GCE 메타데이터 서버의 IP 주소를 덮어쓰기 위한 환경변수
# 설정되어 있지 않다면 링크 로컬 주소 169.254.169.254를 사용한다
GCE_METADATA_IP = "GCE_METADATA_IP"
