"""E2E 테스트 모듈입니다. ``fastdoc`` 콘솔 명령어를 실행합니다."""
