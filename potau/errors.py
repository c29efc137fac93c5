"""
세레모니 예외 정의
==================

**예외로 다루는 경우** (작업 전체를 중단):
  - SerializationError: 곡선 위의 점이 아닌 바이트, 길이 불일치 등
  - SubgroupCheckError: 곡선 위의 점이지만 소수 위수 부분군 밖의 점
  - EmptyTranscriptError: 업데이트 증명이 하나도 없는 검증 요청
  - KeyReuseError: 이미 사용된 비밀 키로 다시 업데이트

구조/체인 검사 실패와 퇴화(degenerate) 기여는 예외가 아니라
검증 결과(potau.verification)로 보고된다.
"""


class CeremonyError(Exception):
    """세레모니 관련 예외의 기본 클래스."""


class SerializationError(CeremonyError, ValueError):
    """SRS 바이트열을 점 벡터로 복원할 수 없을 때."""


class SubgroupCheckError(SerializationError):
    """역직렬화된 점이 소수 위수 부분군에 속하지 않을 때.

    Attributes:
        group: "G1" 또는 "G2"
        index: 벡터 안에서의 위치
    """

    def __init__(self, group, index):
        super().__init__(f"{group}[{index}] 점이 소수 위수 부분군에 속하지 않습니다")
        self.group = group
        self.index = index


class EmptyTranscriptError(CeremonyError, ValueError):
    """업데이트 증명이 없는 트랜스크립트를 검증하려 할 때."""


class KeyReuseError(CeremonyError):
    """하나의 비밀 키를 두 번 이상 업데이트에 사용하려 할 때."""
