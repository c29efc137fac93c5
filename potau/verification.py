"""
검증 결과 타입
==============

세레모니 검증은 여러 단계로 이루어진다. 호출자가 실패 원인을 알 수 있도록
단순 bool 대신 실패 종류를 담은 결과 객체를 돌려준다.
bool(result)는 실패가 없을 때만 True이므로 기존 bool 호출자와 호환된다.

  START_MISMATCH     첫 번째 증명이 이전 SRS의 τ·G1에서 출발하지 않음
  END_MISMATCH       마지막 증명의 새 점이 최종 SRS의 τ·G1과 다름
  CHAIN_BROKEN       중간 증명의 페어링 검사 또는 연결 실패
  DEGENERATE_SECRET  비밀 값 0 또는 1로 만든 기여
  ZERO_COMMITMENT    최종 SRS의 0차 원소가 항등원
  STRUCTURE_INVALID  최종 SRS가 생성자에서 시작하는 같은 τ의 연속 거듭제곱이 아님
                     (부분군 밖의 원소 포함)
"""

from enum import Enum


class VerificationFailure(Enum):
    START_MISMATCH = "start_mismatch"
    END_MISMATCH = "end_mismatch"
    CHAIN_BROKEN = "chain_broken"
    DEGENERATE_SECRET = "degenerate_secret"
    ZERO_COMMITMENT = "zero_commitment"
    STRUCTURE_INVALID = "structure_invalid"


class VerificationResult:
    """검증 결과.

    속성:
        failure: VerificationFailure 또는 None (성공)
        index: 실패한 업데이트 증명의 위치 (체인 관련 실패일 때만)
    """

    def __init__(self, failure=None, index=None):
        self.failure = failure
        self.index = index

    @classmethod
    def ok(cls):
        return cls()

    @property
    def valid(self):
        return self.failure is None

    def __bool__(self):
        return self.failure is None

    def __eq__(self, other):
        if not isinstance(other, VerificationResult):
            return NotImplemented
        return self.failure == other.failure and self.index == other.index

    def __repr__(self):
        if self.failure is None:
            return "VerificationResult(valid)"
        if self.index is None:
            return f"VerificationResult({self.failure.name})"
        return f"VerificationResult({self.failure.name}, index={self.index})"

    def to_dict(self):
        return {
            "valid": self.valid,
            "failure": self.failure.value if self.failure else None,
            "index": self.index,
        }
