"""
공유 비밀 체인 (Shared Secret Chain)
=====================================

업데이트 증명들을 하나의 사슬로 연결하여 검증한다.

**한 고리(link)의 검사**:
  이전 점 A, 새 점 A', 커밋먼트 C = s·G2 에 대해
      e(A', G2) == e(A, C)
  가 성립하면 A' = s·A 이다. s 자체는 공개되지 않는다.

**체인**:
  앵커(anchor)는 시작 점(세레모니 전 τ·G1)에서 출발한다.
  extend()가 호출될 때마다 (앵커, 새 점, 커밋먼트) 고리를 추가하고
  앵커를 새 점으로 옮긴다. 따라서 증명의 순서를 바꾸거나 하나를
  다른 것으로 바꾸면 바로 인접한 고리의 페어링 검사가 깨진다.

**퇴화 기여 거부**:
  s = 0 이면 A' = O 이고 C = O 이므로 e(O, G2) = e(A, O) = 1 이 되어
  페어링 검사가 그대로 통과한다. s = 1 이면 A' = A, C = G2 이므로 역시
  통과한다. 그래서 페어링과 별도로 다음 고리를 명시적으로 거부한다:
    - C가 G2 항등원 (s = 0)
    - C가 G2 생성자 (s = 1)
    - A'가 G1 항등원
    - A' == A (점이 변하지 않음)
"""

from potau.field import G2, ec_eq, is_identity, pairing_check
from potau.verification import VerificationFailure


def check_link(previous_point, new_point, witness):
    """한 고리를 검사하고 실패 종류를 반환한다 (성공이면 None).

    Args:
        previous_point: 이전 τ·G1 (앵커)
        new_point: 갱신된 τ·G1
        witness: 비밀 값의 커밋먼트 s·G2

    Returns:
        VerificationFailure 또는 None
    """
    if is_identity(witness) or ec_eq(witness, G2):
        return VerificationFailure.DEGENERATE_SECRET
    if is_identity(new_point) or ec_eq(new_point, previous_point):
        return VerificationFailure.DEGENERATE_SECRET
    if not pairing_check(new_point, G2, previous_point, witness):
        return VerificationFailure.CHAIN_BROKEN
    return None


class SharedSecretChain:
    """업데이트 증명 체인의 검증 상태.

    속성:
        start: 시작 점
        anchor: 현재 앵커 (마지막으로 추가된 새 점)
        links: [(이전 점, 새 점, 커밋먼트), ...]
    """

    def __init__(self, starting_point):
        self.start = starting_point
        self.anchor = starting_point
        self.links = []

    @classmethod
    def starting_from(cls, starting_point):
        return cls(starting_point)

    def extend(self, new_point, witness):
        """새 점과 그 전이를 증언하는 커밋먼트를 체인에 추가한다."""
        self.links.append((self.anchor, new_point, witness))
        self.anchor = new_point

    def first_failure(self):
        """앞에서부터 고리를 검사하여 처음 실패한 (위치, 종류)를 반환한다.

        Returns:
            tuple[int, VerificationFailure] 또는 None (모두 성공)
        """
        for index, (previous_point, new_point, witness) in enumerate(self.links):
            failure = check_link(previous_point, new_point, witness)
            if failure is not None:
                return index, failure
        return None

    def verify(self):
        return self.first_failure() is None
