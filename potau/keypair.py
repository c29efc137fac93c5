"""
참여자 비밀 키 (Private Key)
=============================

각 참여자는 하나의 비밀 스칼라 s("toxic waste")를 뽑아 SRS를 한 번 갱신하고
폐기해야 한다. 공개 커밋먼트 s·G2만 업데이트 증명에 남는다.

**난수원 주입**:
  키 생성은 전역 난수 상태 대신 ScalarSource 객체를 받는다.
  - SystemScalarSource: OS CSPRNG (secrets 모듈), 실제 기여용
  - SeededScalarSource: 시드 기반 결정론적 생성, 테스트용

  두 난수원 모두 퇴화 값 0과 1을 만들지 않는다.
  FR 필드 범위 [2, r-1]에서 스칼라를 뽑는다.

**일회성**:
  PrivateKey는 Accumulator.update에 한 번만 전달할 수 있다.
  두 번째 사용은 KeyReuseError를 일으킨다.

사용 예시:
    >>> key = random_key(SeededScalarSource(42))
    >>> commitment = key.to_public()   # s·G2
"""

import hashlib
import secrets

from potau.errors import KeyReuseError
from potau.field import FR, G2, CURVE_ORDER, ec_mul


class ScalarSource:
    """비밀 스칼라를 공급하는 인터페이스."""

    def next_scalar(self):
        """[2, r-1] 범위의 FR 원소를 반환한다."""
        raise NotImplementedError


class SystemScalarSource(ScalarSource):
    """운영체제 CSPRNG 기반 난수원."""

    def next_scalar(self):
        return FR(secrets.randbelow(CURVE_ORDER - 2) + 2)


class SeededScalarSource(ScalarSource):
    """SHA-256 카운터 모드의 결정론적 난수원 (테스트 전용).

    같은 시드는 항상 같은 스칼라 수열을 만든다.
    """

    def __init__(self, seed):
        self.seed = str(seed).encode()
        self.counter = 0

    def next_scalar(self):
        while True:
            h = hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
            self.counter += 1
            value = int.from_bytes(h, "big") % CURVE_ORDER
            if value > 1:
                return FR(value)


class PrivateKey:
    """참여자의 비밀 스칼라 τ 기여분.

    속성:
        tau: FR 원소 (비밀)
        consumed: update에 이미 사용되었는지 여부
    """

    def __init__(self, tau):
        if not isinstance(tau, FR):
            tau = FR(tau)
        self.tau = tau
        self.consumed = False

    @classmethod
    def from_int(cls, value):
        """정수에서 키를 만든다. 0과 1도 허용한다 (검증 실패 테스트용)."""
        return cls(FR(value))

    @classmethod
    def rand(cls, source=None):
        """난수원에서 새 키를 뽑는다. source가 없으면 SystemScalarSource."""
        if source is None:
            source = SystemScalarSource()
        return cls(source.next_scalar())

    def to_public(self):
        """공개 커밋먼트 s·G2를 반환한다."""
        return ec_mul(G2, self.tau)

    def consume(self):
        """키를 사용 처리하고 비밀 스칼라를 반환한다.

        Raises:
            KeyReuseError: 이미 사용된 키일 때
        """
        if self.consumed:
            raise KeyReuseError("이 비밀 키는 이미 업데이트에 사용되었습니다")
        self.consumed = True
        return self.tau

    def __repr__(self):
        return "PrivateKey(<hidden>)"


def random_key(source=None):
    """새 PrivateKey를 생성한다."""
    return PrivateKey.rand(source)
