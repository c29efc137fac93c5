"""
Powers of Tau 누적자 (Accumulator)
===================================

KZG용 SRS를 여러 참여자가 차례로 갱신하는 세레모니의 상태이다.

  tau_g1 = [G1, τ·G1, τ²·G1, ..., τ^(n1-1)·G1]
  tau_g2 = [G2, τ·G2, ..., τ^(n2-1)·G2]     (KZG에서는 n2 = 2)

**갱신 (update)**:
  참여자의 비밀 값 s에 대해 i번째 원소에 s^i를 곱한다.
      τ^i·G  →  (sτ)^i·G = s^i · (τ^i·G)
  0번째 원소(τ⁰ = 1)는 건드리지 않는다. 누적된 τ는 모든 참여자의
  비밀 값의 곱이므로, 한 명이라도 s를 폐기하면 아무도 τ를 알 수 없다.

**구조 검사 (structure_check)**:
  tau_g2[0] = G2, tau_g2[1] = τ·G2 이므로 쌍선형성에 의해
      e(τ^(i+1)·G1, G2) == e(τ^i·G1, τ·G2)
  가 모든 인접 쌍에서 성립하면 G1 벡터는 같은 τ의 연속 거듭제곱이다.
  G2 벡터도 tau_g1[0], tau_g1[1]을 기준으로 같은 방법으로 확인한다.

**세레모니 검증 (verify_updates)**:
  1. 첫 증명이 이전 SRS의 τ·G1에서 출발하는가
  2. 마지막 증명의 새 점이 최종 SRS의 τ·G1인가
  3. 증명 체인 전체가 연결되는가
  4. 최종 SRS의 0차 원소가 생성자 그대로인가 (항등원이면 ZERO_COMMITMENT)
  5. 최종 SRS의 모든 원소가 소수 위수 부분군에 있는가
  6. 최종 SRS가 구조 검사를 통과하는가

사용 예시:
    >>> before = Accumulator.new_for_kzg(100)
    >>> after = before.clone()
    >>> proof = after.update(random_key())
    >>> Accumulator.verify_update(before, after, proof)  # True
"""

from potau.config import CeremonyConfig
from potau.errors import EmptyTranscriptError
from potau.field import FR, G1, G2, ec_eq, in_subgroup, is_identity, pairing_check
from potau.log import get_logger
from potau.scalar_mul import batch_mul
from potau.shared_secret import check_link
from potau.update_proof import UpdateProof
from potau.verification import VerificationFailure, VerificationResult


logger = get_logger(__name__)

# KZG 커밋먼트에 필요한 G2 원소 수: [G2, τ·G2]
KZG_G2_ELEMENTS = 2


class Parameters:
    """누적자 벡터 길이.

    속성:
        num_g1_elements_needed: G1 원소 수 (≥ 2)
        num_g2_elements_needed: G2 원소 수 (≥ 2)
    """

    __slots__ = ("num_g1_elements_needed", "num_g2_elements_needed")

    def __init__(self, num_g1_elements_needed, num_g2_elements_needed):
        if num_g1_elements_needed < 2 or num_g2_elements_needed < 2:
            raise ValueError(
                "G1, G2 원소는 각각 2개 이상이어야 합니다: "
                f"g1={num_g1_elements_needed}, g2={num_g2_elements_needed}"
            )
        self.num_g1_elements_needed = num_g1_elements_needed
        self.num_g2_elements_needed = num_g2_elements_needed

    def __eq__(self, other):
        if not isinstance(other, Parameters):
            return NotImplemented
        return (self.num_g1_elements_needed == other.num_g1_elements_needed
                and self.num_g2_elements_needed == other.num_g2_elements_needed)

    def __hash__(self):
        return hash((self.num_g1_elements_needed, self.num_g2_elements_needed))

    def __repr__(self):
        return (f"Parameters(g1={self.num_g1_elements_needed}, "
                f"g2={self.num_g2_elements_needed})")


def vandermonde_challenge(x, n):
    """[x, x², ..., xⁿ]을 반복 곱셈으로 계산한다.

    Args:
        x: FR 원소
        n: 거듭제곱 개수 (0이면 빈 리스트)

    Returns:
        list[FR]

    예시:
        >>> vandermonde_challenge(FR(2), 4)
        [FR(2), FR(4), FR(8), FR(16)]
    """
    if not isinstance(x, FR):
        x = FR(x)
    challenges = []
    power = x
    for _ in range(n):
        challenges.append(power)
        power = power * x
    return challenges


class Accumulator:
    """SRS 상태: G1, G2 거듭제곱 벡터.

    속성:
        tau_g1: G1 점 리스트 (정규화된 표현)
        tau_g2: G2 점 리스트 (정규화된 표현)
    """

    def __init__(self, tau_g1, tau_g2):
        if len(tau_g1) < 2 or len(tau_g2) < 2:
            raise ValueError(
                f"G1, G2 원소는 각각 2개 이상이어야 합니다: g1={len(tau_g1)}, g2={len(tau_g2)}"
            )
        self.tau_g1 = list(tau_g1)
        self.tau_g2 = list(tau_g2)

    @classmethod
    def new(cls, parameters):
        """τ = 1 상태(모든 원소가 생성자)의 새 누적자를 만든다.

        BGM17 Groth16 세레모니와는 호환되지 않는다 (α, β 항이 없다).
        """
        return cls(
            [G1] * parameters.num_g1_elements_needed,
            [G2] * parameters.num_g2_elements_needed,
        )

    @classmethod
    def new_for_kzg(cls, num_coefficients):
        """KZG용 세레모니를 만든다.

        Args:
            num_coefficients: 커밋할 최고 차수 다항식의 계수 개수.
                              예: 2차 다항식 a + bx + cx² 은 3개.
        """
        return cls.new(Parameters(num_coefficients, KZG_G2_ELEMENTS))

    @property
    def parameters(self):
        return Parameters(len(self.tau_g1), len(self.tau_g2))

    def clone(self):
        return Accumulator(self.tau_g1, self.tau_g2)

    def __eq__(self, other):
        if not isinstance(other, Accumulator):
            return NotImplemented
        return self.tau_g1 == other.tau_g1 and self.tau_g2 == other.tau_g2

    def __repr__(self):
        return f"Accumulator(g1={len(self.tau_g1)}, g2={len(self.tau_g2)})"

    # ─────────────────────────────────────────────────────────────
    # 갱신
    # ─────────────────────────────────────────────────────────────

    def update(self, private_key, config=None):
        """비밀 키로 누적자를 갱신하고 업데이트 증명을 반환한다.

        갱신 전 τ·G1은 증명에 들어가지 않으므로, 단독으로 검증하려면
        호출자가 update 전에 tau_g1[1]을 보관해야 한다.

        Args:
            private_key: 사용되지 않은 PrivateKey
            config: CeremonyConfig (워커 수, wNAF 윈도우). 없으면 기본값.

        Returns:
            UpdateProof

        Raises:
            KeyReuseError: 이미 사용된 키일 때
        """
        if config is None:
            config = CeremonyConfig()

        tau = private_key.consume()
        logger.info("누적자 갱신 시작: g1=%d, g2=%d, workers=%d",
                    len(self.tau_g1), len(self.tau_g2), config.workers)
        self._update_accumulator(tau, config)
        logger.info("누적자 갱신 완료")

        return UpdateProof(
            commitment_to_secret=private_key.to_public(),
            new_accumulated_point=self.tau_g1[1],
        )

    def _update_accumulator(self, tau, config):
        max_number_elements = max(len(self.tau_g1), len(self.tau_g2))
        powers = vandermonde_challenge(tau, max_number_elements - 1)

        # 새 벡터를 모두 계산한 뒤 한 번에 교체한다
        new_g1 = [self.tau_g1[0]] + batch_mul(
            self.tau_g1[1:], powers[:len(self.tau_g1) - 1],
            window=config.wnaf_window,
            workers=config.workers,
            parallel_threshold=config.parallel_threshold,
        )
        new_g2 = [self.tau_g2[0]] + batch_mul(
            self.tau_g2[1:], powers[:len(self.tau_g2) - 1],
            window=config.wnaf_window,
            workers=config.workers,
            parallel_threshold=config.parallel_threshold,
        )
        self.tau_g1 = new_g1
        self.tau_g2 = new_g2

    # ─────────────────────────────────────────────────────────────
    # 검증
    # ─────────────────────────────────────────────────────────────

    def structure_check(self):
        """모든 원소가 같은 τ의 연속 거듭제곱인지 페어링으로 확인한다.

        O(n)번의 페어링 검사를 수행하며, 첫 실패에서 중단한다.

        Returns:
            bool
        """
        tau_g1_0, tau_g1_1 = self.tau_g1[0], self.tau_g1[1]
        tau_g2_0, tau_g2_1 = self.tau_g2[0], self.tau_g2[1]

        # G1: e(τ^(i+1)·G1, G2) == e(τ^i·G1, τ·G2)
        for i in range(len(self.tau_g1) - 1):
            if not pairing_check(self.tau_g1[i + 1], tau_g2_0, self.tau_g1[i], tau_g2_1):
                logger.debug("G1 구조 검사 실패: index=%d", i)
                return False

        # G2: e(G1, τ^(i+1)·G2) == e(τ·G1, τ^i·G2)
        for i in range(len(self.tau_g2) - 1):
            if not pairing_check(tau_g1_0, self.tau_g2[i + 1], tau_g1_1, self.tau_g2[i]):
                logger.debug("G2 구조 검사 실패: index=%d", i)
                return False

        return True

    @staticmethod
    def check_updates(before, after, update_proofs):
        """세레모니 전/후 SRS와 증명 트랜스크립트를 검증한다.

        Args:
            before: 세레모니 전 Accumulator
            after: 세레모니 후 Accumulator
            update_proofs: 순서대로 나열된 UpdateProof 리스트

        Returns:
            VerificationResult: 실패 원인과 (체인 실패 시) 증명 위치

        Raises:
            EmptyTranscriptError: update_proofs가 비어 있을 때
        """
        if not update_proofs:
            raise EmptyTranscriptError("업데이트 증명이 최소 하나 필요합니다")

        result = Accumulator._check_updates(before, after, list(update_proofs))
        if not result:
            logger.warning("세레모니 검증 실패: %r", result)
        return result

    @staticmethod
    def _check_updates(before, after, update_proofs):
        chain = UpdateProof.build_chain(before.tau_g1[1], update_proofs)
        links = chain.links

        # 1. 첫 증명이 이전 SRS에서 출발하는지 (첫 고리)
        first = check_link(*links[0])
        if first is not None:
            if first is VerificationFailure.CHAIN_BROKEN:
                first = VerificationFailure.START_MISMATCH
            return VerificationResult(first, 0)

        # 2. 마지막 증명이 최종 SRS에서 끝나는지
        if not ec_eq(after.tau_g1[1], update_proofs[-1].new_accumulated_point):
            return VerificationResult(VerificationFailure.END_MISMATCH, len(update_proofs) - 1)

        # 3. 나머지 고리
        for index in range(1, len(links)):
            failure = check_link(*links[index])
            if failure is not None:
                return VerificationResult(failure, index)

        # 4. 0차 원소는 생성자 그대로여야 한다.
        # 나머지 원소가 항등원이면 구조 검사에서 걸린다.
        if is_identity(after.tau_g1[0]) or is_identity(after.tau_g2[0]):
            return VerificationResult(VerificationFailure.ZERO_COMMITMENT)
        if not (ec_eq(after.tau_g1[0], G1) and ec_eq(after.tau_g2[0], G2)):
            return VerificationResult(VerificationFailure.STRUCTURE_INVALID)

        # 5. 모든 원소가 소수 위수 부분군에 있는지.
        # 페어링은 G1 점의 꼬임 성분을 보지 못하므로 구조 검사와 별도로 확인한다.
        for group, points in (("G1", after.tau_g1), ("G2", after.tau_g2)):
            for index, point in enumerate(points):
                if not in_subgroup(point):
                    logger.debug("부분군 밖의 원소: %s[%d]", group, index)
                    return VerificationResult(VerificationFailure.STRUCTURE_INVALID)

        # 6. 구조 검사
        if not after.structure_check():
            return VerificationResult(VerificationFailure.STRUCTURE_INVALID)

        return VerificationResult.ok()

    @staticmethod
    def verify_updates(before, after, update_proofs):
        """check_updates의 bool 버전."""
        return bool(Accumulator.check_updates(before, after, update_proofs))

    @staticmethod
    def verify_update(before, after, update_proof):
        """증명 하나짜리 트랜스크립트를 검증한다."""
        return Accumulator.verify_updates(before, after, [update_proof])
