"""
업데이트 증명 (Update Proof)
=============================

하나의 기여에 대한 간결한 증명서. 두 가지를 보인다:
  - 기여자가 비밀 값 s의 이산로그를 안다 (커밋먼트 s·G2)
  - s가 기존 점 A = τ·G1 을 새 점 A' = sτ·G1 로 갱신하는 데 쓰였다

이전 점 A는 증명에 포함하지 않는다. 검증할 때 바로 앞의 상태
(이전 증명의 새 점 또는 세레모니 전 SRS의 τ·G1)와 연결하여 복원한다.

**바이트 형식**: 압축 G2 커밋먼트(96) || 압축 G1 새 점(48) = 144바이트

사용 예시:
    >>> previous = acc.tau_g1[1]
    >>> proof = acc.update(key)
    >>> proof.verify(previous)                              # True
    >>> UpdateProof.verify_chain(start, [proof1, proof2])   # True
"""

from dataclasses import dataclass

from potau.errors import SerializationError, SubgroupCheckError
from potau.field import in_subgroup
from potau.point_encoding import (
    G1_SIZE, G2_SIZE,
    encode_g1, decode_g1, encode_g2, decode_g2, g2_hex,
)
from potau.shared_secret import SharedSecretChain, check_link


PROOF_SIZE = G2_SIZE + G1_SIZE


@dataclass(frozen=True)
class UpdateProof:
    """한 번의 SRS 갱신에 대한 증명.

    속성:
        commitment_to_secret: 비밀 값의 커밋먼트 s·G2
        new_accumulated_point: 갱신 후 SRS의 1차 원소 (sτ·G1)
    """

    commitment_to_secret: tuple
    new_accumulated_point: tuple

    def __hash__(self):
        return hash(self.to_bytes())

    def __repr__(self):
        return f"UpdateProof(commitment={self.commitment_hex()[:18]}...)"

    def verify(self, previous_point):
        """이전 점에서 이 증명의 새 점으로의 전이를 검증한다.

        e(A', G2) == e(A, C) 와 퇴화 기여 거부 정책을 함께 확인한다.

        Args:
            previous_point: 갱신 전 SRS의 1차 원소

        Returns:
            bool
        """
        return check_link(previous_point, self.new_accumulated_point,
                          self.commitment_to_secret) is None

    @staticmethod
    def verify_chain(starting_point, update_proofs):
        """증명 리스트를 왼쪽부터 접으며 체인 전체를 검증한다.

        Args:
            starting_point: 첫 증명의 이전 점 (세레모니 전 τ·G1)
            update_proofs: 순서대로 나열된 UpdateProof 리스트

        Returns:
            bool: 모든 고리가 성공하면 True (첫 실패에서 중단)
        """
        return UpdateProof.build_chain(starting_point, update_proofs).verify()

    @staticmethod
    def build_chain(starting_point, update_proofs):
        chain = SharedSecretChain.starting_from(starting_point)
        for update_proof in update_proofs:
            chain.extend(update_proof.new_accumulated_point,
                         update_proof.commitment_to_secret)
        return chain

    # ─── 인코딩 ───

    def commitment_hex(self):
        """커밋먼트를 "0x" 접두사의 압축 G2 16진수로 반환한다."""
        return g2_hex(self.commitment_to_secret)

    def to_bytes(self):
        return encode_g2(self.commitment_to_secret) + encode_g1(self.new_accumulated_point)

    @classmethod
    def from_bytes(cls, data):
        if len(data) != PROOF_SIZE:
            raise SerializationError(
                f"업데이트 증명은 {PROOF_SIZE}바이트여야 합니다: {len(data)}"
            )
        commitment = decode_g2(data[:G2_SIZE])
        new_point = decode_g1(data[G2_SIZE:])
        if not in_subgroup(commitment):
            raise SubgroupCheckError("G2", 0)
        if not in_subgroup(new_point):
            raise SubgroupCheckError("G1", 1)
        return cls(commitment, new_point)

    def to_hex(self):
        return "0x" + self.to_bytes().hex()

    @classmethod
    def from_hex(cls, text):
        if text.startswith("0x"):
            text = text[2:]
        try:
            data = bytes.fromhex(text)
        except ValueError as e:
            raise SerializationError(f"16진수 문자열이 아닙니다: {e}") from e
        return cls.from_bytes(data)
