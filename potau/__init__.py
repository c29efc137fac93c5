"""
Powers of Tau 세레모니
======================

KZG 다항식 커밋먼트용 SRS를 여러 참여자가 차례로 갱신하고,
그 과정을 공개 정보와 페어링만으로 검증한다.

사용 예시:
    >>> from potau import Accumulator, random_key
    >>> acc = Accumulator.new_for_kzg(16)
    >>> before = acc.clone()
    >>> proof = acc.update(random_key())
    >>> Accumulator.verify_update(before, acc, proof)  # True
"""

from potau.accumulator import Accumulator, Parameters, vandermonde_challenge
from potau.contribute import contribute
from potau.errors import (
    CeremonyError,
    EmptyTranscriptError,
    KeyReuseError,
    SerializationError,
    SubgroupCheckError,
)
from potau.keypair import (
    PrivateKey,
    ScalarSource,
    SeededScalarSource,
    SystemScalarSource,
    random_key,
)
from potau.point_encoding import SubgroupCheck
from potau.serialisation import deserialize, serialize
from potau.update_proof import UpdateProof
from potau.verification import VerificationFailure, VerificationResult
