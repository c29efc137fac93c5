"""
누적자 직렬화/역직렬화
======================

**바이트 배치**:
  [G1 압축 48바이트] × n1  ||  [G2 압축 96바이트] × n2

역직렬화는 선언된 Parameters와 길이가 정확히 맞아야 하며,
모든 점이 곡선 위에 있는지 확인한 뒤 SubgroupCheck 모드에 따라
소수 위수 부분군 검사를 수행한다. 부분군 밖의 점은 이후 모든 페어링
검사의 건전성을 깨뜨리므로 조용히 넘어가지 않고 예외를 던진다.
오류가 나면 일부만 복원된 누적자를 돌려주지 않는다.

사용 예시:
    >>> data = serialize(acc)
    >>> deserialize(data, acc.parameters, SubgroupCheck.FULL) == acc  # True
"""

from potau.accumulator import Accumulator
from potau.errors import SerializationError, SubgroupCheckError
from potau.field import in_subgroup
from potau.point_encoding import (
    G1_SIZE, G2_SIZE, SubgroupCheck,
    encode_g1, decode_g1, encode_g2, decode_g2,
)

# PARTIAL 모드에서 부분군 검사를 하는 G1 원소 (0차, 1차). 기여자 측 단축 검사이다.
PARTIAL_G1_CHECKED = 2


def serialized_size(parameters):
    """Parameters에 해당하는 직렬화 바이트 수."""
    return (parameters.num_g1_elements_needed * G1_SIZE
            + parameters.num_g2_elements_needed * G2_SIZE)


def serialize(accumulator):
    """Accumulator → bytes."""
    out = bytearray()
    for point in accumulator.tau_g1:
        out.extend(encode_g1(point))
    for point in accumulator.tau_g2:
        out.extend(encode_g2(point))
    return bytes(out)


def deserialize(data, parameters, check=SubgroupCheck.FULL):
    """bytes → Accumulator.

    Args:
        data: serialize()가 만든 바이트열
        parameters: 기대하는 벡터 길이
        check: SubgroupCheck.FULL 또는 SubgroupCheck.PARTIAL

    Returns:
        Accumulator

    Raises:
        SerializationError: 길이 불일치, 곡선 위의 점이 아님
        SubgroupCheckError: 소수 위수 부분군 밖의 점
    """
    expected = serialized_size(parameters)
    if len(data) != expected:
        raise SerializationError(
            f"SRS 바이트 길이가 {parameters}와 맞지 않습니다: "
            f"기대 {expected}, 실제 {len(data)}"
        )

    n1 = parameters.num_g1_elements_needed
    n2 = parameters.num_g2_elements_needed

    tau_g1 = []
    for i in range(n1):
        point = decode_g1(data[i * G1_SIZE:(i + 1) * G1_SIZE])
        if _must_check(check, "G1", i) and not in_subgroup(point):
            raise SubgroupCheckError("G1", i)
        tau_g1.append(point)

    offset = n1 * G1_SIZE
    tau_g2 = []
    for i in range(n2):
        start = offset + i * G2_SIZE
        point = decode_g2(data[start:start + G2_SIZE])
        if _must_check(check, "G2", i) and not in_subgroup(point):
            raise SubgroupCheckError("G2", i)
        tau_g2.append(point)

    return Accumulator(tau_g1, tau_g2)


def _must_check(check, group, index):
    if check is SubgroupCheck.FULL or group == "G2":
        return True
    return index < PARTIAL_G1_CHECKED
