"""
점 인코딩 (ZCash 압축 형식)
============================

G1 점은 48바이트, G2 점은 96바이트로 압축한다.
최상위 3비트는 플래그(압축, 무한원점, y 부호)이고 나머지는 x 좌표이다.
G2는 x = x_re + x_im·i 에서 (x_im 48바이트) || (x_re 48바이트) 순서이다.

디코딩은 점이 곡선 위에 있는지만 확인한다.
소수 위수 부분군 검사는 potau.serialisation에서 모드에 따라 수행한다.
"""

from enum import Enum

from py_ecc.bls.point_compression import (
    compress_G1,
    compress_G2,
    decompress_G1,
    decompress_G2,
)

from potau.errors import SerializationError
from potau.field import canonical


G1_SIZE = 48
G2_SIZE = 96


class SubgroupCheck(Enum):
    """역직렬화 시 부분군 검사 범위.

    FULL: 모든 점을 검사한다.
    PARTIAL: 모든 G2 점과 G1의 0차, 1차 원소만 검사한다.
      기여자가 갱신 전에 입력을 빠르게 확인하는 용도이다. 페어링은 G1 점의
      여인수 꼬임(torsion) 성분을 보지 못하므로, 2차 이상의 원소에 섞인
      부분군 밖의 성분은 구조 검사와 체인 검사를 통과한다.
      검증에 쓰는 누적자는 항상 FULL로 읽어야 한다.
    """
    FULL = "full"
    PARTIAL = "partial"

    @classmethod
    def parse(cls, value):
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"알 수 없는 부분군 검사 모드: {value}") from None


def encode_g1(point):
    """G1 점 → 48바이트."""
    return compress_G1(point).to_bytes(G1_SIZE, "big")


def decode_g1(data):
    """48바이트 → G1 점 (정규화된 표현).

    Raises:
        SerializationError: 길이가 틀리거나 곡선 위의 점이 아닐 때
    """
    if len(data) != G1_SIZE:
        raise SerializationError(f"G1 점은 {G1_SIZE}바이트여야 합니다: {len(data)}")
    try:
        point = decompress_G1(int.from_bytes(data, "big"))
    except ValueError as e:
        raise SerializationError(f"잘못된 G1 점: {e}") from e
    return canonical(point)


def encode_g2(point):
    """G2 점 → 96바이트."""
    z1, z2 = compress_G2(point)
    return z1.to_bytes(G1_SIZE, "big") + z2.to_bytes(G1_SIZE, "big")


def decode_g2(data):
    """96바이트 → G2 점 (정규화된 표현).

    Raises:
        SerializationError: 길이가 틀리거나 곡선 위의 점이 아닐 때
    """
    if len(data) != G2_SIZE:
        raise SerializationError(f"G2 점은 {G2_SIZE}바이트여야 합니다: {len(data)}")
    z1 = int.from_bytes(data[:G1_SIZE], "big")
    z2 = int.from_bytes(data[G1_SIZE:], "big")
    try:
        point = decompress_G2((z1, z2))
    except ValueError as e:
        raise SerializationError(f"잘못된 G2 점: {e}") from e
    return canonical(point)


def g1_hex(point):
    """G1 점 → "0x" 접두사의 16진수 문자열."""
    return "0x" + encode_g1(point).hex()


def g2_hex(point):
    """G2 점 → "0x" 접두사의 16진수 문자열."""
    return "0x" + encode_g2(point).hex()


def _strip_hex(text):
    if text.startswith("0x") or text.startswith("0X"):
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise SerializationError(f"16진수 문자열이 아닙니다: {e}") from e


def g1_from_hex(text):
    return decode_g1(_strip_hex(text))


def g2_from_hex(text):
    return decode_g2(_strip_hex(text))
