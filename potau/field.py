"""
Powers of Tau 기반 모듈: 스칼라 필드 및 BLS12-381 곡선 연산
=============================================================

세레모니 전체에서 사용되는 기본 대수적 도구를 정의한다.

**유한체 FR**:
  BLS12-381 곡선의 스칼라 필드 (위수 r ≈ 2^255).
  참여자의 비밀 값 s와 그 거듭제곱 [s, s², ...]이 이 필드의 원소이다.

**타원곡선 연산**:
  G1, G2 그룹 연산과 페어링. py_ecc의 optimized 모듈을 사용하므로
  점은 (x, y, z) 사영(projective) 좌표로 표현된다.
  같은 점이라도 z 값에 따라 좌표가 달라질 수 있으므로, 저장하기 전에는
  항상 canonical()로 z = 1 형태로 정규화한다. 그러면 튜플 비교(==)가
  점의 동치 비교와 같아진다.

**페어링 검사**:
  e(A, B) == e(C, D) 를 두 번의 Miller loop와 한 번의 최종 지수승으로
  확인한다: FE(ML(B, A) · ML(D, -C)) == 1

사용 예시:
    >>> from potau.field import FR, G1, G2, ec_mul, pairing_check
    >>> P = ec_mul(G1, FR(5))
    >>> pairing_check(P, G2, G1, ec_mul(G2, 5))  # True
"""

from py_ecc.fields import bls12_381_FQ as FQ
from py_ecc.bls.g2_primitives import subgroup_check
from py_ecc import optimized_bls12_381 as bls12_381


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """BLS12-381 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> s = FR(252)
        >>> s * s           # FR(63504)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bls12_381.curve_order


# 곡선 위수 (스칼라 필드 크기)
CURVE_ORDER = bls12_381.curve_order


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 연산
# ─────────────────────────────────────────────────────────────────────

# 그룹 생성자 (generator)
G1 = bls12_381.G1
G2 = bls12_381.G2

# 항등원 (point at infinity): z = 0
Z1 = bls12_381.Z1
Z2 = bls12_381.Z2

# 페어링 결과의 항등원
GT_ONE = bls12_381.FQ12.one()


def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point (정규화된 결과).

    대량의 원소를 곱할 때는 potau.scalar_mul.wnaf_mul을 사용한다.
    이 함수는 키 커밋먼트처럼 한 번만 계산하는 곱셈용이다.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    return canonical(bls12_381.multiply(point, scalar % CURVE_ORDER))


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2 (정규화된 결과)."""
    return canonical(bls12_381.add(p1, p2))


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    return canonical(bls12_381.neg(point))


def ec_eq(p1, p2):
    """사영 좌표와 무관한 점 동치 비교."""
    return bls12_381.eq(p1, p2)


def is_identity(point):
    """point가 항등원(무한원점)인지 확인한다."""
    return bls12_381.is_inf(point)


def canonical(point):
    """점을 z = 1 (항등원은 z = 0의 표준형) 형태로 정규화한다.

    Args:
        point: 사영 좌표 (x, y, z)의 G1 또는 G2 점

    Returns:
        같은 점의 표준 표현. 항등원이면 (1, 1, 0).

    예시:
        >>> P = bls12_381.double(G1)       # z != 1 일 수 있음
        >>> canonical(P) == ec_mul(G1, 2)  # True
    """
    one = point[0].one()
    if bls12_381.is_inf(point):
        return (one, one, point[0].zero())
    x, y = bls12_381.normalize(point)
    return (x, y, one)


def is_on_curve(point):
    """점이 해당 그룹의 곡선 방정식을 만족하는지 확인한다.

    G1 점의 좌표는 FQ, G2 점의 좌표는 FQ2이므로 좌표 타입으로 곡선을 고른다.
    """
    if isinstance(point[0], bls12_381.FQ2):
        return bls12_381.is_on_curve(point, bls12_381.b2)
    return bls12_381.is_on_curve(point, bls12_381.b)


def in_subgroup(point):
    """점이 위수 r의 소수 부분군에 속하는지 확인한다 (r · P == O)."""
    return subgroup_check(point)


# ─────────────────────────────────────────────────────────────────────
# 페어링 (Pairing)
# ─────────────────────────────────────────────────────────────────────

def pairing_check(g1_a, g2_a, g1_b, g2_b):
    """e(g1_a, g2_a) == e(g1_b, g2_b) 인지 확인한다.

    양변을 각각 계산하는 대신 e(g1_a, g2_a) · e(-g1_b, g2_b) == 1 을
    한 번의 최종 지수승으로 확인한다.

    Args:
        g1_a, g1_b: G1 점
        g2_a, g2_b: G2 점

    Returns:
        bool: 두 페어링 값이 같은지 여부

    예시:
        >>> # e(5·G1, G2) == e(G1, 5·G2)
        >>> pairing_check(ec_mul(G1, 5), G2, G1, ec_mul(G2, 5))  # True
    """
    lhs = bls12_381.pairing(g2_a, g1_a, final_exponentiate=False)
    rhs = bls12_381.pairing(g2_b, ec_neg(g1_b), final_exponentiate=False)
    return bls12_381.final_exponentiate(lhs * rhs) == GT_ONE
