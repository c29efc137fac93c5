import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from py_ecc import optimized_bls12_381 as bls12_381

from potau.accumulator import Accumulator, Parameters
from potau.config import CeremonyConfig
from potau.field import CURVE_ORDER, canonical, in_subgroup, is_identity
from potau.keypair import PrivateKey


# ── 테스트 상수 ──
SECRET_A = 252
SECRET_B = 512
SECRET_C = 789


@pytest.fixture
def serial_config():
    """단일 프로세스 설정 (병렬화 없음)."""
    return CeremonyConfig(workers=1)


@pytest.fixture
def small_params():
    """G2 원소도 3개라서 G2 구조 검사 루프까지 거치는 작은 파라미터."""
    return Parameters(5, 3)


@pytest.fixture(scope="module")
def three_updates():
    """세 참여자가 차례로 갱신한 KZG(6) 누적자와 중간 상태."""
    config = CeremonyConfig(workers=1)
    acc = Accumulator.new_for_kzg(6)
    states = [acc.clone()]
    proofs = []
    for secret in (SECRET_A, SECRET_B, SECRET_C):
        proofs.append(acc.update(PrivateKey.from_int(secret), config))
        states.append(acc.clone())
    return {"states": states, "proofs": proofs}


def _g1_curve_point_outside_subgroup():
    """y² = x³ + 4 위에 있지만 위수 r 부분군 밖에 있는 G1 점."""
    p = bls12_381.field_modulus
    x = 1
    while True:
        rhs = (x ** 3 + 4) % p
        y = pow(rhs, (p + 1) // 4, p)
        if y * y % p == rhs:
            point = (bls12_381.FQ(x), bls12_381.FQ(y), bls12_381.FQ(1))
            if not in_subgroup(point):
                return point
        x += 1


@pytest.fixture(scope="session")
def torsion_g1():
    """0이 아닌 G1 꼬임 점 T = r·R (위수가 여인수를 나눈다).

    페어링은 T 성분을 보지 못하므로 τ^i·G1 + T 는 페어링 검사를 통과한다.
    """
    R = _g1_curve_point_outside_subgroup()
    T = canonical(bls12_381.multiply(R, CURVE_ORDER))
    assert not is_identity(T)
    return T
