"""
세레모니 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB에 저장 가능한 형태(JSON)로 세레모니 객체를 변환한다.
Accumulator, UpdateProof, 트랜스크립트, G1/G2 점 표시용 축약 문자열.
"""

from potau.accumulator import Parameters
from potau.point_encoding import SubgroupCheck, g1_hex, g2_hex
from potau.serialisation import serialize, deserialize
from potau.update_proof import UpdateProof


# ─── Accumulator ───

def serialize_accumulator(acc):
    """Accumulator → dict (점 벡터는 16진수 바이트열)"""
    return {
        "g1_size": len(acc.tau_g1),
        "g2_size": len(acc.tau_g2),
        "points": serialize(acc).hex(),
    }


def deserialize_accumulator(data, check=SubgroupCheck.FULL):
    """dict → Accumulator"""
    params = Parameters(data["g1_size"], data["g2_size"])
    return deserialize(bytes.fromhex(data["points"]), params, check)


# ─── UpdateProof ───

def serialize_proof(proof):
    """UpdateProof → dict"""
    return {
        "commitment_to_secret": proof.commitment_hex(),
        "new_accumulated_point": g1_hex(proof.new_accumulated_point),
        "bytes": proof.to_hex(),
    }


def deserialize_proof(data):
    """dict → UpdateProof"""
    return UpdateProof.from_hex(data["bytes"])


# ─── Transcript ───

def serialize_transcript(proofs):
    """list[UpdateProof] → list[dict]"""
    return [serialize_proof(p) for p in proofs]


def deserialize_transcript(data):
    """list[dict] → list[UpdateProof]"""
    return [deserialize_proof(p) for p in data or []]


# ─── 표시용 헬퍼 ───

def _shorten(s):
    if len(s) <= 14:
        return s
    return s[:8] + "..." + s[-4:]


def g1_short(point):
    """G1 점 → 축약된 압축 16진수 (UI 표시용)"""
    return _shorten(g1_hex(point))


def g2_short(point):
    """G2 점 → 축약된 압축 16진수 (UI 표시용)"""
    return _shorten(g2_hex(point))
