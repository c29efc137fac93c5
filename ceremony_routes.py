"""
세레모니 Flask Blueprint
=========================

하나의 세레모니 상태(초기 SRS, 현재 SRS, 업데이트 증명 트랜스크립트)를
TinyDB에 보관하고, 기여와 검증을 HTTP로 제공한다.
누가 언제 기여하는지 조정하지는 않는다.
현재 SRS와 트랜스크립트는 한 레코드("ceremony.state")에 함께 저장하고,
상태를 바꾸는 요청은 STATE_LOCK으로 한 번에 하나씩 처리한다.

  POST /ceremony/new               새 세레모니 (τ = 1)
  GET  /ceremony/state             현재 상태 요약
  POST /ceremony/contribute        서버에서 비밀 값을 뽑아 한 번 갱신
  GET  /ceremony/transcript        업데이트 증명 목록
  POST /ceremony/verify            초기/현재 SRS와 트랜스크립트 검증
  POST /ceremony/contribute/raw    SRS 바이트열 → 갱신된 SRS 바이트열
  POST /ceremony/clear             세레모니 삭제
"""

import threading

from flask import Blueprint, Response, jsonify, request
from tinydb import Query

from potau.accumulator import Accumulator, Parameters
from potau.config import CeremonyConfig
from potau.contribute import contribute
from potau.errors import CeremonyError
from potau.keypair import random_key
from potau.log import get_logger
from potau.point_encoding import SubgroupCheck

from ceremony_serializers import (
    serialize_accumulator, deserialize_accumulator,
    serialize_proof,
    serialize_transcript, deserialize_transcript,
    g1_short, g2_short,
)

ceremony_bp = Blueprint('ceremony', __name__, url_prefix='/ceremony')

DATA = Query()
logger = get_logger("routes")

# DB와 설정은 app.py에서 주입
DB = None
CONFIG = CeremonyConfig()

# 상태를 읽고 갱신해서 쓰는 요청은 한 번에 하나씩
STATE_LOCK = threading.Lock()


def init_ceremony_bp(db, config=None):
    """app.py에서 DB와 설정을 주입받는다."""
    global DB, CONFIG
    DB = db
    if config is not None:
        CONFIG = config


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


def request_params():
    """JSON 본문 또는 폼 데이터를 dict로 반환한다."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValueError("요청 본문은 JSON 객체여야 합니다")
    return data


def load_ceremony(check=SubgroupCheck.FULL):
    """(초기 SRS, 현재 SRS, 트랜스크립트)를 읽는다. 세레모니가 없으면 None.

    검증에 쓰는 상태는 FULL 부분군 검사로 읽는다.
    """
    initial = db_get("ceremony.initial")
    state = db_get("ceremony.state")
    if initial is None or state is None:
        return None
    return (
        deserialize_accumulator(initial, SubgroupCheck.FULL),
        deserialize_accumulator(state["current"], check),
        deserialize_transcript(state["transcript"]),
    )


def save_state(current, transcript):
    """현재 SRS와 트랜스크립트를 한 번의 upsert로 저장한다."""
    db_set("ceremony.state", {
        "current": serialize_accumulator(current),
        "transcript": serialize_transcript(transcript),
    })


def state_summary(acc, transcript):
    return {
        "g1_size": len(acc.tau_g1),
        "g2_size": len(acc.tau_g2),
        "tau_g1_1": g1_short(acc.tau_g1[1]),
        "tau_g2_1": g2_short(acc.tau_g2[1]),
        "contributions": len(transcript),
    }


@ceremony_bp.errorhandler(CeremonyError)
@ceremony_bp.errorhandler(ValueError)
def handle_ceremony_error(e):
    logger.warning("요청 실패: %s", e)
    return jsonify({"error": str(e)}), 400


def no_ceremony():
    return jsonify({"error": "세레모니가 없습니다. 먼저 /ceremony/new 를 호출하세요"}), 404


# ──────────────────────────────────────────────────────────────
# 세레모니 상태
# ──────────────────────────────────────────────────────────────

@ceremony_bp.route("/new", methods=["POST"])
def ceremony_new():
    """새 세레모니를 만든다. num_coefficients 또는 g1_size/g2_size."""
    params = request_params()
    if "num_coefficients" in params:
        acc = Accumulator.new_for_kzg(int(params["num_coefficients"]))
    else:
        acc = Accumulator.new(Parameters(int(params.get("g1_size", 0)),
                                         int(params.get("g2_size", 2))))

    with STATE_LOCK:
        db_remove_prefix("ceremony.")
        db_set("ceremony.initial", serialize_accumulator(acc))
        save_state(acc, [])
    logger.info("새 세레모니: %r", acc)

    return jsonify(state_summary(acc, [])), 201


@ceremony_bp.route("/state")
def ceremony_state():
    """현재 상태 요약."""
    loaded = load_ceremony(CONFIG.subgroup_check)
    if loaded is None:
        return no_ceremony()
    _, current, transcript = loaded
    return jsonify(state_summary(current, transcript))


@ceremony_bp.route("/clear", methods=["POST"])
def ceremony_clear():
    with STATE_LOCK:
        db_remove_prefix("ceremony.")
    return jsonify({"cleared": True})


# ──────────────────────────────────────────────────────────────
# 기여
# ──────────────────────────────────────────────────────────────

@ceremony_bp.route("/contribute", methods=["POST"])
def ceremony_contribute():
    """서버에서 새 비밀 값을 뽑아 현재 SRS를 갱신한다.

    읽기, 갱신, 저장이 STATE_LOCK 안에서 이루어지므로 동시에 들어온 기여는
    차례로 적용되고 어느 것도 덮어써지지 않는다.
    """
    with STATE_LOCK:
        loaded = load_ceremony(CONFIG.subgroup_check)
        if loaded is None:
            return no_ceremony()
        _, current, transcript = loaded

        previous = current.tau_g1[1]
        proof = current.update(random_key(), CONFIG)
        if not proof.verify(previous):
            # 정상적인 키로는 일어나지 않는다
            return jsonify({"error": "생성된 업데이트 증명이 검증되지 않습니다"}), 500

        transcript.append(proof)
        save_state(current, transcript)

    return jsonify({
        "index": len(transcript) - 1,
        "proof": serialize_proof(proof),
        "state": state_summary(current, transcript),
    })


@ceremony_bp.route("/contribute/raw", methods=["POST"])
def ceremony_contribute_raw():
    """SRS 바이트열을 받아 갱신된 SRS 바이트열을 돌려준다 (상태 저장 없음)."""
    g1_size = request.args.get("g1_size", type=int)
    g2_size = request.args.get("g2_size", type=int)
    if g1_size is None or g2_size is None:
        return jsonify({"error": "g1_size와 g2_size가 필요합니다"}), 400

    updated = contribute(request.get_data(), g1_size, g2_size, config=CONFIG)
    return Response(updated, mimetype="application/octet-stream")


# ──────────────────────────────────────────────────────────────
# 검증
# ──────────────────────────────────────────────────────────────

@ceremony_bp.route("/transcript")
def ceremony_transcript():
    """업데이트 증명 목록."""
    state = db_get("ceremony.state")
    return jsonify(state["transcript"] if state else [])


@ceremony_bp.route("/verify", methods=["POST"])
def ceremony_verify():
    """초기 SRS, 현재 SRS, 트랜스크립트 전체를 검증한다."""
    loaded = load_ceremony()
    if loaded is None:
        return no_ceremony()
    initial, current, transcript = loaded

    result = Accumulator.check_updates(initial, current, transcript)
    return jsonify(result.to_dict())
