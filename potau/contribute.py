"""
단일 기여 진입점
================

현재 SRS 바이트열을 받아 새 비밀 값으로 갱신한 SRS 바이트열을 돌려준다.

  역직렬화 (PARTIAL 부분군 검사) → 키 생성 → update → 직렬화

어느 단계든 실패하면 예외를 그대로 올려 작업 전체를 중단한다.
일부만 갱신된 바이트열은 절대 반환하지 않는다.
비밀 키는 이 함수 안에서만 존재하고 반환되지 않는다.
"""

import time

from potau.accumulator import Accumulator, Parameters
from potau.config import CeremonyConfig
from potau.keypair import random_key
from potau.log import get_logger
from potau.point_encoding import SubgroupCheck
from potau.serialisation import deserialize, serialize


logger = get_logger(__name__)


def contribute_with_proof(points, g1_size, g2_size, source=None, config=None):
    """contribute()와 같지만 업데이트 증명도 함께 반환한다.

    Returns:
        tuple[bytes, UpdateProof]: (갱신된 SRS 바이트열, 증명)
    """
    if config is None:
        config = CeremonyConfig()

    params = Parameters(g1_size, g2_size)
    logger.info("기여 시작: g1_size=%d, g2_size=%d", g1_size, g2_size)

    accumulator = deserialize(points, params, config.subgroup_check)

    logger.debug("비밀 값 생성")
    private_key = random_key(source)

    logger.debug("갱신")
    update_proof = accumulator.update(private_key, config)

    logger.debug("직렬화")
    return serialize(accumulator), update_proof


def contribute(points, g1_size, g2_size, source=None, config=None):
    """SRS 바이트열에 새 기여를 적용한다.

    Args:
        points: 현재 SRS 바이트열
        g1_size: G1 원소 수
        g2_size: G2 원소 수
        source: ScalarSource (없으면 OS 난수)
        config: CeremonyConfig

    Returns:
        bytes: 갱신된 SRS

    Raises:
        SerializationError, SubgroupCheckError: 입력 SRS가 잘못되었을 때
    """
    updated, _ = contribute_with_proof(points, g1_size, g2_size, source, config)
    return updated


def write_new(path, num_coefficients):
    """τ = 1 상태의 KZG 세레모니 파일을 만든다."""
    data = serialize(Accumulator.new_for_kzg(num_coefficients))
    with open(path, "wb") as f:
        f.write(data)
    logger.info("새 세레모니 파일 작성: %s (%d바이트)", path, len(data))
    return len(data)


def benchmark_update(num_g1_elements, num_g2_elements=2, source=None, config=None):
    """역직렬화 → 갱신 → 직렬화 한 번의 소요 시간(초)을 잰다."""
    params = Parameters(num_g1_elements, num_g2_elements)
    data = serialize(Accumulator.new(params))

    start = time.perf_counter()
    accumulator = deserialize(data, params, SubgroupCheck.PARTIAL)
    accumulator.update(random_key(source), config)
    serialize(accumulator)
    elapsed = time.perf_counter() - start

    logger.info("갱신 벤치마크: g1=%d, %.3f초", num_g1_elements, elapsed)
    return elapsed
