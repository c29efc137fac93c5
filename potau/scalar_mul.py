"""
wNAF 스칼라 곱셈과 병렬 배치 곱셈
===================================

세레모니 업데이트는 SRS의 모든 원소(수만 개)에 서로 다른 스칼라를 곱한다.
원소 하나당 비용을 줄이기 위해 windowed NAF(wNAF)를 사용하고,
원소들 사이에는 공유 상태가 없으므로 여러 프로세스로 나누어 계산한다.

**wNAF (windowed Non-Adjacent Form)**:
  스칼라 k를 부호 있는 홀수 자릿수 {±1, ±3, ..., ±(2^(w-1)-1)}와 0으로
  표현한다. 0이 아닌 자릿수 사이에는 최소 w-1개의 0이 있으므로
  덧셈 횟수가 약 log(k)/(w+1)로 줄어든다.

  미리 계산: [P, 3P, 5P, ..., (2^(w-1)-1)P]
  평가: 최상위 자릿수부터 double 후 테이블 값을 더하거나 뺀다.

**인덱스 분할 병렬 맵**:
  [start, stop) 구간을 워커 수만큼의 연속된 부분 구간으로 나눈다.
  각 슬롯은 정확히 하나의 작업만 계산하고, 어떤 작업도 다른 작업의
  결과를 읽지 않으므로 동기화가 필요 없다.
  CPython의 GIL 때문에 스레드 대신 프로세스 풀을 사용한다.

사용 예시:
    >>> from potau.scalar_mul import wnaf_mul, batch_mul
    >>> P = wnaf_mul(G1, FR(7))
    >>> points = batch_mul([G1, G1], [FR(2), FR(3)], workers=2)
"""

from concurrent.futures import ProcessPoolExecutor

from potau.field import FR, CURVE_ORDER, canonical
from py_ecc import optimized_bls12_381 as bls12_381


DEFAULT_WINDOW = 3


def wnaf_digits(scalar, window=DEFAULT_WINDOW):
    """스칼라의 wNAF 자릿수를 최하위부터 반환한다.

    Args:
        scalar: 음이 아닌 정수
        window: 윈도우 크기 w (≥ 2)

    Returns:
        list[int]: 자릿수 리스트. 각 원소는 0 또는 |d| < 2^(w-1)인 홀수.

    예시:
        >>> wnaf_digits(7, 3)  # 7 = 8 - 1
        [-1, 0, 0, 1]
    """
    if window < 2:
        raise ValueError(f"wNAF 윈도우는 2 이상이어야 합니다: {window}")

    width = 1 << window
    half = width >> 1
    digits = []
    while scalar > 0:
        if scalar & 1:
            digit = scalar & (width - 1)
            if digit >= half:
                digit -= width
            scalar -= digit
        else:
            digit = 0
        digits.append(digit)
        scalar >>= 1
    return digits


def wnaf_mul(point, scalar, window=DEFAULT_WINDOW):
    """wNAF로 scalar · point를 계산한다.

    Args:
        point: G1 또는 G2 위의 점
        scalar: 정수 또는 FR 원소 (CURVE_ORDER로 축소됨)
        window: 윈도우 크기

    Returns:
        scalar · point (정규화된 표현)
    """
    if isinstance(scalar, FR):
        scalar = int(scalar)
    scalar %= CURVE_ORDER

    one = point[0].one()
    result = (one, one, point[0].zero())
    if scalar == 0 or bls12_381.is_inf(point):
        return result

    # 홀수 배수 테이블: table[j] = (2j + 1) · P
    table = [point]
    doubled = bls12_381.double(point)
    for _ in range((1 << (window - 2)) - 1):
        table.append(bls12_381.add(table[-1], doubled))

    for digit in reversed(wnaf_digits(scalar, window)):
        result = bls12_381.double(result)
        if digit > 0:
            result = bls12_381.add(result, table[digit >> 1])
        elif digit < 0:
            result = bls12_381.add(result, bls12_381.neg(table[(-digit) >> 1]))

    return canonical(result)


# ─────────────────────────────────────────────────────────────────────
# 인덱스 분할 병렬 맵
# ─────────────────────────────────────────────────────────────────────

def partition(length, parts):
    """[0, length)를 최대 parts개의 서로소인 연속 구간으로 나눈다.

    Args:
        length: 전체 원소 수
        parts: 원하는 구간 수 (워커 수)

    Returns:
        list[tuple[int, int]]: (start, stop) 구간 리스트. 빈 구간은 없다.

    예시:
        >>> partition(10, 3)
        [(0, 4), (4, 7), (7, 10)]
    """
    if length <= 0:
        return []
    parts = max(1, min(parts, length))
    size, extra = divmod(length, parts)
    ranges = []
    start = 0
    for i in range(parts):
        stop = start + size + (1 if i < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def _mul_range(points, scalars, window):
    """워커 프로세스에서 실행되는 구간 곱셈."""
    return [wnaf_mul(p, s, window) for p, s in zip(points, scalars)]


def batch_mul(points, scalars, window=DEFAULT_WINDOW, workers=1, parallel_threshold=0):
    """points[i] · scalars[i]를 모든 i에 대해 계산한다.

    원소 수가 parallel_threshold 이상이고 workers > 1이면 인덱스 구간을
    나누어 프로세스 풀에서 계산한다. 결과의 순서는 입력과 같다.

    Args:
        points: 점 리스트
        scalars: 같은 길이의 스칼라 리스트 (int 또는 FR)
        window: wNAF 윈도우 크기
        workers: 워커 프로세스 수
        parallel_threshold: 병렬화를 시작하는 최소 원소 수

    Returns:
        list: 곱셈 결과 점 리스트 (새 리스트, 입력은 변경하지 않음)
    """
    if len(points) != len(scalars):
        raise ValueError(
            f"점 개수 {len(points)}와 스칼라 개수 {len(scalars)}가 다릅니다"
        )

    scalars = [int(s) if isinstance(s, FR) else s for s in scalars]
    if workers <= 1 or len(points) < max(parallel_threshold, 2):
        return _mul_range(points, scalars, window)

    ranges = partition(len(points), workers)
    results = [None] * len(points)
    with ProcessPoolExecutor(max_workers=len(ranges)) as pool:
        futures = {
            pool.submit(_mul_range, points[start:stop], scalars[start:stop], window): start
            for start, stop in ranges
        }
        for future, start in futures.items():
            chunk = future.result()
            results[start:start + len(chunk)] = chunk
    return results
