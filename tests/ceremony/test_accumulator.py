"""
Tests for the Accumulator: construction, update and verification.

Covers:
- Parameters validation, new / new_for_kzg (generator invariant)
- vandermonde_challenge
- update: anchor invariant, composition of secrets, parallel path, key reuse
- structure_check on valid and tampered SRS
- verify_update / verify_updates / check_updates failure variants
- Degenerate secrets 0 and 1
"""

import pytest

from potau.accumulator import Accumulator, Parameters, vandermonde_challenge
from potau.config import CeremonyConfig
from potau.errors import EmptyTranscriptError, KeyReuseError
from potau.field import FR, G1, G2, Z1, ec_mul, is_identity
from potau.keypair import PrivateKey, SeededScalarSource, random_key
from potau.update_proof import UpdateProof
from potau.verification import VerificationFailure


# ─────────────────────────────────────────────────────────────────────
# Construction
# ─────────────────────────────────────────────────────────────────────

class TestConstruction:
    """Accumulator.new / new_for_kzg 테스트."""

    def test_new_lengths(self, small_params):
        acc = Accumulator.new(small_params)
        assert len(acc.tau_g1) == 5
        assert len(acc.tau_g2) == 3

    def test_new_for_kzg_lengths(self):
        acc = Accumulator.new_for_kzg(100)
        assert len(acc.tau_g1) == 100
        assert len(acc.tau_g2) == 2

    def test_every_slot_is_generator(self, small_params):
        """Fresh accumulator represents tau = 1."""
        acc = Accumulator.new(small_params)
        assert all(p == G1 for p in acc.tau_g1)
        assert all(p == G2 for p in acc.tau_g2)

    def test_parameters_roundtrip(self, small_params):
        assert Accumulator.new(small_params).parameters == small_params

    @pytest.mark.parametrize("g1, g2", [(1, 2), (2, 1), (0, 0)])
    def test_parameters_too_small(self, g1, g2):
        with pytest.raises(ValueError):
            Parameters(g1, g2)

    def test_clone_is_independent(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        copy = acc.clone()
        acc.update(PrivateKey.from_int(5), serial_config)
        assert copy == Accumulator.new(small_params)
        assert copy != acc


class TestVandermondeChallenge:
    """vandermonde_challenge 테스트."""

    def test_powers(self):
        assert vandermonde_challenge(FR(2), 4) == [FR(2), FR(4), FR(8), FR(16)]

    def test_zero_length(self):
        assert vandermonde_challenge(FR(9), 0) == []

    def test_matches_exponentiation(self):
        x = FR(123456789)
        powers = vandermonde_challenge(x, 10)
        for i, p in enumerate(powers):
            assert p == x ** (i + 1)

    def test_accepts_int(self):
        assert vandermonde_challenge(3, 2) == [FR(3), FR(9)]


# ─────────────────────────────────────────────────────────────────────
# Update
# ─────────────────────────────────────────────────────────────────────

class TestUpdate:
    """Accumulator.update 테스트."""

    def test_elements_are_powers_of_secret(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(7), serial_config)
        for i, p in enumerate(acc.tau_g1):
            assert p == ec_mul(G1, 7 ** i)
        for i, p in enumerate(acc.tau_g2):
            assert p == ec_mul(G2, 7 ** i)

    def test_updates_compose(self, small_params, serial_config):
        """Two updates give tau = s1 * s2."""
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(3), serial_config)
        acc.update(PrivateKey.from_int(11), serial_config)
        for i, p in enumerate(acc.tau_g1):
            assert p == ec_mul(G1, 33 ** i)

    def test_anchor_never_changes(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        source = SeededScalarSource("anchor")
        for _ in range(3):
            acc.update(random_key(source), serial_config)
            assert acc.tau_g1[0] == G1
            assert acc.tau_g2[0] == G2

    def test_anchor_survives_zero_key(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(0), serial_config)
        assert acc.tau_g1[0] == G1
        assert all(is_identity(p) for p in acc.tau_g1[1:])

    def test_proof_contents(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        proof = acc.update(PrivateKey.from_int(5), serial_config)
        assert proof.new_accumulated_point == acc.tau_g1[1]
        assert proof.commitment_to_secret == ec_mul(G2, 5)

    def test_parallel_update_matches_serial(self, serial_config):
        params = Parameters(9, 3)
        serial = Accumulator.new(params)
        parallel = Accumulator.new(params)
        serial.update(PrivateKey.from_int(424242), serial_config)
        parallel.update(PrivateKey.from_int(424242),
                        CeremonyConfig(workers=3, parallel_threshold=0))
        assert parallel == serial

    def test_key_reuse_rejected(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        key = PrivateKey.from_int(5)
        acc.update(key, serial_config)
        before = acc.clone()
        with pytest.raises(KeyReuseError):
            acc.update(key, serial_config)
        assert acc == before


# ─────────────────────────────────────────────────────────────────────
# Structure check
# ─────────────────────────────────────────────────────────────────────

class TestStructureCheck:
    """structure_check 테스트."""

    def test_fresh_accumulator_passes(self, small_params):
        assert Accumulator.new(small_params).structure_check()

    def test_updated_accumulator_passes(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(99), serial_config)
        assert acc.structure_check()

    def test_independent_random_points_fail(self):
        source = SeededScalarSource("random points")
        acc = Accumulator(
            [G1] + [ec_mul(G1, source.next_scalar()) for _ in range(3)],
            [G2, ec_mul(G2, source.next_scalar())],
        )
        assert not acc.structure_check()

    def test_single_tampered_g1_element_fails(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(99), serial_config)
        acc.tau_g1[3] = ec_mul(G1, 12345)
        assert not acc.structure_check()

    def test_tampered_g2_element_fails(self, small_params, serial_config):
        acc = Accumulator.new(small_params)
        acc.update(PrivateKey.from_int(99), serial_config)
        acc.tau_g2[2] = ec_mul(G2, 12345)
        assert not acc.structure_check()


# ─────────────────────────────────────────────────────────────────────
# Ceremony verification
# ─────────────────────────────────────────────────────────────────────

class TestVerifyUpdate:
    """verify_update / check_updates 테스트."""

    def test_single_update_verifies(self, small_params, serial_config):
        before = Accumulator.new(small_params)
        after = before.clone()
        proof = after.update(random_key(SeededScalarSource(1)), serial_config)
        assert Accumulator.verify_update(before, after, proof)

    def test_three_updates_verify(self, three_updates):
        states = three_updates["states"]
        proofs = three_updates["proofs"]
        assert Accumulator.verify_updates(states[0], states[-1], proofs)

    def test_each_step_verifies_against_predecessor(self, three_updates):
        states = three_updates["states"]
        for i, proof in enumerate(three_updates["proofs"]):
            assert Accumulator.verify_update(states[i], states[i + 1], proof)

    def test_empty_transcript_raises(self, small_params):
        acc = Accumulator.new(small_params)
        with pytest.raises(EmptyTranscriptError):
            Accumulator.verify_updates(acc, acc, [])

    def test_start_mismatch(self, three_updates):
        states = three_updates["states"]
        proofs = three_updates["proofs"]
        result = Accumulator.check_updates(states[2], states[-1], proofs)
        assert result.failure is VerificationFailure.START_MISMATCH
        assert result.index == 0
        assert not result

    def test_end_mismatch(self, three_updates):
        states = three_updates["states"]
        proofs = three_updates["proofs"]
        result = Accumulator.check_updates(states[0], states[2], proofs)
        assert result.failure is VerificationFailure.END_MISMATCH

    def test_missing_middle_proof_breaks_chain(self, three_updates):
        states = three_updates["states"]
        proofs = three_updates["proofs"]
        result = Accumulator.check_updates(states[0], states[-1], [proofs[0], proofs[2]])
        assert result.failure is VerificationFailure.CHAIN_BROKEN
        assert result.index == 1

    def test_zero_degree_zero_element(self, small_params, serial_config):
        before = Accumulator.new(small_params)
        after = before.clone()
        proof = after.update(PrivateKey.from_int(77), serial_config)
        after.tau_g1[0] = Z1
        result = Accumulator.check_updates(before, after, [proof])
        assert result.failure is VerificationFailure.ZERO_COMMITMENT

    def test_scaled_generator_rejected(self):
        """0차 원소가 c·G1인 SRS는 모든 페어링 식을 만족해도 거부된다.

        tau_g1[i] = c·t^i·G1, tau_g2[i] = t^i·G2, c·t = s 로 만들면
        체인과 구조 검사를 모두 통과한다.
        """
        s, c = FR(1234), FR(5)
        t = s / c
        before = Accumulator.new(Parameters(4, 2))
        after = Accumulator(
            [ec_mul(G1, c * t ** i) for i in range(4)],
            [ec_mul(G2, t ** i) for i in range(2)],
        )
        proof = UpdateProof(ec_mul(G2, s), ec_mul(G1, s))
        assert proof.verify(before.tau_g1[1])
        assert after.structure_check()

        result = Accumulator.check_updates(before, after, [proof])
        assert result.failure is VerificationFailure.STRUCTURE_INVALID
        assert not Accumulator.verify_update(before, after, proof)

    def test_structure_invalid(self, small_params, serial_config):
        before = Accumulator.new(small_params)
        after = before.clone()
        proof = after.update(PrivateKey.from_int(77), serial_config)
        after.tau_g1[4] = ec_mul(G1, 31337)
        result = Accumulator.check_updates(before, after, [proof])
        assert result.failure is VerificationFailure.STRUCTURE_INVALID
        assert not Accumulator.verify_update(before, after, proof)

    def test_result_is_truthy_on_success(self, three_updates):
        states = three_updates["states"]
        result = Accumulator.check_updates(states[0], states[-1], three_updates["proofs"])
        assert result
        assert result.failure is None
        assert result.to_dict() == {"valid": True, "failure": None, "index": None}


class TestDegenerateSecrets:
    """비밀 값 0, 1 거부 테스트."""

    @pytest.mark.parametrize("secret", [0, 1])
    def test_kzg_rejects_degenerate_secret(self, secret, serial_config):
        before = Accumulator.new_for_kzg(100)
        after = before.clone()
        proof = after.update(PrivateKey.from_int(secret), serial_config)
        assert not Accumulator.verify_update(before, after, proof)

    @pytest.mark.parametrize("secret", [0, 1])
    def test_reported_as_degenerate(self, secret, small_params, serial_config):
        before = Accumulator.new(small_params)
        after = before.clone()
        proof = after.update(PrivateKey.from_int(secret), serial_config)
        result = Accumulator.check_updates(before, after, [proof])
        assert result.failure is VerificationFailure.DEGENERATE_SECRET
        assert result.index == 0

    def test_degenerate_after_honest_update(self, small_params, serial_config):
        """A later contributor using s = 1 is flagged at its own position."""
        before = Accumulator.new(small_params)
        after = before.clone()
        honest = after.update(PrivateKey.from_int(1234), serial_config)
        lazy = after.update(PrivateKey.from_int(1), serial_config)
        result = Accumulator.check_updates(before, after, [honest, lazy])
        assert result.failure is VerificationFailure.DEGENERATE_SECRET
        assert result.index == 1
