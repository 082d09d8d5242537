"""
Tests for replay code encoding/decoding across legacy, v1 and v2 formats.
"""

import pytest

from drills import replay_code
from drills.replay_code import CodeVersion, InvalidReplayCode, checksum, decode, encode, parse
from drills.session_config import (
    Boundaries,
    Feedback,
    InputMethod,
    JoystickSensitivity,
    PlayerTrail,
    SessionConfig,
    TargetCounts,
    TargetSize,
)

DEFAULT_V2 = "500001300601100012121"
DEFAULT_V1 = "5000013006011017"
DEFAULT_LEGACY = "50000130060110"


def rich_config() -> SessionConfig:
    return SessionConfig(
        target_counts=TargetCounts(stationary=3, moving=2, flee=1, bonus=4, hazard=2),
        target_size=TargetSize.EXTRA_LARGE,
        player_speed=5,
        player_trail=PlayerTrail.OFF,
        input_method=InputMethod.JOYSTICK,
        input_buffer=150,
        boundaries=Boundaries.HARD,
        feedback=Feedback(audio=False, visual=True, haptic=True),
        calm_mode=True,
        dwell_mode=True,
        dwell_time=2000,
        joystick_deadzone=25,
        joystick_sensitivity=JoystickSensitivity.HIGH,
    )


class TestEncode:
    def test_default_config_v2(self) -> None:
        code = encode(SessionConfig(), version="v2")
        assert code == DEFAULT_V2
        assert len(code) == 21
        assert code[-2] == "2"
        assert code[-1] == checksum(code[:-2])

    def test_default_config_v1_and_legacy(self) -> None:
        assert encode(SessionConfig(), version="v1") == DEFAULT_V1
        assert encode(SessionConfig(), version=CodeVersion.LEGACY) == DEFAULT_LEGACY

    def test_checksum_is_digit_sum_mod_10(self) -> None:
        assert checksum("5000013006011000121") == "1"
        assert checksum("99") == "8"
        assert checksum("0000") == "0"

    def test_counts_and_buffer_are_clamped_to_one_digit(self) -> None:
        config = SessionConfig(target_counts=TargetCounts(stationary=12, hazard=-3), input_buffer=1000)
        payload = replay_code.encode_payload(config, CodeVersion.V2)
        assert payload[0] == "9"
        assert payload[4] == "0"
        assert payload[9] == "9"

    def test_dwell_time_rounds_to_nearest_step(self) -> None:
        config = SessionConfig(dwell_time=1250, joystick_deadzone=13)
        decoded = parse(encode(config, version="v2"))
        assert decoded.dwell_time == 1500
        assert decoded.joystick_deadzone == 15

    def test_value_older_version_cannot_carry_uses_first_entry(self) -> None:
        config = SessionConfig(player_trail=PlayerTrail.OFF, input_method=InputMethod.JOYSTICK)
        decoded = parse(encode(config, version="v1"))
        assert decoded.player_trail is PlayerTrail.SHORT
        assert decoded.input_method is InputMethod.DISCRETE


class TestParse:
    def test_v2_round_trip_keeps_every_field(self) -> None:
        config = rich_config()
        code = encode(config, version="v2")
        decoded = parse(code)
        assert decoded.seed == code
        assert decoded.same_layout(config)

    def test_default_v2_decodes_with_v2_defaults(self) -> None:
        decoded = parse(DEFAULT_V2)
        assert decoded.target_counts == TargetCounts(stationary=5)
        assert decoded.target_size is TargetSize.MEDIUM
        assert decoded.player_speed == 3
        assert decoded.input_buffer == 300
        assert decoded.feedback == Feedback(audio=True, visual=True, haptic=False)
        assert decoded.calm_mode is False
        assert decoded.dwell_mode is False
        assert decoded.dwell_time == 1000
        assert decoded.joystick_deadzone == 15
        assert decoded.joystick_sensitivity is JoystickSensitivity.MEDIUM

    def test_v1_fills_v2_defaults(self) -> None:
        config = rich_config()
        decoded = parse(encode(config, version="v1"))
        assert decoded.target_counts == config.target_counts
        assert decoded.calm_mode is False
        assert decoded.dwell_mode is False
        assert decoded.dwell_time == 1000
        assert decoded.joystick_deadzone == 15
        assert decoded.joystick_sensitivity is JoystickSensitivity.MEDIUM

    def test_legacy_code_decodes_per_table(self) -> None:
        decoded = parse("50003130003000")
        assert decoded.target_counts == TargetCounts(stationary=5, hazard=3)
        assert decoded.target_size is TargetSize.MEDIUM
        assert decoded.player_speed == 3
        assert decoded.player_trail is PlayerTrail.SHORT
        assert decoded.input_method is InputMethod.DISCRETE
        assert decoded.input_buffer == 0
        # Unknown boundaries digit falls back instead of failing.
        assert decoded.boundaries is Boundaries.NONE
        assert decoded.feedback == Feedback(audio=False, visual=False, haptic=False)

    def test_legacy_speed_zero_defaults_to_three(self) -> None:
        assert parse("50000100000000").player_speed == 3
        assert parse("50000190000000").player_speed == 5

    def test_legacy_code_has_no_checksum(self) -> None:
        # Any 14 digits are accepted.
        assert decode("99999999999999") is not None

    @pytest.mark.parametrize("position", range(21))
    def test_single_digit_change_is_rejected(self, position) -> None:
        digits = list(DEFAULT_V2)
        digits[position] = str((int(digits[position]) + 1) % 10)
        assert decode("".join(digits)) is None

    def test_wrong_version_digit(self) -> None:
        with pytest.raises(InvalidReplayCode, match="version digit"):
            parse("5000013006011000121" + "1" + "1")

    @pytest.mark.parametrize("bad", ["", "   ", "12345", "5000013006011000121a1", "50000-13006"])
    def test_malformed_codes(self, bad) -> None:
        with pytest.raises(InvalidReplayCode):
            parse(bad)
        assert decode(bad) is None
        assert replay_code.is_valid(bad) is False

    def test_v2_rejects_out_of_range_speed_even_with_valid_checksum(self) -> None:
        payload = "5000010006011000121"
        code = payload + "2" + checksum(payload)
        with pytest.raises(InvalidReplayCode, match="speed"):
            parse(code)

    def test_v2_rejects_out_of_range_enum_digit(self) -> None:
        payload = "5000083006011000121"  # size digit 8
        code = payload + "2" + checksum(payload)
        with pytest.raises(InvalidReplayCode, match="size"):
            parse(code)

    def test_error_carries_reason(self) -> None:
        with pytest.raises(InvalidReplayCode) as info:
            parse("500001300601100012120")
        assert info.value.reason == "checksum mismatch"
        assert info.value.code == "500001300601100012120"


class TestPrefix:
    def test_prefixed_code_decodes_and_keeps_prefix_in_seed(self) -> None:
        code = f"BLUE-CIRCLE-{DEFAULT_V2}"
        decoded = parse(code)
        assert decoded.seed == code
        assert decoded.same_layout(parse(DEFAULT_V2))

    def test_prefixed_helper(self) -> None:
        assert replay_code.prefixed(DEFAULT_V2, "red", "star") == f"RED-STAR-{DEFAULT_V2}"

    @pytest.mark.parametrize("bad", [f"BLUE-{DEFAULT_V2}", f"A-B-C-{DEFAULT_V2}"])
    def test_wrong_segment_count(self, bad) -> None:
        with pytest.raises(InvalidReplayCode, match="COLOR-SHAPE"):
            parse(bad)

    def test_generate_prefix_uses_callers_rng(self) -> None:
        import random

        a = replay_code.generate_prefix(random.Random(5))
        b = replay_code.generate_prefix(random.Random(5))
        assert a == b
        color, shape = a.split("-")
        assert color in replay_code.PREFIX_COLORS
        assert shape in replay_code.PREFIX_SHAPES

    def test_detect_version(self) -> None:
        assert replay_code.detect_version(DEFAULT_V2) is CodeVersion.V2
        assert replay_code.detect_version(DEFAULT_V1) is CodeVersion.V1
        assert replay_code.detect_version(DEFAULT_LEGACY) is CodeVersion.LEGACY
        assert replay_code.detect_version("123") is None
