"""Tests for sample identities and reproducer expressions."""

from __future__ import annotations

import ast
import io
import re
from types import ModuleType

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

import structfuzz
import structfuzz.harness as harness_module
from structfuzz.constants import RC_ERROR, RC_INVALID, RC_OK
from structfuzz.harness import (
    FrontEnd,
    FuzzContext,
    Harness,
    byte_reproducer,
    chain_reproducer,
    output_id,
    sample_id,
    stream_reproducer,
    string_reproducer,
)
from structfuzz.harness import targets as targets_module
from structfuzz.syntax import Program, parse_token_stream


def _call(reproducer: str) -> ast.Call:
    tree = ast.parse(reproducer, mode="eval")
    assert isinstance(tree.body, ast.Call)
    return tree.body


class TestIdentities:
    """Test sample and output ids."""

    def test_sample_id_is_sha1(self) -> None:
        """The empty input has the well-known SHA-1."""
        assert sample_id(b"") == "da39a3ee5e6b4b0d3255bfef95601890afd80709"

    def test_output_id_empty(self) -> None:
        """Empty output is '0'."""
        assert output_id("") == "0"

    def test_output_id_hashes_utf8(self) -> None:
        """Non-empty output hashes its UTF-8 bytes."""
        assert output_id("é") == sample_id("é".encode())


class TestReproducers:
    """Test that reproducers are valid Python replaying the input."""

    def test_byte_form(self) -> None:
        """Bytes are shown as a bytes literal."""
        assert byte_reproducer(b"\x00a") == "run_byte_sample(b'\\x00a')"

    def test_string_form_is_ascii(self) -> None:
        """Strings are escaped to ASCII."""
        assert string_reproducer("é\n") == "run_string_sample('\\xe9\\n')"

    def test_stream_form(self) -> None:
        """Generator samples carry their chunk size."""
        assert stream_reproducer("run_table_sample", 3, b"\x01") == "run_table_sample(3, b'\\x01')"

    def test_chain_keeps_upstream_as_comment(self) -> None:
        """The original reproducer follows as a comment."""
        upstream = stream_reproducer("run_structured_sample", 8, b"\x00")
        chained = chain_reproducer("let", upstream)
        assert chained == f"run_string_sample('let')  # {upstream}"
        assert ast.parse(chained).body

    @given(st.binary(max_size=64))
    def test_byte_reproducer_replays(self, data: bytes) -> None:
        """The argument evaluates back to the input."""
        call = _call(byte_reproducer(data))
        assert ast.literal_eval(call.args[0]) == data

    @given(st.text(max_size=64))
    def test_string_reproducer_replays(self, code: str) -> None:
        """The argument evaluates back to the code."""
        reproducer = string_reproducer(code)
        assert reproducer.isascii()
        assert ast.literal_eval(_call(reproducer).args[0]) == code

    @given(st.integers(min_value=0, max_value=56), st.binary(max_size=32))
    def test_stream_reproducer_replays(self, chunk_size: int, data: bytes) -> None:
        """Both arguments evaluate back."""
        call = _call(stream_reproducer("run_structured_sample", chunk_size, data))
        assert [ast.literal_eval(arg) for arg in call.args] == [chunk_size, data]


# ============================================================================
# REPLAY
# ============================================================================


def _namespace(module: ModuleType) -> dict[str, object]:
    return dict(vars(module))


def _raise_runtime_error(code: str) -> tuple[Program | None, Exception | None]:
    raise RuntimeError("front-end bug")


class TestReplay:
    """Test that printed reproducers run as Python source."""

    @pytest.fixture
    def harness(self, monkeypatch: pytest.MonkeyPatch, stats_context: FuzzContext) -> Harness:
        """Process-wide harness replaced by one writing to the test stream."""
        harness = Harness(stats_context)
        monkeypatch.setattr(targets_module, "_harness", harness)
        return harness

    @pytest.mark.parametrize("module", [structfuzz, harness_module, targets_module])
    @pytest.mark.parametrize(
        "reproducer",
        [
            byte_reproducer(b"let x = 1"),
            string_reproducer("let x ="),
            stream_reproducer("run_structured_sample", 8, b"\x01\x02\x03"),
            stream_reproducer("run_table_sample", 0, b""),
        ],
    )
    def test_names_resolve(self, harness: Harness, module: ModuleType, reproducer: str) -> None:
        """Every reproducer form evaluates in the package namespaces."""
        assert eval(reproducer, _namespace(module)) in (RC_OK, RC_ERROR, RC_INVALID)  # noqa: S307

    def test_dumped_reproducers_replay(self, harness: Harness, out: io.StringIO) -> None:
        """Both halves of a FUZZDUMP reproducer give back the same return code."""
        data = b"let x = 1"
        assert targets_module.run_byte_sample(data) == RC_OK
        line = next(line for line in out.getvalue().splitlines() if line.startswith("FUZZDUMP "))
        reproducer = line.removeprefix("FUZZDUMP ").removesuffix(f" # {sample_id(data)}")
        head, upstream = reproducer.split("  # ", 1)
        assert upstream == byte_reproducer(data)

        namespace = _namespace(harness_module)
        assert eval(reproducer, namespace) == RC_OK  # noqa: S307
        assert eval(upstream, namespace) == RC_OK  # noqa: S307
        assert harness.stats.total == 3

    def test_panic_reproducer_raises_again(
        self, monkeypatch: pytest.MonkeyPatch, stats_context: FuzzContext, out: io.StringIO
    ) -> None:
        """The reproducer printed on a panic replays the same exception."""
        front_end = FrontEnd(parse_stream=parse_token_stream, parse_source=_raise_runtime_error)
        monkeypatch.setattr(targets_module, "_harness", Harness(stats_context, front_end))
        with pytest.raises(RuntimeError):
            targets_module.run_structured_sample(8, b"\x05\x06\x07")

        match = re.search(r"\n\n\t(.+)\n\n", out.getvalue())
        assert match is not None
        reproducer = match.group(1)
        assert "run_structured_sample(8, b'\\x05\\x06\\x07')" in reproducer
        with pytest.raises(RuntimeError, match="front-end bug"):
            eval(reproducer, _namespace(structfuzz))  # noqa: S307

    @given(
        chunk_size=st.sampled_from([0, 1, 3, 8, 13]),
        data=st.binary(max_size=48),
        entry=st.sampled_from(["run_structured_sample", "run_table_sample"]),
    )
    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_stream_reproducer_same_return_code(
        self, quiet_context: FuzzContext, chunk_size: int, data: bytes, entry: str
    ) -> None:
        """Replaying a generator reproducer classifies the sample the same way."""
        direct = getattr(Harness(quiet_context), entry)(chunk_size, data)
        with pytest.MonkeyPatch.context() as mp:
            mp.setattr(targets_module, "_harness", Harness(quiet_context))
            replayed = eval(  # noqa: S307
                stream_reproducer(entry, chunk_size, data), _namespace(targets_module)
            )
        assert replayed == direct
