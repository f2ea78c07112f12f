"""
Tests for newline-delimited JSON frame decoding.
"""

import json

import pytest

from aicoder.core.errors import DecodeError
from aicoder.core.frames import Frame, FrameDecoder, FrameKind, iter_frames


def ndjson(*records) -> bytes:
    return b"".join(json.dumps(r, ensure_ascii=False).encode("utf-8") + b"\n" for r in records)


def texts(frames) -> str:
    return "".join(f.text for f in frames if f.is_text)


SAMPLE = ndjson(
    {"response": "Here is "},
    {"response": "a command:\n```bash\n"},
    {"response": "echo héllo → wörld\n"},
    {"response": "```\n", "done": False},
    {"response": "", "done": True},
)


class TestFrameDecoder:
    """Tests for FrameDecoder.feed / finish."""

    def test_single_chunk(self):
        decoder = FrameDecoder()
        frames = decoder.feed(SAMPLE)

        assert texts(frames) == "Here is a command:\n```bash\necho héllo → wörld\n```\n"
        assert frames[-1].is_done
        assert decoder.finished

    def test_done_frame_follows_its_text(self):
        frames = FrameDecoder().feed(ndjson({"response": "last", "done": True}))

        assert [f.kind for f in frames] == [FrameKind.TEXT, FrameKind.DONE]
        assert frames[0].text == "last"

    def test_missing_fields_default(self):
        frames = FrameDecoder().feed(b"{}\n")

        assert frames == [Frame.text_fragment("")]

    def test_split_mid_line_waits_for_terminator(self):
        decoder = FrameDecoder()

        assert decoder.feed(b'{"response": "Hel') == []
        assert decoder.pending == b'{"response": "Hel'

        frames = decoder.feed(b'lo"}\n')
        assert frames == [Frame.text_fragment("Hello")]
        assert decoder.pending == b""

    def test_every_two_way_split_reconstructs(self):
        expected = texts(FrameDecoder().feed(SAMPLE))

        for offset in range(len(SAMPLE) + 1):
            decoder = FrameDecoder()
            frames = decoder.feed(SAMPLE[:offset]) + decoder.feed(SAMPLE[offset:])
            frames += decoder.finish()
            assert texts(frames) == expected, f"split at byte {offset}"

    def test_byte_at_a_time_reconstructs(self):
        decoder = FrameDecoder()
        frames = []
        for i in range(len(SAMPLE)):
            frames.extend(decoder.feed(SAMPLE[i:i + 1]))

        assert texts(frames) == "Here is a command:\n```bash\necho héllo → wörld\n```\n"
        assert frames[-1].is_done

    def test_empty_chunk_is_noop(self):
        decoder = FrameDecoder()
        decoder.feed(b'{"response": "a')

        assert decoder.feed(b"") == []
        assert decoder.pending == b'{"response": "a'

    def test_blank_lines_are_skipped(self):
        frames = FrameDecoder().feed(b'\n  \n{"response": "x"}\n\n')

        assert frames == [Frame.text_fragment("x")]

    def test_record_spanning_lines_is_kept_not_dropped(self):
        decoder = FrameDecoder()

        assert decoder.feed(b'{"response":\n') == []
        frames = decoder.feed(b'"split"}\n')

        assert frames == [Frame.text_fragment("split")]

    def test_error_frame_finishes_decoder(self):
        decoder = FrameDecoder()
        frames = decoder.feed(ndjson({"response": "partial"}, {"error": "model crashed"}, {"response": "ignored"}))

        assert frames == [Frame.text_fragment("partial"), Frame.failure("model crashed")]
        assert decoder.finished
        assert decoder.feed(ndjson({"response": "more"})) == []

    def test_empty_error_field_is_not_an_error(self):
        frames = FrameDecoder().feed(ndjson({"response": "ok", "error": ""}))

        assert frames == [Frame.text_fragment("ok")]

    def test_unterminated_final_line_decoded_at_end(self):
        decoder = FrameDecoder()

        assert decoder.feed(b'{"response": "tail", "done": true}') == []
        frames = decoder.finish()

        assert [f.kind for f in frames] == [FrameKind.TEXT, FrameKind.DONE]
        assert frames[0].text == "tail"

    def test_malformed_line_at_end_raises(self):
        decoder = FrameDecoder()
        decoder.feed(b"this is not json\n")

        with pytest.raises(DecodeError) as exc_info:
            decoder.finish()
        assert exc_info.value.data == b"this is not json\n"

    def test_non_object_is_malformed(self):
        decoder = FrameDecoder()
        assert decoder.feed(b"[1, 2, 3]\n") == []

        with pytest.raises(DecodeError):
            decoder.finish()

    def test_wrong_field_type_is_malformed(self):
        decoder = FrameDecoder()
        assert decoder.feed(b'{"response": 42}\n') == []

        with pytest.raises(DecodeError):
            decoder.finish()

    def test_finish_with_nothing_pending(self):
        decoder = FrameDecoder()
        decoder.feed(ndjson({"response": "a"}))

        assert decoder.finish() == []


class TestIterFrames:
    """Tests for the iter_frames generator."""

    def test_stops_pulling_after_error(self):
        def chunks():
            yield b'{"response": "a"}\n{"error": "boom"}\n'
            raise AssertionError("pulled a chunk after the error frame")

        frames = list(iter_frames(chunks()))

        assert frames == [Frame.text_fragment("a"), Frame.failure("boom")]

    def test_stops_pulling_after_completion(self):
        def chunks():
            yield ndjson({"response": "a", "done": True})
            raise AssertionError("pulled a chunk after completion")

        frames = list(iter_frames(chunks()))

        assert frames[-1].is_done

    def test_decodes_remainder_at_end_of_stream(self):
        frames = list(iter_frames([b'{"response": "a"}\n{"respon', b'se": "b"}']))

        assert texts(frames) == "ab"

    def test_raises_decode_error_at_end_of_stream(self):
        with pytest.raises(DecodeError):
            list(iter_frames([b'{"response": "a"}\n{"response": ']))
