"""Tests for dialogue segmentation."""

import pytest

from dinner_guests.dialogue import FALLBACK_SPEAKER, DialogueSegmenter, clean_utterance
from dinner_guests.models import DialogueTurn, Transcript


@pytest.fixture
def segmenter():
    return DialogueSegmenter()


def pairs(transcript):
    return [(turn.speaker_label, turn.utterance) for turn in transcript]


class TestSegment:
    """Test splitting generated text into turns."""

    def test_bold_tags(self, segmenter):
        transcript = segmenter.segment('**Plato:** "Hi"\n\n**Socrates:** "Hello"')
        assert pairs(transcript) == [("Plato", "Hi"), ("Socrates", "Hello")]
        assert [turn.ordinal for turn in transcript] == [0, 1]

    def test_plain_text_fallback(self, segmenter):
        transcript = segmenter.segment("just plain text, no tags")
        assert len(transcript) == 1
        assert transcript[0] == DialogueTurn(
            speaker_label=FALLBACK_SPEAKER, utterance="just plain text, no tags", ordinal=0
        )

    def test_empty_input(self, segmenter):
        """Empty or missing input still yields one turn."""
        for text in ("", None):
            transcript = segmenter.segment(text)
            assert len(transcript) == 1
            assert transcript[0].speaker_label == FALLBACK_SPEAKER

    def test_colon_outside_emphasis(self, segmenter):
        text = "**Ada Lovelace**: The engine weaves algebra.\n**Charles Babbage**: Indeed it does."
        assert pairs(segmenter.segment(text)) == [
            ("Ada Lovelace", "The engine weaves algebra."),
            ("Charles Babbage", "Indeed it does."),
        ]

    def test_italic_and_underscore_tags(self, segmenter):
        text = "*Plato:* First.\n__Socrates__: Second."
        assert pairs(segmenter.segment(text)) == [("Plato", "First."), ("Socrates", "Second.")]

    def test_bare_line_tags(self, segmenter):
        text = "Marie Curie: Radium glows.\nAlbert Einstein: So does the imagination."
        assert segmenter.segment(text).speakers == ["Marie Curie", "Albert Einstein"]

    def test_accented_bare_tags(self, segmenter):
        text = 'Émile Zola: "J\'accuse"\nPlato: "Hi"'
        assert pairs(segmenter.segment(text)) == [("Émile Zola", "J'accuse"), ("Plato", "Hi")]

    def test_non_latin_bare_tag(self, segmenter):
        text = "Σωκράτης: Know thyself.\nPlato: Agreed."
        assert segmenter.segment(text).speakers == ["Σωκράτης", "Plato"]

    def test_lowercase_line_label_is_not_a_speaker(self, segmenter):
        text = "Plato: Hi.\nnote: still Plato."
        assert pairs(segmenter.segment(text)) == [("Plato", "Hi.\nnote: still Plato.")]

    def test_multiline_utterance(self, segmenter):
        text = "**Plato:** The first line.\nThe second line.\n\n**Socrates:** Reply."
        transcript = segmenter.segment(text)
        assert transcript[0].utterance == "The first line.\nThe second line."

    def test_preamble_is_dropped(self, segmenter):
        text = "Here is the conversation you asked for.\n\n**Plato:** Hi."
        assert pairs(segmenter.segment(text)) == [("Plato", "Hi.")]

    def test_empty_utterances_skipped(self, segmenter):
        """Tags with nothing after them do not break ordinal numbering."""
        text = '**Plato:** ""\n**Socrates:** Hello.\n**Plato:** Goodbye.'
        transcript = segmenter.segment(text)
        assert pairs(transcript) == [("Socrates", "Hello."), ("Plato", "Goodbye.")]
        assert [turn.ordinal for turn in transcript] == [0, 1]

    def test_speakers_in_first_appearance_order(self, segmenter):
        text = "**A:** one.\n**B:** two.\n**A:** three."
        transcript = segmenter.segment(text)
        assert transcript.speakers == ["A", "B"]
        assert transcript.to_dict()["turns"][2] == {"speaker": "A", "content": "three.", "ordinal": 2}

    def test_find_tags_positions(self, segmenter):
        text = "**Plato:** Hi"
        assert segmenter.find_tags(text) == [("Plato", 0, 10)]


class TestCleanUtterance:
    """Test utterance cleanup."""

    def test_double_quotes(self):
        assert clean_utterance('  "Hello there"  ') == "Hello there"

    def test_curly_quotes(self):
        assert clean_utterance("“Hello there”") == "Hello there"

    def test_single_quotes_only_when_wrapping(self):
        assert clean_utterance("'Hello'") == "Hello"
        assert clean_utterance("It's fine") == "It's fine"

    def test_dangling_closing_quote(self):
        assert clean_utterance('Hello there"') == "Hello there"

    def test_inner_quotes_kept(self):
        assert clean_utterance('He said "no" twice.') == 'He said "no" twice.'


class TestTranscript:
    """Test the transcript invariants."""

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Transcript(turns=())

    def test_gapped_ordinals_rejected(self):
        with pytest.raises(ValueError):
            Transcript(
                turns=(
                    DialogueTurn("A", "one", 0),
                    DialogueTurn("B", "two", 2),
                )
            )
