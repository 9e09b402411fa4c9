"""Unit tests for TwiML rendering."""
import pytest

from app.services.interview.actions import (
    NO_INPUT_TARGET,
    GatherSpeech,
    Pause,
    Redirect,
    Speak,
)
from app.services.speech.twiml import TwiMLRenderer, escape_xml, format_seconds


BASE_URL = "https://example.ngrok.app"


@pytest.fixture
def renderer():
    return TwiMLRenderer(voice="Polly.Aditi", language="hi-IN")


class TestTwiMLRenderer:
    """Test TwiMLRenderer.render()."""

    def test_document_wrapper(self, renderer):
        twiml = renderer.render([], BASE_URL)

        assert twiml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<Response>" in twiml
        assert twiml.endswith("</Response>")

    def test_speak(self, renderer):
        twiml = renderer.render([Speak(text="नमस्कार।")], BASE_URL)

        assert '<Say voice="Polly.Aditi" language="hi-IN">नमस्कार।</Say>' in twiml

    def test_pause_in_seconds(self, renderer):
        twiml = renderer.render([Pause(duration_ms=500), Pause(duration_ms=1000)], BASE_URL)

        assert '<Pause length="0.5"/>' in twiml
        assert '<Pause length="1"/>' in twiml

    def test_gather(self, renderer):
        twiml = renderer.render(
            [GatherSpeech(prompt_text="कृपया अब बोलें।", timeout_ms=10000)], BASE_URL
        )

        assert (
            f'<Gather input="speech" action="{BASE_URL}/webhooks/voice/gather" method="POST" '
            'language="hi-IN" speechTimeout="auto" timeout="10">'
        ) in twiml
        assert "कृपया अब बोलें।</Say></Gather>" in twiml

    def test_redirect_to_no_input(self, renderer):
        twiml = renderer.render([Redirect(target=NO_INPUT_TARGET)], BASE_URL)

        assert f'<Redirect method="POST">{BASE_URL}/webhooks/voice/no-input</Redirect>' in twiml

    def test_redirect_to_path(self, renderer):
        twiml = renderer.render([Redirect(target="/webhooks/voice/incoming")], BASE_URL + "/")

        assert f"{BASE_URL}/webhooks/voice/incoming</Redirect>" in twiml

    def test_relative_urls_without_base(self, renderer):
        twiml = renderer.render([Redirect(target=NO_INPUT_TARGET)])

        assert '<Redirect method="POST">/webhooks/voice/no-input</Redirect>' in twiml

    def test_actions_keep_order(self, renderer):
        twiml = renderer.render(
            [Pause(duration_ms=500), Speak(text="one"), Speak(text="two")], BASE_URL
        )

        assert twiml.index("<Pause") < twiml.index(">one<") < twiml.index(">two<")

    def test_text_is_escaped(self, renderer):
        twiml = renderer.render([Speak(text='Tom & "Jerry" <3')], BASE_URL)

        assert "Tom &amp; &quot;Jerry&quot; &lt;3" in twiml

    def test_redirect_to(self, renderer):
        twiml = renderer.redirect_to(f"{BASE_URL}/webhooks/voice/incoming")

        assert f'<Redirect method="POST">{BASE_URL}/webhooks/voice/incoming</Redirect>' in twiml


class TestHelpers:
    def test_escape_xml(self):
        assert escape_xml("a&b<c>d\"e'f") == "a&amp;b&lt;c&gt;d&quot;e&apos;f"

    def test_format_seconds(self):
        assert format_seconds(300) == "0.3"
        assert format_seconds(10000) == "10"
