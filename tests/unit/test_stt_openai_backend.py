import unittest

import requests

from siyuan_transcribe.core.audio import ResolvedFile
from siyuan_transcribe.core.errors import MissingCredential, TranscriptionApiError
from siyuan_transcribe.core.transcription import TranscriptionOptions
from siyuan_transcribe.stt.openai_backend import (
    DEFAULT_BASE_URL,
    OpenAITranscriptionBackend,
    build_form_fields,
    normalize_base_url,
    transcriptions_endpoint,
)


class StubResponse:
    def __init__(self, status_code=200, body=None, reason="OK", text=None):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class StubSession:
    def __init__(self, response=None, error=None):
        self.response = response or StubResponse(body={"text": "hello"})
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


AUDIO = ResolvedFile(data=b"RIFF....", filename="note1.wav", content_type="audio/wav")


class NormalizeBaseUrlTests(unittest.TestCase):
    def test_empty_uses_default(self):
        self.assertEqual(normalize_base_url(None), DEFAULT_BASE_URL)
        self.assertEqual(normalize_base_url("   "), DEFAULT_BASE_URL)

    def test_always_ends_with_single_v1(self):
        cases = {
            "https://api.example.com": "https://api.example.com/v1",
            "https://api.example.com/": "https://api.example.com/v1",
            "https://api.example.com/v1": "https://api.example.com/v1",
            "https://api.example.com/v1///": "https://api.example.com/v1",
            "  https://proxy.local/openai/  ": "https://proxy.local/openai/v1",
        }
        for raw, expected in cases.items():
            with self.subTest(raw=raw):
                normalized = normalize_base_url(raw)
                self.assertEqual(normalized, expected)
                self.assertFalse(normalized.endswith("/"))
                self.assertFalse(normalized.endswith("/v1/v1"))

    def test_endpoint_appends_transcriptions_path(self):
        self.assertEqual(transcriptions_endpoint(None), "https://api.openai.com/v1/audio/transcriptions")


class FormFieldTests(unittest.TestCase):
    def test_defaults_model_and_omits_empty_language(self):
        fields = build_form_fields(TranscriptionOptions(api_key="k", model="  ", language=" "))
        self.assertEqual(fields, {"model": "whisper-1"})

    def test_trims_model_and_language(self):
        fields = build_form_fields(TranscriptionOptions(api_key="k", model=" gpt-4o-transcribe ", language=" de "))
        self.assertEqual(fields, {"model": "gpt-4o-transcribe", "language": "de"})


class OpenAITranscriptionBackendTests(unittest.TestCase):
    def test_posts_multipart_with_bearer_header(self):
        session = StubSession(StubResponse(body={"text": "hello world"}))
        backend = OpenAITranscriptionBackend(session=session)

        text = backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test", base_url="https://proxy.local"))

        self.assertEqual(text, "hello world")
        self.assertEqual(len(session.calls), 1)
        url, kwargs = session.calls[0]
        self.assertEqual(url, "https://proxy.local/v1/audio/transcriptions")
        self.assertEqual(kwargs["headers"], {"Authorization": "Bearer sk-test"})
        self.assertEqual(kwargs["files"], {"file": ("note1.wav", b"RIFF....", "audio/wav")})
        self.assertEqual(kwargs["data"], {"model": "whisper-1"})
        self.assertIsNone(kwargs["timeout"])

    def test_missing_text_field_returns_empty_string(self):
        backend = OpenAITranscriptionBackend(session=StubSession(StubResponse(body={})))
        self.assertEqual(backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test")), "")

    def test_error_body_message_is_surfaced(self):
        response = StubResponse(401, body={"error": {"message": "invalid key"}}, reason="Unauthorized")
        backend = OpenAITranscriptionBackend(session=StubSession(response))

        with self.assertRaises(TranscriptionApiError) as ctx:
            backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-bad"))

        self.assertEqual(ctx.exception.message, "invalid key")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_unparseable_error_body_uses_status_text(self):
        response = StubResponse(502, body=None, reason="Bad Gateway")
        backend = OpenAITranscriptionBackend(session=StubSession(response))

        with self.assertRaises(TranscriptionApiError) as ctx:
            backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(str(ctx.exception), "API error: Bad Gateway")

    def test_unfollowed_redirect_status_is_an_error(self):
        response = StubResponse(304, body={"error": {"message": "not modified"}}, reason="Not Modified")
        backend = OpenAITranscriptionBackend(session=StubSession(response))

        with self.assertRaises(TranscriptionApiError) as ctx:
            backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(ctx.exception.message, "not modified")
        self.assertEqual(ctx.exception.status_code, 304)

    def test_non_json_success_body_is_an_error(self):
        backend = OpenAITranscriptionBackend(session=StubSession(StubResponse(200, body=None)))
        with self.assertRaises(TranscriptionApiError):
            backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test"))

    def test_transport_error_is_wrapped_without_retry(self):
        session = StubSession(error=requests.ConnectionError("refused"))
        backend = OpenAITranscriptionBackend(session=session)

        with self.assertRaises(TranscriptionApiError):
            backend.transcribe(AUDIO, TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(len(session.calls), 1)

    def test_requires_api_key(self):
        session = StubSession()
        with self.assertRaises(MissingCredential):
            OpenAITranscriptionBackend(session=session).transcribe(AUDIO, TranscriptionOptions(api_key=""))
        self.assertEqual(session.calls, [])


if __name__ == "__main__":
    unittest.main()
