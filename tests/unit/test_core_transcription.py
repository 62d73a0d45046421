import unittest
from unittest.mock import patch

from siyuan_transcribe.core.audio import AudioBlob
from siyuan_transcribe.core.errors import (
    AudioLoadFailure,
    HostApiError,
    MissingCredential,
    TranscriptionApiError,
    UnsupportedFormat,
)
from siyuan_transcribe.core.transcription import TranscriptionEngine, TranscriptionOptions


class StubFileStore:
    def __init__(self, blob=None, error=None):
        self._blob = blob
        self._error = error
        self.calls = []

    def get_file_blob(self, path):
        self.calls.append(path)
        if self._error:
            raise self._error
        return self._blob


class StubBackend:
    def __init__(self, text="hello world", error=None):
        self._text = text
        self._error = error
        self.calls = []

    def transcribe(self, audio, options):
        self.calls.append((audio, options))
        if self._error:
            raise self._error
        return self._text


class CoreTranscriptionTests(unittest.TestCase):
    def test_wav_reference_is_uploaded_under_its_own_name(self):
        store = StubFileStore(AudioBlob(b"RIFF....", "audio/wav"))
        backend = StubBackend("hello from test")
        engine = TranscriptionEngine(store, backend=backend)
        options = TranscriptionOptions(api_key="sk-test")

        result = engine.transcribe("/assets/note1.wav", options)

        self.assertEqual(result, "hello from test")
        audio, passed_options = backend.calls[0]
        self.assertEqual(audio.filename, "note1.wav")
        self.assertEqual(audio.extension, "wav")
        self.assertIs(passed_options, options)

    def test_missing_extension_is_inferred_from_content_type(self):
        backend = StubBackend()
        engine = TranscriptionEngine(StubFileStore(AudioBlob(b"....", "audio/mp4")), backend=backend)

        engine.transcribe("/assets/clip", TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(backend.calls[0][0].filename, "clip.mp4")

    def test_unsupported_extension_fails_before_network(self):
        backend = StubBackend()
        engine = TranscriptionEngine(StubFileStore(AudioBlob(b"....", "audio/wav")), backend=backend)

        with self.assertRaises(UnsupportedFormat) as ctx:
            engine.transcribe("/assets/clip.xyz", TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(ctx.exception.extension, "xyz")
        self.assertEqual(backend.calls, [])

    def test_empty_api_key_fails_without_loading_audio(self):
        store = StubFileStore(AudioBlob(b"....", "audio/wav"))
        backend = StubBackend()
        engine = TranscriptionEngine(store, backend=backend)

        for key in ("", "   "):
            with self.subTest(key=key), self.assertRaises(MissingCredential):
                engine.transcribe("/assets/note1.wav", TranscriptionOptions(api_key=key))

        self.assertEqual(store.calls, [])
        self.assertEqual(backend.calls, [])

    def test_missing_blob_is_load_failure(self):
        engine = TranscriptionEngine(StubFileStore(None), backend=StubBackend())

        with self.assertRaises(AudioLoadFailure) as ctx:
            engine.transcribe("/assets/gone.wav", TranscriptionOptions(api_key="sk-test"))

        self.assertEqual(ctx.exception.reference, "/assets/gone.wav")

    def test_host_error_is_load_failure(self):
        store = StubFileStore(error=HostApiError("/api/file/getFile", "connection refused"))
        engine = TranscriptionEngine(store, backend=StubBackend())

        with self.assertRaises(AudioLoadFailure):
            engine.transcribe("/data/rec.wav", TranscriptionOptions(api_key="sk-test"))

    def test_backend_errors_propagate(self):
        backend = StubBackend(error=TranscriptionApiError("invalid key", status_code=401))
        engine = TranscriptionEngine(StubFileStore(AudioBlob(b"....", "audio/wav")), backend=backend)

        with self.assertRaises(TranscriptionApiError) as ctx:
            engine.transcribe("/assets/note1.wav", TranscriptionOptions(api_key="sk-bad"))

        self.assertEqual(ctx.exception.message, "invalid key")

    def test_empty_text_is_a_valid_result(self):
        engine = TranscriptionEngine(StubFileStore(AudioBlob(b"....", "audio/wav")), backend=StubBackend(""))
        self.assertEqual(engine.transcribe("/assets/silence.wav", TranscriptionOptions(api_key="sk-test")), "")


class TranscriptionOptionsTests(unittest.TestCase):
    def test_from_config_reads_service_settings(self):
        config = {"openai_api_key": "sk-file", "language": "en", "base_url": "https://proxy", "model": ""}
        options = TranscriptionOptions.from_config(config)
        self.assertEqual(options.api_key, "sk-file")
        self.assertEqual(options.language, "en")
        self.assertEqual(options.base_url, "https://proxy")
        self.assertIsNone(options.model)

    def test_from_config_falls_back_to_environment(self):
        with patch.dict("os.environ", {"OPENAI_API_KEY": "sk-env"}):
            options = TranscriptionOptions.from_config({"openai_api_key": ""})
        self.assertEqual(options.api_key, "sk-env")


if __name__ == "__main__":
    unittest.main()
