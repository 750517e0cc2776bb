"""
Tests for the model session lifecycle and invocation.

Run with: pytest tests/test_session.py -v
"""
import numpy as np
import pytest

from onnx_vectorizer import (
    InferenceError,
    ModelLoadError,
    ModelSession,
    SessionDisposedError,
    SessionState,
    VectorizerOptions,
)

from conftest import BERT_INPUTS, FakeSession


class TestModelSessionState:
    """Tests for READY / DISPOSED / UNLOADED transitions."""

    def test_wrapped_session_is_ready(self, bert_session):
        model = ModelSession(bert_session, model_path="bert.onnx")

        assert model.state is SessionState.READY
        assert [i.name for i in model.inputs] == ["input_ids", "attention_mask", "token_type_ids"]
        assert model.outputs[0].shape == ("batch", "sequence", 4)

    def test_release_is_single_shot(self, bert_session):
        model = ModelSession(bert_session)

        model.release()
        model.release()

        assert model.state is SessionState.DISPOSED

    def test_run_after_release_fails(self, bert_session):
        model = ModelSession(bert_session)
        model.release()

        with pytest.raises(SessionDisposedError):
            model.run({"input_ids": np.array([[1]])})
        assert bert_session.calls == 0

    def test_unloaded_session_raises_model_load_error(self):
        model = ModelSession(None, model_path="missing.onnx")

        assert model.state is SessionState.UNLOADED
        with pytest.raises(ModelLoadError, match="missing.onnx"):
            model.run({})


class TestModelSessionRun:
    """Tests for invoking the model."""

    def test_outputs_keyed_by_lowercase_name_in_order(self):
        session = FakeSession(
            BERT_INPUTS,
            [("Last_Hidden_State",), ("Pooler_Output",)],
            lambda feed: [np.zeros((1, 2, 3)), np.ones((1, 3))],
        )

        outputs = ModelSession(session).run({})

        assert list(outputs) == ["last_hidden_state", "pooler_output"]
        assert outputs["pooler_output"].shape == (1, 3)

    def test_runtime_failure_becomes_inference_error(self):
        def broken(feed):
            raise RuntimeError("Got invalid dimensions for input: input_ids")

        model = ModelSession(FakeSession(BERT_INPUTS, [("out",)], broken))

        with pytest.raises(InferenceError, match="invalid dimensions") as exc_info:
            model.run({})
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_skips_sequence_and_map_outputs(self):
        session = FakeSession(
            BERT_INPUTS,
            [("seq_out",), ("token_map",), ("last_hidden_state",)],
            lambda feed: [
                [np.zeros(2), np.zeros(3)],
                {"cls": 0.5},
                np.ones((1, 2, 2), dtype=np.float32),
            ],
        )

        outputs = ModelSession(session).run({})

        assert list(outputs) == ["last_hidden_state"]

    def test_ragged_sequence_output_does_not_break_embedding(self, make_vectorizer):
        session = FakeSession(
            BERT_INPUTS,
            [("seq_out",), ("last_hidden_state",)],
            lambda feed: [[np.zeros(2), np.zeros(3)], np.ones((1, 2, 2), dtype=np.float32)],
        )
        vectorizer = make_vectorizer(session)

        embedding = vectorizer.embed_sync([1, 2])

        np.testing.assert_allclose(embedding, [1.0, 1.0])

    def test_runs_exactly_once_per_call(self, bert_session):
        model = ModelSession(bert_session)

        model.run({"input_ids": np.array([[1, 2]])})

        assert bert_session.calls == 1


class TestModelSessionLoad:
    """Tests for locating and loading the model file."""

    def test_missing_model_raises(self, tmp_path):
        with pytest.raises(ModelLoadError):
            ModelSession.load([tmp_path / "nope.onnx"])

    def test_missing_model_tolerated_when_allowed(self, tmp_path):
        pytest.importorskip("onnxruntime")

        model = ModelSession.load([tmp_path / "nope.onnx"], allow_missing=True)

        assert model.state is SessionState.UNLOADED
        assert model.model_path == str(tmp_path / "nope.onnx")

    def test_corrupt_model_raises(self, tmp_path):
        pytest.importorskip("onnxruntime")
        path = tmp_path / "corrupt.onnx"
        path.write_bytes(b"not a protobuf")

        with pytest.raises(ModelLoadError, match="corrupt.onnx"):
            ModelSession.load([path])

    def test_candidate_paths(self):
        from onnx_vectorizer.config import BASE_DIR, MODELS_DIR

        candidates = VectorizerOptions(model_path="models/bert.onnx").candidate_paths()

        assert (BASE_DIR / "models" / "bert.onnx").resolve() in candidates
        assert (MODELS_DIR / "bert.onnx").resolve() in candidates
        assert len(candidates) == len(set(candidates))


class TestConfig:
    """Tests for environment-driven settings."""

    def test_env_bool(self, monkeypatch):
        from onnx_vectorizer.config import _env_bool

        monkeypatch.setenv("VECTORIZER_TEST_FLAG", "Yes")
        assert _env_bool("VECTORIZER_TEST_FLAG", False) is True

        monkeypatch.setenv("VECTORIZER_TEST_FLAG", "0")
        assert _env_bool("VECTORIZER_TEST_FLAG", True) is False

        monkeypatch.delenv("VECTORIZER_TEST_FLAG")
        assert _env_bool("VECTORIZER_TEST_FLAG", True) is True

    def test_options_defaults(self):
        options = VectorizerOptions()

        assert options.allow_missing_model is False
        assert options.providers
        # Each instance gets its own providers list
        assert VectorizerOptions().providers is not options.providers
