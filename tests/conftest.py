import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="studio-media-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studio.api.dependencies import (
    get_db,
    get_fal_service,
    get_inpaint_service,
    get_llm_service,
)
from studio.db.base import Base
from studio.db.session import make_engine
from studio.main import app
from studio.services.fal import KONTEXT_EDIT_MODEL, KONTEXT_TEXT_TO_IMAGE_MODEL
from studio.services.llm import GeminiService


class FakeFal:
    """Stands in for FalService; records calls and replays canned results."""

    def __init__(self):
        self.configured = True
        self.transcription = "make the sky purple"
        self.statuses = ["IN_QUEUE", "COMPLETED"]
        self.images = [{"url": "https://fal.media/files/out-1.jpg", "width": 1024, "height": 1024}]
        self.calls = []

    def transcribe(self, audio_base64):
        self.calls.append(("transcribe", len(audio_base64)))
        return self.transcription

    def edit_image(self, image_url, prompt, num_images=1, aspect_ratio=None):
        self.calls.append(("edit_image", image_url, prompt, num_images))
        return [f"https://fal.media/files/edit-{i}.jpg" for i in range(num_images)]

    def submit_generation(self, prompt, aspect_ratio="1:1", num_images=1, identity_image_url=None, seed=None):
        self.calls.append(("submit_generation", prompt, aspect_ratio, identity_image_url))
        model = KONTEXT_EDIT_MODEL if identity_image_url else KONTEXT_TEXT_TO_IMAGE_MODEL
        return "req-123", model

    def generation_status(self, model, request_id):
        self.calls.append(("generation_status", model, request_id))
        return self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]

    def generation_result(self, model, request_id):
        return list(self.images)

    def text_to_image(self, prompt, aspect_ratio):
        self.calls.append(("text_to_image", prompt, aspect_ratio))
        return f"https://fal.media/files/still-{aspect_ratio.replace(':', 'x')}.jpg"

    def animate_image(self, image_url, prompt=None):
        self.calls.append(("animate_image", image_url, prompt))
        return "https://fal.media/files/clip.mp4"


class FakeInpaint:
    def inpaint(self, image_url, mask_data_url, prompt):
        return "https://replicate.delivery/out.png"


class ScriptedGemini(GeminiService):
    """Real GeminiService with the network call replaced by a fixed reply."""

    def __init__(self, reply="INSTRUCTION: brighten\nACTION: Raise exposure on the sky only."):
        super().__init__(api_key="test-key")
        self.reply = reply
        self.prompts = []

    def _generate(self, model, contents, **kwargs):
        self.prompts.append(contents)
        return self.reply


class OfflineGemini(GeminiService):
    def __init__(self):
        super().__init__(api_key="test-key")

    def _generate(self, model, contents, **kwargs):
        raise RuntimeError("Gemini unreachable")


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fal():
    return FakeFal()


@pytest.fixture
def llm():
    return ScriptedGemini()


@pytest.fixture
def client(session_factory, fal, llm):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_fal_service] = lambda: fal
    app.dependency_overrides[get_llm_service] = lambda: llm
    app.dependency_overrides[get_inpaint_service] = lambda: FakeInpaint()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    def headers(user_id):
        return {"X-User-Id": user_id}
    return headers
