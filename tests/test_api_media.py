import base64
import io
import os

import pytest
from PIL import Image as PILImage

from conftest import OfflineGemini
from studio.api.dependencies import get_llm_service
from studio.core.config import settings
from studio.core.files import safe_segment
from studio.main import app
from studio.services.fal import ImageSourceError, load_image_bytes
from studio.services.llm import sniff_image_mime, strip_code_fence


def _png_bytes(width=8, height=4) -> bytes:
    buf = io.BytesIO()
    PILImage.new("RGB", (width, height), "red").save(buf, format="PNG")
    return buf.getvalue()


def test_health(client) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_unknown_route_uses_error_body(client) -> None:
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert "error" in resp.json()


def test_speech_to_text_rejects_short_payload(client) -> None:
    resp = client.post("/api/speech-to-text", json={"audioBase64": "abc"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Empty or invalid audio payload"}


def test_speech_to_text_returns_transcription(client, fal) -> None:
    resp = client.post("/api/speech-to-text", json={"audioBase64": "A" * 400})
    assert resp.status_code == 200
    assert resp.json() == {"transcription": "make the sky purple"}


def test_speech_to_text_empty_transcript_is_502(client, fal) -> None:
    fal.transcription = "   "
    resp = client.post("/api/speech-to-text", json={"audioBase64": "A" * 400})
    assert resp.status_code == 502
    assert "error" in resp.json()


def test_translate_prompt_requires_command(client) -> None:
    resp = client.post("/api/translate-prompt", json={})
    assert resp.status_code == 400
    assert resp.json()["error"] == "No user command provided"


def test_translate_prompt_returns_text_and_passes_description(client, llm) -> None:
    resp = client.post(
        "/api/translate-prompt",
        json={"userCommand": "make it pop", "imageDescription": "a beach at dusk"},
    )
    assert resp.status_code == 200
    assert resp.json()["translatedPrompt"].strip()
    assert "make it pop" in llm.prompts[-1]
    assert "a beach at dusk" in llm.prompts[-1]


def test_translate_prompt_provider_failure_is_500(client) -> None:
    app.dependency_overrides[get_llm_service] = lambda: OfflineGemini()
    resp = client.post("/api/translate-prompt", json={"userCommand": "x"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to translate prompt"
    assert "unreachable" in resp.json()["details"]


def test_describe_image(client, llm) -> None:
    llm.reply = "A red square."
    payload = base64.b64encode(_png_bytes()).decode()
    resp = client.post("/api/describe-image", json={"imageBase64": payload})
    assert resp.status_code == 200
    assert resp.json() == {"description": "A red square."}

    assert client.post("/api/describe-image", json={}).status_code == 400


def test_edit_image_single_and_multiple(client, fal) -> None:
    one = client.post("/api/edit-image", json={"imageUrl": "https://fal.media/x.jpg", "prompt": "p"})
    assert one.status_code == 200
    assert one.json()["editedImageUrl"] == "https://fal.media/files/edit-0.jpg"

    many = client.post(
        "/api/edit-image",
        json={"imageUrl": "https://fal.media/x.jpg", "prompt": "p", "numImages": 3},
    )
    assert len(many.json()["editedImageUrls"]) == 3


def test_edit_image_validation(client) -> None:
    resp = client.post("/api/edit-image", json={"imageUrl": "https://x"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Image URL and prompt are required"

    bad_ratio = client.post("/api/edit-image", json={"imageUrl": "https://x", "prompt": "p", "aspectRatio": "7:3"})
    assert bad_ratio.status_code == 400


def test_generate_image_submits_and_picks_model(client, fal) -> None:
    resp = client.post("/api/generate-image", json={"prompt": "a fox"})
    assert resp.json() == {
        "requestId": "req-123",
        "status": "IN_QUEUE",
        "model": "fal-ai/flux-pro/kontext/text-to-image",
    }

    resp = client.post("/api/generate-image", json={"prompt": "a fox", "identityImageUrl": "https://fal.media/me.jpg"})
    assert resp.json()["model"] == "fal-ai/flux-pro/kontext"

    assert client.post("/api/generate-image", json={"prompt": "  "}).status_code == 400


def test_generation_status_progresses_to_completed(client, fal) -> None:
    first = client.get("/api/generate-image/status", params={"requestId": "req-123"})
    assert first.json() == {"status": "IN_QUEUE", "requestId": "req-123"}

    done = client.get("/api/generate-image/status", params={"requestId": "req-123"})
    body = done.json()
    assert body["status"] == "COMPLETED"
    assert body["generatedImageUrls"] == fal.images


def test_generation_status_failures(client, fal) -> None:
    assert client.get("/api/generate-image/status").status_code == 400

    fal.statuses = ["COMPLETED"]
    fal.images = []
    empty = client.get("/api/generate-image/status", params={"requestId": "r"})
    assert empty.status_code == 500
    assert empty.json()["status"] == "ERROR"

    fal.statuses = ["FAILED"]
    failed = client.get("/api/generate-image/status", params={"requestId": "r"})
    assert failed.status_code == 500
    assert failed.json()["status"] == "FAILED"


def test_animate_image_requires_key(client, fal) -> None:
    fal.configured = False
    resp = client.post("/api/animate-image", json={"imageUrl": "https://fal.media/x.jpg"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "FAL_KEY not configured"


def test_animate_image_stores_video_in_session(client, as_user) -> None:
    headers = as_user("animator")
    session_id = client.post("/api/sessions", json={}, headers=headers).json()["session"]["id"]

    resp = client.post(
        "/api/animate-image",
        json={"imageUrl": "https://fal.media/x.jpg", "sessionId": session_id},
        headers=headers,
    )
    assert resp.json() == {"videoUrls": ["https://fal.media/files/clip.mp4"]}

    videos = client.get("/api/videos", params={"session_id": session_id}, headers=headers).json()["videos"]
    assert len(videos) == 1
    assert videos[0]["model_id"] == "fal-ai/kling-video/v2.1/pro/image-to-video"


def test_inpaint_image(client) -> None:
    assert client.post("/api/inpaint-image", json={"imageUrl": "u"}).status_code == 400

    resp = client.post(
        "/api/inpaint-image",
        json={"imageUrl": "u", "maskDataUrl": "data:image/png;base64,AA==", "prompt": "a hat"},
    )
    assert resp.json()["success"] is True
    assert resp.json()["inpaintedImageUrl"] == "https://replicate.delivery/out.png"


def test_upload_stores_file_and_reads_dimensions(client, as_user) -> None:
    resp = client.post(
        "/api/upload",
        files={"file": ("pic.png", _png_bytes(8, 4), "image/png")},
        data={"session_id": "7"},
        headers=as_user("uploader"),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["width"] == 8 and body["height"] == 4
    assert body["fileName"].startswith("images/uploader/7/")
    assert body["url"].endswith(body["fileName"])

    served = client.get("/media/" + body["fileName"])
    assert served.status_code == 200


def test_upload_rejects_other_types(client) -> None:
    resp = client.post("/api/upload", files={"file": ("a.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid file type"


def test_load_image_bytes_from_data_url() -> None:
    png = _png_bytes()
    data, content_type, name = load_image_bytes("data:image/png;base64," + base64.b64encode(png).decode())
    assert data == png
    assert content_type == "image/png"
    assert name == "image.png"


@pytest.mark.parametrize("url", ["ftp://host/x.png", "data:text/plain;base64,aGk=", "data:image/png;base64,"])
def test_load_image_bytes_rejects_bad_sources(url) -> None:
    with pytest.raises(ImageSourceError):
        load_image_bytes(url)


def test_mime_sniffing_and_fence_stripping() -> None:
    assert sniff_image_mime("iVBORw0KGgoAAA") == "image/png"
    assert sniff_image_mime("UklGRabc") == "image/webp"
    assert sniff_image_mime("zzz") == "image/jpeg"
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_generation_status_rejects_unknown_model(client, fal) -> None:
    resp = client.get("/api/generate-image/status", params={"requestId": "req-123", "model": "fal-ai/other"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Unsupported model: fal-ai/other"
    assert not any(call[0] == "generation_status" for call in fal.calls)


def test_animate_image_drops_foreign_source_image(client, as_user) -> None:
    owner = as_user("owner-v")
    owner_session = client.post("/api/sessions", json={}, headers=owner).json()["session"]["id"]
    foreign = client.post(
        "/api/images",
        json={"session_id": owner_session, "url": "https://x/secret.jpg", "prompt": "private"},
        headers=owner,
    ).json()["image"]

    headers = as_user("animator-2")
    session_id = client.post("/api/sessions", json={}, headers=headers).json()["session"]["id"]
    client.post(
        "/api/animate-image",
        json={"imageUrl": "https://fal.media/x.jpg", "sessionId": session_id, "sourceImageId": foreign["id"]},
        headers=headers,
    )

    videos = client.get("/api/videos", params={"session_id": session_id}, headers=headers).json()["videos"]
    assert len(videos) == 1
    assert videos[0]["source_image_id"] is None


@pytest.mark.parametrize("bucket", ["..", "../images", "unknown"])
def test_upload_rejects_unknown_buckets(client, bucket) -> None:
    resp = client.post(
        "/api/upload",
        files={"file": ("pic.png", _png_bytes(), "image/png")},
        data={"bucket": bucket},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == f"Unknown bucket: {bucket}"


def test_upload_keeps_dot_user_ids_inside_media_root(client, as_user) -> None:
    resp = client.post(
        "/api/upload",
        files={"file": ("pic.png", _png_bytes(), "image/png")},
        data={"bucket": "character-images"},
        headers=as_user(".."),
    )
    assert resp.status_code == 200
    file_name = resp.json()["fileName"]
    assert file_name.startswith("character-images/_/misc/")
    assert file_name.endswith(".png")

    root = os.path.realpath(settings.MEDIA_ROOT)
    assert os.path.isfile(os.path.join(root, *file_name.split("/")))


def test_safe_segment_never_yields_dot_segments() -> None:
    assert safe_segment("..") == "_"
    assert safe_segment(".") == "_"
    assert safe_segment("") == "_"
    assert safe_segment("../etc") == "_etc"
    assert safe_segment("user@example.com") == "user_example.com"
