from types import SimpleNamespace

import pytest

from conftest import FakeFal
from studio import models
from studio.api.routes import shots as shot_routes
from studio.workers import tasks


class RecordingQueue:
    def __init__(self):
        self.jobs = []

    def enqueue(self, func, *args, **kwargs):
        self.jobs.append((func, args, kwargs))
        return SimpleNamespace(id=f"job-{len(self.jobs)}")


@pytest.fixture
def queue(monkeypatch):
    q = RecordingQueue()
    monkeypatch.setattr(shot_routes, "render_queue", q)
    return q


@pytest.fixture
def worker_fal(monkeypatch, session_factory):
    fake = FakeFal()
    monkeypatch.setattr(tasks, "SessionLocal", session_factory)
    monkeypatch.setattr(tasks, "fal_service", fake)
    return fake


def _shot(db, image_url="https://fal.media/still.jpg", **extra):
    project = models.FilmProject(user_id="00000000-0000-0000-0000-000000000000", title="P")
    db.add(project)
    db.flush()
    alice = models.Character(
        project_id=project.id,
        name="Alice",
        description="A courier",
        visual_description="red raincoat",
        personality_traits=["loyal"],
    )
    db.add(alice)
    db.flush()
    shot = models.Shot(
        project_id=project.id,
        sequence_number=1,
        scene_description="Alice waits at the pier",
        camera_angle="wide",
        characters_in_shot=[alice.id],
        image_url=image_url,
        **extra,
    )
    db.add(shot)
    db.commit()
    db.refresh(shot)
    return shot


def test_animate_route_enqueues_task(client, db, queue) -> None:
    shot = _shot(db)

    resp = client.post(f"/api/film/shots/{shot.id}/animate")

    assert resp.json() == {"shot_id": shot.id, "job_id": "job-1", "status": "generating"}
    func, args, _ = queue.jobs[0]
    assert func is tasks.animate_shot_task
    assert args == (shot.id,)

    db.expire_all()
    assert db.get(models.Shot, shot.id).generation_status == "generating"


def test_animate_route_requires_image(client, db, queue) -> None:
    shot = _shot(db, image_url=None)

    resp = client.post(f"/api/film/shots/{shot.id}/animate")

    assert resp.status_code == 400
    assert resp.json()["error"] == "Shot has no image to animate"
    assert queue.jobs == []


def test_animate_route_unknown_shot(client, queue) -> None:
    assert client.post("/api/film/shots/999/animate").status_code == 404


def test_animate_task_completes_shot(db, worker_fal) -> None:
    shot = _shot(db)

    result = tasks.animate_shot_task(shot.id)

    db.expire_all()
    row = db.get(models.Shot, shot.id)
    assert row.generation_status == "completed"
    assert row.video_url == "https://fal.media/files/clip.mp4"
    assert result.startswith("animated shot")

    _, image_url, prompt = worker_fal.calls[-1]
    assert image_url == "https://fal.media/still.jpg"
    assert "Alice: red raincoat" in prompt


def test_animate_task_marks_failure(db, worker_fal, monkeypatch) -> None:
    shot = _shot(db)

    def boom(image_url, prompt=None):
        raise RuntimeError("kling down")

    monkeypatch.setattr(worker_fal, "animate_image", boom)

    result = tasks.animate_shot_task(shot.id)

    db.expire_all()
    assert db.get(models.Shot, shot.id).generation_status == "failed"
    assert "kling down" in result


def test_animate_task_missing_shot(worker_fal) -> None:
    assert tasks.animate_shot_task(12345) == "shot_id=12345 not found"
