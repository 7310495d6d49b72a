import pytest
import yaml

from errors import CancellationError, JobStoreError
from jobs import JobStore


@pytest.fixture(autouse=True)
def use_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def test_list_jobs_missing_file():
    assert JobStore().list_jobs() == []


def test_list_jobs_empty_file(tmp_path):
    (tmp_path / "jobs.yaml").write_text("")
    assert JobStore().list_jobs() == []


def test_schedule_and_list_roundtrip():
    store = JobStore()
    store.schedule("yosemite-march", "232447", "2024-3-5", "2024-3-8")
    assert store.list_jobs() == [
        {"name": "yosemite-march", "campground": "232447", "arrival": "2024-3-5", "departure": "2024-3-8"}
    ]


def test_schedule_writes_unpadded_dates_as_strings(tmp_path):
    JobStore().schedule("j", "232447", "2024-3-5", "2024-3-8")
    job = yaml.safe_load((tmp_path / "jobs.yaml").read_text())[0]
    assert job["arrival"] == "2024-3-5"
    assert job["campground"] == "232447"


def test_schedule_duplicate_name_rejected():
    store = JobStore()
    store.schedule("j", "1", "2024-3-5", "2024-3-8")
    with pytest.raises(ValueError):
        store.schedule("j", "2", "2024-4-5", "2024-4-8")


def test_delete_removes_only_named_job():
    store = JobStore()
    store.schedule("keep", "1", "2024-3-5", "2024-3-8")
    store.schedule("drop", "2", "2024-3-5", "2024-3-8")

    store.delete("drop")

    assert [j["name"] for j in store.list_jobs()] == ["keep"]


def test_delete_unknown_job_raises():
    with pytest.raises(CancellationError):
        JobStore().delete("missing")


def test_delete_unreadable_store_raises(tmp_path):
    store = JobStore(str(tmp_path))  # a directory, not a file
    with pytest.raises(CancellationError):
        store.delete("j")


def test_custom_path(tmp_path):
    store = JobStore(str(tmp_path / "other.yaml"))
    store.schedule("j", "1", "2024-3-5", "2024-3-8")
    assert (tmp_path / "other.yaml").exists()


@pytest.mark.parametrize("content", [
    "- name: [unclosed\n",
    "name: j\ncampground: '1'\n",
    "just a string\n",
    "- j\n- k\n",
])
def test_load_rejects_malformed_file(tmp_path, content):
    (tmp_path / "jobs.yaml").write_text(content)
    with pytest.raises(JobStoreError):
        JobStore().list_jobs()


def test_delete_from_malformed_file_raises_cancellation(tmp_path):
    (tmp_path / "jobs.yaml").write_text("name: j\n")
    with pytest.raises(CancellationError):
        JobStore().delete("j")
