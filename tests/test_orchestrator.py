import logging

from conftest import FakeChain, FakePalette, FakeSummarizer, FakeTagger
from moodtrip.config import Settings
from moodtrip.models import IdeaStatus, ImageSource
from moodtrip.orchestrator import EnrichmentOrchestrator


def make_orchestrator(store, chain=None, palette=None, summarizer=None, tagger=None, settings=None, sink=None):
    return EnrichmentOrchestrator(
        store=store,
        image_chain=chain or FakeChain(),
        palette=palette or FakePalette(),
        summarizer=summarizer or FakeSummarizer(),
        tagger=tagger or FakeTagger(),
        settings=settings or Settings(),
        sink=sink,
    )


class RecordingSink:
    def __init__(self, error=None):
        self.completed = []
        self.error = error

    def on_new_idea(self, group_id, idea_id):
        pass

    def on_moodboard_completed(self, idea_id, payload):
        if self.error:
            raise self.error
        self.completed.append((idea_id, payload))


def test_publishes_fully_enriched_idea(store, draft_idea):
    chain = FakeChain(urls=["https://a/1.jpg", "https://a/2.jpg", "https://a/3.jpg"], provider="Unsplash")
    palette = FakePalette()
    result = make_orchestrator(store, chain=chain, palette=palette).enrich("idea-1")

    assert result.success and not result.skipped and not result.reused_images
    idea = store.get_idea("idea-1")
    assert idea.status == IdeaStatus.PUBLISHED
    assert idea.palette == ["#111111", "#222222", "#333333", "#444444", "#555555"]
    assert idea.summary == "A lovely trip."
    assert idea.tags == ["beach", "summer", "food"]

    images = store.list_images("idea-1")
    assert [i.order for i in images] == [0, 1, 2]
    assert [i.url for i in images] == chain.urls
    assert all(i.provider == "Unsplash" and i.source == ImageSource.STOCK for i in images)
    assert palette.calls == [chain.urls]
    assert chain.calls == ["Summer beach week in Mexico with friends"]


def test_second_run_is_a_noop(store, draft_idea):
    orchestrator = make_orchestrator(store)
    orchestrator.enrich("idea-1")
    before = store.get_idea("idea-1")

    result = orchestrator.enrich("idea-1")
    assert result.success and result.skipped
    assert len(store.list_images("idea-1")) == 2
    assert store.get_idea("idea-1") == before


def test_failure_after_images_reverts_to_draft(store, draft_idea):
    summarizer = FakeSummarizer(error=RuntimeError("model overloaded"))
    result = make_orchestrator(store, summarizer=summarizer).enrich("idea-1")

    assert not result.success
    assert "model overloaded" in result.error
    idea = store.get_idea("idea-1")
    assert idea.status == IdeaStatus.DRAFT
    assert idea.summary is None
    assert idea.tags == []
    assert idea.palette == []
    assert len(store.list_images("idea-1")) == 2


def test_retry_reuses_images_from_partial_run(store, draft_idea):
    make_orchestrator(store, summarizer=FakeSummarizer(error=RuntimeError("x"))).enrich("idea-1")

    chain = FakeChain(urls=["https://other/9.jpg"])
    palette = FakePalette()
    result = make_orchestrator(store, chain=chain, palette=palette).enrich("idea-1")

    assert result.success and result.reused_images
    assert chain.calls == []
    assert palette.calls == [["https://img.test/1.jpg", "https://img.test/2.jpg"]]
    assert len(store.list_images("idea-1")) == 2
    assert store.get_idea("idea-1").status == IdeaStatus.PUBLISHED


def test_published_without_images_is_enriched_again(store, draft_idea):
    store.update_idea("idea-1", status=IdeaStatus.PUBLISHED)
    chain = FakeChain()
    result = make_orchestrator(store, chain=chain).enrich("idea-1")
    assert result.success and not result.skipped
    assert len(chain.calls) == 1


def test_missing_idea(store):
    result = make_orchestrator(store).enrich("nope")
    assert result.not_found
    assert not result.success


def test_every_content_task_attempted_before_failing(store, draft_idea):
    palette = FakePalette(error=RuntimeError("bad image"))
    tagger = FakeTagger()
    summarizer = FakeSummarizer()
    result = make_orchestrator(store, palette=palette, summarizer=summarizer, tagger=tagger).enrich("idea-1")

    assert not result.success
    assert result.error.startswith("palette:")
    assert summarizer.calls == 1
    assert tagger.calls == 1


def test_empty_summary_fails_enrichment(store, draft_idea):
    result = make_orchestrator(store, summarizer=FakeSummarizer(text="")).enrich("idea-1")
    assert not result.success
    assert store.get_idea("idea-1").status == IdeaStatus.DRAFT


def test_chain_returning_nothing_fails(store, draft_idea):
    result = make_orchestrator(store, chain=FakeChain(urls=[])).enrich("idea-1")
    assert not result.success
    assert store.list_images("idea-1") == []


def test_revert_failure_is_logged(store, draft_idea, monkeypatch, caplog):
    original = store.update_idea

    def update(idea_id, **fields):
        if fields.get("status") == IdeaStatus.DRAFT:
            raise ConnectionError("db down")
        return original(idea_id, **fields)

    monkeypatch.setattr(store, "update_idea", update)
    with caplog.at_level(logging.ERROR, logger="moodtrip.orchestrator"):
        result = make_orchestrator(store, tagger=FakeTagger(error=RuntimeError("x"))).enrich("idea-1")

    assert not result.success
    assert any("Failed to revert" in r.getMessage() for r in caplog.records)


def test_completion_sink_receives_payload(store, draft_idea):
    sink = RecordingSink()
    make_orchestrator(store, sink=sink).enrich("idea-1")
    assert sink.completed == [("idea-1", {"images": 2, "reused_images": False, "tags": ["beach", "summer", "food"]})]


def test_failing_sink_does_not_fail_enrichment(store, draft_idea):
    result = make_orchestrator(store, sink=RecordingSink(error=RuntimeError("webhook down"))).enrich("idea-1")
    assert result.success
    assert store.get_idea("idea-1").status == IdeaStatus.PUBLISHED


def test_images_mirrored_when_media_dir_set(store, draft_idea, tmp_path, monkeypatch):
    mirrored = []

    def fake_download(urls, idea_id, media_dir, timeout):
        mirrored.append((list(urls), idea_id, media_dir))
        return [f"/images/ideas/{idea_id}/image-{i + 1}.jpg" for i in range(len(urls))]

    monkeypatch.setattr("moodtrip.orchestrator.download_and_save_images", fake_download)
    palette = FakePalette()
    make_orchestrator(store, palette=palette, settings=Settings(media_dir=tmp_path)).enrich("idea-1")

    assert mirrored[0][1:] == ("idea-1", tmp_path)
    assert [i.url for i in store.list_images("idea-1")] == [
        "/images/ideas/idea-1/image-1.jpg",
        "/images/ideas/idea-1/image-2.jpg",
    ]
    assert palette.calls[0][0] == "/images/ideas/idea-1/image-1.jpg"


def test_from_settings_wires_fallbacks(store):
    orchestrator = EnrichmentOrchestrator.from_settings(store, Settings())
    assert orchestrator.image_chain.strategies == []
    assert orchestrator.summarizer.backend is None

