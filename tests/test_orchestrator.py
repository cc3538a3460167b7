"""Tests for the ingestion orchestrator."""

from datetime import timedelta
from itertools import chain, repeat
from unittest.mock import MagicMock, patch

import psycopg

from uutisvahti.config import Config
from uutisvahti.ingestion import IngestionResult
from uutisvahti.models import Source, SourceCategory
from uutisvahti.pipeline import IngestionOrchestrator, run_ingestion
from uutisvahti.pipeline import orchestrator as orchestrator_module


def build(fetcher, scorer, sources, article_storage, fake_source_manager, **kwargs):
    return IngestionOrchestrator(
        fetcher=fetcher,
        scorer=scorer,
        source_manager=fake_source_manager(sources),
        article_storage=article_storage,
        **kwargs,
    )


def items(prefix, count, **extra):
    return [
        {"title": f"{prefix} post {i}", "link": f"https://{prefix}.example.com/{i}", **extra}
        for i in range(count)
    ]


def test_no_active_sources_completes_with_zero_counts(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source
):
    orchestrator = build(
        mock_fetcher({}), scorer, [make_source(1, "Off", active=False)], article_storage, fake_source_manager
    )

    result = orchestrator.run(conn=None)

    assert result.success is True
    assert result.to_response() == {"success": True, "inserted": 0, "skipped": 0}


def test_source_list_failure_fails_the_run(mock_fetcher, scorer, article_storage, fake_source_manager, storage_error):
    orchestrator = IngestionOrchestrator(
        fetcher=mock_fetcher({}),
        scorer=scorer,
        source_manager=fake_source_manager(error=storage_error("connection refused")),
        article_storage=article_storage,
    )

    result = orchestrator.run(conn=None)

    assert result.success is False
    assert result.to_response() == {"error": "connection refused"}


def test_inserts_scored_articles(mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss, now):
    source = make_source(7, "Lab", weight=5)
    feed = rss([
        {
            "title": "New GPT-5 benchmark results",
            "link": "https://lab.example.com/gpt5",
            "guid": "g-1",
            "pubDate": (now - timedelta(hours=1)).strftime("%a, %d %b %Y %H:%M:%S +0000"),
            "description": "&lt;p&gt;Details&lt;/p&gt;",
        },
        {"title": "Weekend reading", "link": "https://lab.example.com/weekend"},
    ])
    orchestrator = build(
        mock_fetcher({source.feed_url: (200, feed)}), scorer, [source], article_storage, fake_source_manager
    )

    result = orchestrator.run(conn=None, now=now)

    assert (result.inserted, result.skipped) == (2, 0)
    gpt5 = article_storage.rows["https://lab.example.com/gpt5"]
    assert gpt5["source_id"] == 7
    assert gpt5["guid"] == "g-1"
    assert gpt5["raw_excerpt"] == "Details"
    assert gpt5["score"] == 65
    assert gpt5["is_significant"] is True

    weekend = article_storage.rows["https://lab.example.com/weekend"]
    assert weekend["score"] == 25
    assert weekend["is_significant"] is False
    # Missing publication time defaults to the run time
    assert weekend["published_at"] == now


def test_second_run_skips_everything(mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss):
    source = make_source(1, "Lab")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("lab", 3)))})
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    first = orchestrator.run(conn=None)
    second = orchestrator.run(conn=None)

    assert (first.inserted, first.skipped) == (3, 0)
    assert (second.inserted, second.skipped) == (0, 3)
    assert len(article_storage.rows) == 3


def test_failed_source_does_not_stop_the_run(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    broken = make_source(1, "Broken")
    down = make_source(2, "Down")
    healthy = make_source(3, "Healthy")
    fetcher = mock_fetcher({
        broken.feed_url: (500, "oops"),
        healthy.feed_url: (200, rss(items("healthy", 2))),
    })
    orchestrator = build(fetcher, scorer, [broken, down, healthy], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert result.success is True
    assert result.inserted == 2
    assert result.sources_failed == 2
    assert result.sources_total == 3


def test_only_first_twenty_entries_are_considered(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    source = make_source(1, "Busy")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("busy", 50)))})
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert result.inserted == 20
    assert len(article_storage.exists_checks) == 20
    assert article_storage.exists_checks[-1] == "https://busy.example.com/19"


def test_entry_cap_is_configurable(mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss):
    source = make_source(1, "Busy")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("busy", 10)))})
    orchestrator = build(
        fetcher, scorer, [source], article_storage, fake_source_manager, max_entries_per_source=3
    )

    assert orchestrator.run(conn=None).inserted == 3


def test_insert_failure_is_absorbed(mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss):
    source = make_source(1, "Lab")
    article_storage.reject_urls.add("https://lab.example.com/1")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("lab", 3)))})
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert (result.inserted, result.skipped, result.failed_inserts) == (2, 0, 1)
    assert result.success is True


def test_concurrent_duplicate_counts_as_skip(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    source = make_source(1, "Lab")
    article_storage.race_urls.add("https://lab.example.com/0")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("lab", 2)))})
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert (result.inserted, result.skipped, result.failed_inserts) == (1, 1, 0)


def test_same_url_in_two_sources_is_stored_once(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    first = make_source(1, "First")
    second = make_source(2, "Second")
    shared = [{"title": "Shared", "link": "https://news.example.com/shared"}]
    fetcher = mock_fetcher({first.feed_url: (200, rss(shared)), second.feed_url: (200, rss(shared))})
    orchestrator = build(fetcher, scorer, [first, second], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert (result.inserted, result.skipped) == (1, 1)
    assert article_storage.rows["https://news.example.com/shared"]["source_id"] == 1


def test_expired_deadline_returns_accumulated_counts(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    source = make_source(1, "Lab")
    fetcher = mock_fetcher({source.feed_url: (200, rss(items("lab", 3)))})
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    with patch.object(orchestrator_module.time, "monotonic", side_effect=chain([0.0], repeat(100.0))):
        result = orchestrator.run(conn=None, deadline=10)

    assert result.success is True
    assert result.timed_out is True
    assert result.inserted == 0
    assert fetcher.requests == []


def test_fetch_timeout_capped_by_deadline(scorer, article_storage, fake_source_manager, make_source):
    source = make_source(1, "Lab")
    fetcher = MagicMock()
    fetcher.timeout = 20.0
    fetcher.fetch.return_value = MagicMock(success=True, text="")
    orchestrator = build(fetcher, scorer, [source], article_storage, fake_source_manager)

    orchestrator.run(conn=None, deadline=5)

    timeout = fetcher.fetch.call_args.kwargs["timeout"]
    assert 0 < timeout <= 5


def test_run_ingestion_reports_unreachable_database(tmp_path):
    config = Config(tmp_path / "config.yaml")

    with patch.object(
        orchestrator_module, "get_connection", side_effect=psycopg.OperationalError("no route to host")
    ):
        result = run_ingestion(config, orchestrator=MagicMock())

    assert result.success is False
    assert "no route to host" in result.error


def test_run_ingestion_records_run(tmp_path):
    config = Config(tmp_path / "config.yaml")
    conn = MagicMock()
    connection = MagicMock()
    connection.__enter__.return_value = conn
    orchestrator = MagicMock()
    orchestrator.run.return_value = IngestionResult(success=True, inserted=4, skipped=1)

    with patch.object(orchestrator_module, "get_connection", return_value=connection), \
            patch.object(orchestrator_module, "RunManager") as run_manager:
        result = run_ingestion(config, deadline=30, orchestrator=orchestrator)

    assert result.inserted == 4
    orchestrator.run.assert_called_once_with(conn, deadline=30)
    recorded = run_manager.return_value.record_run.call_args.args
    assert recorded[0] is conn
    assert recorded[1] is result


def test_invalid_feed_url_fails_only_that_source(
    mock_fetcher, scorer, article_storage, fake_source_manager, make_source, rss
):
    typo = Source(id=1, name="Typo", feed_url="http://[::1/feed", category=SourceCategory.TOOLS)
    healthy = make_source(2, "Healthy")
    fetcher = mock_fetcher({healthy.feed_url: (200, rss(items("healthy", 2)))})
    orchestrator = build(fetcher, scorer, [typo, healthy], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert result.success is True
    assert (result.inserted, result.sources_failed) == (2, 1)


def test_unexpected_fetch_exception_fails_only_that_source(
    scorer, article_storage, fake_source_manager, make_source, rss
):
    broken = make_source(1, "Broken")
    healthy = make_source(2, "Healthy")
    fetcher = MagicMock()
    fetcher.timeout = 20.0
    fetcher.fetch.side_effect = [
        RuntimeError("boom"),
        MagicMock(success=True, text=rss(items("healthy", 1))),
    ]
    orchestrator = build(fetcher, scorer, [broken, healthy], article_storage, fake_source_manager)

    result = orchestrator.run(conn=None)

    assert result.success is True
    assert (result.inserted, result.sources_failed) == (1, 1)


def test_run_ingestion_bounds_connection_wait_by_deadline(tmp_path):
    config = Config(tmp_path / "config.yaml")

    with patch.object(orchestrator_module, "get_connection") as get_connection, \
            patch.object(orchestrator_module, "RunManager"):
        run_ingestion(config, deadline=10, orchestrator=MagicMock())

    assert get_connection.call_args.kwargs["timeout"] == 10
