import asyncio
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import click
import orjson
from rich.console import Console
from rich.table import Table

from .config import Heuristics, Settings, get_heuristics, get_settings, validate_config
from .ingest.sources import SourceAdapter, gather_posts, generate_mock_adapters
from .logging import LOG_LEVELS, PerformanceLogger, get_logger, log_error, setup_logging
from .models.embedding_client import EmbeddingClient, attach_embeddings, create_embedding_client
from .models.post import Platform, Post
from .processing.pipeline import PostPipeline
from .storage import JsonlPostStore, PostStore

logger = get_logger(__name__)

DEFAULT_LIMIT_PER_SOURCE = 15


@dataclass
class CollectorState:
    """Process-wide collection state, owned by a Collector.

    ``queue`` holds queries that arrived while a cycle was running; the
    collector drains it with ``process_queue``. Nothing here is persisted;
    ``reset`` returns it to a fresh start.
    """
    queue_threshold: int = 10
    enabled_platforms: list[Platform] = field(default_factory=list)
    processed_queries: set[str] = field(default_factory=set)
    queue: list[str] = field(default_factory=list)

    @staticmethod
    def query_key(query: str) -> str:
        return query.lower().strip()

    def mark_processed(self, query: str) -> None:
        self.processed_queries.add(self.query_key(query))

    def is_processed(self, query: str) -> bool:
        return self.query_key(query) in self.processed_queries

    def enqueue(self, query: str) -> int:
        """Queue a query for a later cycle and return the queue length."""
        self.queue.append(query)
        return len(self.queue)

    def dequeue(self) -> str | None:
        return self.queue.pop(0) if self.queue else None

    @property
    def queue_full(self) -> bool:
        return len(self.queue) >= self.queue_threshold

    def clear_processed(self) -> None:
        self.processed_queries.clear()

    def reset(self) -> None:
        self.processed_queries.clear()
        self.queue.clear()

    def status(self) -> dict:
        return {
            "queue_length": len(self.queue),
            "threshold": self.queue_threshold,
            "processed_count": len(self.processed_queries),
            "enabled_platforms": [p.value for p in self.enabled_platforms],
        }


class Collector:
    """Runs one collection cycle per query.

    Sources are fetched concurrently, the batch is annotated and pushed
    through the pipeline, then embedded and stored. Embedding or storage
    failures abort the cycle and propagate; nothing is stored for it.
    One cycle runs at a time; queries arriving meanwhile are queued.
    """

    def __init__(
        self,
        adapters: list[SourceAdapter],
        embedding_client: EmbeddingClient,
        store: PostStore,
        settings: Settings | None = None,
        heuristics: Heuristics | None = None,
    ):
        self.settings = settings or get_settings()
        self.embedding_client = embedding_client
        self.store = store
        self.state = CollectorState(
            queue_threshold=self.settings.queue_threshold,
            enabled_platforms=list(self.settings.enabled_platforms),
        )
        self.adapters = adapters
        self.cycle_running = False
        self.pipeline = PostPipeline(
            heuristics or get_heuristics(),
            min_quality_score=self.settings.min_quality_score,
            max_tags=self.settings.max_tags,
            max_product_mentions=self.settings.max_product_mentions,
        )

    @property
    def enabled_adapters(self) -> list[SourceAdapter]:
        return [a for a in self.adapters if a.platform in self.state.enabled_platforms]

    async def collect_for_query(self, query: str, now: datetime | None = None) -> list[Post]:
        """Collect, clean, rank, embed and store posts for a query.

        Args:
            query: Free-text query
            now: Reference time for age-based rules (defaults to now)

        Returns:
            Stored posts, ranked by boosted relevance; empty when the query
            was queued behind a running cycle

        Raises:
            EmbeddingError: If any embedding batch fails
            StorageError: If the bulk upsert fails
        """
        if self.cycle_running:
            queue_length = self.state.enqueue(query)
            logger.info("Cycle in progress, query queued", query=query, queue_length=queue_length)
            if self.state.queue_full:
                logger.warning("Query queue reached threshold",
                               queue_length=queue_length, threshold=self.state.queue_threshold)
            return []

        self.cycle_running = True
        try:
            return await self._run_cycle(query, now)
        finally:
            self.cycle_running = False

    async def process_queue(self, now: datetime | None = None) -> dict[str, list[Post]]:
        """Run queued queries in arrival order, skipping processed ones."""
        results: dict[str, list[Post]] = {}
        while (query := self.state.dequeue()) is not None:
            if self.state.is_processed(query):
                logger.debug("Skipping processed query", query=query)
                continue
            results[query] = await self.collect_for_query(query, now)
        return results

    async def _run_cycle(self, query: str, now: datetime | None) -> list[Post]:
        with PerformanceLogger("collect_for_query", logger):
            raw_posts = await gather_posts(
                self.enabled_adapters, query, DEFAULT_LIMIT_PER_SOURCE
            )
            if not raw_posts:
                logger.warning("No posts collected", query=query)
                return []

            self.pipeline.annotate(raw_posts)
            posts = self.pipeline.run(raw_posts, query, now)
            if not posts:
                logger.info("No posts survived filtering", query=query)
                return []

            await attach_embeddings(
                posts,
                self.embedding_client,
                batch_size=self.settings.embedding_batch_size,
                pause_seconds=self.settings.embedding_batch_pause_seconds,
            )
            await self.store.bulk_upsert(posts)

            self.state.mark_processed(query)
            logger.info("Collection complete", query=query, stored=len(posts))
            return posts


def _load_posts(path: Path) -> list[Post]:
    data = orjson.loads(path.read_bytes())
    return [Post.model_validate(item) for item in data]


def _print_results(posts: list[Post]) -> None:
    table = Table(title=f"{len(posts)} posts")
    table.add_column("Platform")
    table.add_column("Title")
    table.add_column("Relevance", justify="right")
    table.add_column("Sentiment")
    table.add_column("Domain")
    for post in posts:
        relevance = f"{post.relevance_score:.1f}" if post.relevance_score is not None else "-"
        table.add_row(
            post.platform.value,
            post.title[:60],
            relevance,
            post.sentiment.label if post.sentiment else "-",
            post.domain_context or "-",
        )
    Console(stderr=True).print(table)


@click.group()
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default="WARNING",
              help="Log level (logs go to stderr)")
@click.option("--json-logs/--console-logs", default=False, help="Log output format")
def cli(log_level, json_logs):
    """NovaScan - clean, enrich and rank multi-source social posts."""
    setup_logging(log_level=log_level, json_logging=json_logs)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--query", "-q", help="Score and rank posts against this query")
@click.option("--output", "-o", type=click.File("wb"), default="-", help="Output file (default: stdout)")
@click.option("--min-quality", type=float, help="Composite quality threshold (0-100)")
def process(input_file, query, output, min_quality):
    """Run analysis and the cleanup pipeline over a JSON list of posts."""
    settings = get_settings()
    threshold = min_quality if min_quality is not None else settings.min_quality_score

    try:
        posts = _load_posts(input_file)
    except (ValueError, OSError) as e:
        click.echo(f"Error: could not read posts from {input_file}: {e}", err=True)
        sys.exit(1)

    pipeline = PostPipeline(
        get_heuristics(),
        min_quality_score=threshold,
        max_tags=settings.max_tags,
        max_product_mentions=settings.max_product_mentions,
    )
    pipeline.annotate(posts)
    result = pipeline.run(posts, query)

    output.write(orjson.dumps(
        [p.model_dump(mode="json") for p in result], option=orjson.OPT_INDENT_2
    ))
    output.write(b"\n")


@cli.command()
@click.argument("query")
@click.option("--mock", is_flag=True, help="Use bundled sample sources and mock embeddings")
@click.option("--store", "store_path", type=click.Path(dir_okay=False, path_type=Path),
              help="JSONL store path (default: DATA_DIR/posts.jsonl)")
def collect(query, mock, store_path):
    """Run one collection cycle for QUERY and store the results."""
    settings = get_settings()
    if mock:
        settings.mock = True

    if not validate_config(settings):
        click.echo("Error: configuration validation failed", err=True)
        sys.exit(1)

    if not settings.mock:
        click.echo("Error: no live source adapters are bundled; use --mock", err=True)
        sys.exit(1)

    store = JsonlPostStore(store_path or settings.data_dir / "posts.jsonl")
    collector = Collector(
        generate_mock_adapters(),
        create_embedding_client(settings),
        store,
        settings,
    )

    try:
        posts = asyncio.run(collector.collect_for_query(query))
    except Exception as e:
        logger.error(**log_error(e, context="collect", query=query))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _print_results(posts)


if __name__ == "__main__":
    cli()
