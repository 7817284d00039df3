"""Seed the trends table with a sample catalog.

Usage:
  seed-trends             # write every sample trend
  seed-trends --dry-run   # print what would be written
"""
import argparse
import asyncio
import logging
import sys

from tech_trends.container import configure_logging, init_container
from tech_trends.db import TrendRepository
from tech_trends.schemas import TrendCreate

logger = logging.getLogger(__name__)

SAMPLE_TRENDS: list[TrendCreate] = [
    # Frontend
    TrendCreate(name="React", category="Frontend", popularity=95, growth=5,
                description="Component-based UI library from Meta, suited to large applications."),
    TrendCreate(name="Next.js", category="Frontend", popularity=88, growth=15,
                description="Full-stack React framework with SSR and SSG."),
    TrendCreate(name="Vue.js", category="Frontend", popularity=75, growth=3,
                description="Flexible JavaScript framework with a gentle learning curve."),
    TrendCreate(name="Svelte", category="Frontend", popularity=45, growth=25,
                description="Framework that compiles components into optimized JavaScript."),
    TrendCreate(name="Tailwind CSS", category="Frontend", popularity=82, growth=20,
                description="Utility-first CSS framework for fast styling."),
    # Backend
    TrendCreate(name="Node.js", category="Backend", popularity=90, growth=2,
                description="JavaScript runtime for server-side applications."),
    TrendCreate(name="Go", category="Backend", popularity=70, growth=12,
                description="Simple, fast compiled language with first-class concurrency."),
    TrendCreate(name="Rust", category="Backend", popularity=55, growth=30,
                description="Systems language focused on memory safety and performance."),
    TrendCreate(name="Python", category="Backend", popularity=92, growth=8,
                description="General-purpose language popular for web, data and ML."),
    # Cloud
    TrendCreate(name="AWS", category="Cloud", popularity=85, growth=5,
                description="The largest public cloud platform."),
    TrendCreate(name="Docker", category="Cloud", popularity=88, growth=3,
                description="Container runtime and image tooling."),
    TrendCreate(name="Kubernetes", category="Cloud", popularity=72, growth=10,
                description="Container orchestration platform."),
    TrendCreate(name="Terraform", category="Cloud", popularity=65, growth=15,
                description="Infrastructure as code across cloud providers."),
    # AI/ML
    TrendCreate(name="ChatGPT/LLM", category="AI/ML", popularity=98, growth=50,
                description="Large language models and the applications built on them."),
    TrendCreate(name="TensorFlow", category="AI/ML", popularity=75, growth=-5,
                description="Machine learning framework from Google."),
    TrendCreate(name="PyTorch", category="AI/ML", popularity=80, growth=10,
                description="Deep learning framework favoured in research."),
    # Database
    TrendCreate(name="PostgreSQL", category="Database", popularity=78, growth=8,
                description="Feature-rich open-source relational database."),
    TrendCreate(name="MongoDB", category="Database", popularity=65, growth=5,
                description="Document-oriented NoSQL database."),
    TrendCreate(name="Redis", category="Database", popularity=72, growth=6,
                description="In-memory data store used for caching and queues."),
    # DevOps
    TrendCreate(name="GitHub Actions", category="DevOps", popularity=80, growth=18,
                description="CI/CD workflows built into GitHub."),
    TrendCreate(name="ArgoCD", category="DevOps", popularity=55, growth=25,
                description="GitOps continuous delivery for Kubernetes."),
]


async def seed(repository: TrendRepository, trends: list[TrendCreate], dry_run: bool = False) -> int:
    """Create each trend; failures are reported and skipped. Returns the number written."""
    written = 0
    for data in trends:
        if dry_run:
            print(f"[dry-run] {data.name} ({data.category})")
            continue
        try:
            trend = await repository.create(data)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to seed %s: %s", data.name, exc)
            continue
        written += 1
        print(f"{trend.name} ({trend.category}) -> {trend.id}")
    return written


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Seed the trends table with sample data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--dry-run", action="store_true", help="Print instead of writing")
    args = parser.parse_args()

    container = init_container()
    configure_logging(container)
    written = asyncio.run(
        seed(container.trend_repository(), SAMPLE_TRENDS, dry_run=args.dry_run)
    )
    if not args.dry_run:
        print(f"Seeded {written}/{len(SAMPLE_TRENDS)} trends")
        return 0 if written == len(SAMPLE_TRENDS) else 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
