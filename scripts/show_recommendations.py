"""
Print recommendations for the locally stored watch history.

Usage:
    # Show recommendations
    python scripts/show_recommendations.py

    # Record a finished movie first, then show the top 5
    python scripts/show_recommendations.py --record 603 --title "The Matrix" --progress 1.0 --limit 5

    # Start over
    python scripts/show_recommendations.py --clear
"""

import sys
from pathlib import Path

# Add parent directory to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

import argparse
import logging

from streamcatalog_recommendation_service.models.database import init_db
from streamcatalog_recommendation_service.services import (
    HybridRecommendationService,
    WatchHistoryStore,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Show hybrid movie recommendations')
    parser.add_argument('--limit', type=int, default=20, help='Number of recommendations to print')
    parser.add_argument('--record', type=int, metavar='MOVIE_ID', help='Record a watched movie first')
    parser.add_argument('--title', default='', help='Title for --record')
    parser.add_argument('--progress', type=float, default=1.0, help='Progress for --record (0-1)')
    parser.add_argument('--clear', action='store_true', help='Clear the watch history first')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main execution function."""
    args = parse_args(argv)

    init_db()
    history_store = WatchHistoryStore()

    if args.clear:
        history_store.clear()

    if args.record is not None:
        stored = history_store.record({
            'mediaId': args.record,
            'mediaType': 'movie',
            'title': args.title or f'Movie {args.record}',
            'progress': args.progress,
        })
        if stored is None:
            logger.error(f"Could not record movie {args.record}")
            return 1

    history = history_store.list()
    logger.info(f"Watch history: {len(history)} entries")
    for event in history:
        logger.info(f"  {event.media_type} {event.media_id} '{event.title}' ({event.progress:.0%})")

    service = HybridRecommendationService(history_store=history_store)
    recommendations = service.get_recommendations()[:args.limit]

    logger.info("=" * 70)
    logger.info(f"RECOMMENDATIONS ({len(recommendations)})")
    logger.info("=" * 70)
    for i, movie in enumerate(recommendations, 1):
        logger.info(f"{i:2d}. {movie.title} (ID: {movie.id}, rating: {movie.vote_average:.1f})")

    return 0


if __name__ == '__main__':
    sys.exit(main())
