"""site_walker.crawler: frontier, worker pool and crawl engine."""
