"""linkcop.crawler: URL handling, visit frontier, status resolution and the page fetcher."""
