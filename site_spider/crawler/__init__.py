"""site_spider.crawler: frontier scheduling, scope, dedup and fetching."""
