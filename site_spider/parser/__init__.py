"""site_spider.parser: content extractors (HTML, regex miners, robots.txt, sitemap.xml)."""
