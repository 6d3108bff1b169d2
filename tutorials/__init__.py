"""Census tree-model and college scraping tutorials."""
