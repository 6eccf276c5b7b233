"""Link Insights — scrape per-link click counts from the Linktree dashboard."""
